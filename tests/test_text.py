from unrealdocpy.builder import normalize_snippet, split_lines, strip_doc_comments
from unrealdocpy.text import LineIndex, TextRange, TextSize


def test_split_lines_drops_carriage_returns_and_final_empty_line() -> None:
    assert split_lines("") == []
    assert split_lines("a\r\nb\n") == ["a", "b"]
    assert split_lines("a\n\nb") == ["a", "", "b"]
    assert split_lines("\n") == [""]


def test_strip_doc_comments_keeps_text_after_marker() -> None:
    text = "/// First line.\n    ///   Indented.\n///\n/// Last."

    assert strip_doc_comments(text) == "First line.\nIndented.\n\nLast."


def test_strip_doc_comments_lines_without_marker_become_blank() -> None:
    text = "/// Above.\n\n// plain comment\n/// Below."

    assert strip_doc_comments(text) == "Above.\n\n\nBelow."


def test_normalize_snippet_removes_shared_indentation() -> None:
    text = "    a\n    b\n  c\n      d"

    assert normalize_snippet(text) == "  a\n  b\nc\n    d"


def test_normalize_snippet_counts_blank_lines() -> None:
    assert normalize_snippet("    a\n\n    b") == "    a\n\n    b"
    assert normalize_snippet("\tx\n\t\ty") == "x\n\ty"
    assert normalize_snippet("") == ""


def test_line_index_maps_offsets_to_one_based_lines_and_columns() -> None:
    index = LineIndex("ab\ncd\r\nef")

    assert index.line_count == 3
    assert index.line_col(0) == (1, 1)
    assert index.line_col(1) == (1, 2)
    assert index.line_col(3) == (2, 1)
    assert index.line_col(TextSize(7)) == (3, 1)
    assert index.line(8) == 3


def test_text_range_invariants() -> None:
    first = TextRange.at(TextSize(2), TextSize(3))
    second = TextRange.empty(TextSize(9))

    assert first.as_tuple() == (2, 5)
    assert second.is_empty()
    assert first.len() == TextSize(3)
    assert first.end == TextSize(5)

    try:
        TextRange(5, 2)
    except ValueError as exc:
        assert "start > end" in str(exc)
    else:
        raise AssertionError("Expected ValueError for an inverted range")
