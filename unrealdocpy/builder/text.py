"""Text primitives shared by the semantic builder."""

DOC_COMMENT_MARKER = "///"


def split_lines(text: str) -> list[str]:
    """Split on `\\n`, dropping one trailing `\\r` per line and a final empty line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def strip_doc_comments(text: str) -> str:
    """Keep what follows `///` on each line, trimmed; lines without it become empty."""
    processed: list[str] = []
    for line in split_lines(text):
        location = line.find(DOC_COMMENT_MARKER)
        if location < 0:
            processed.append("")
        else:
            processed.append(line[location + len(DOC_COMMENT_MARKER) :].strip())
    return "\n".join(processed)


def normalize_snippet(text: str) -> str:
    """Remove the indentation shared by every line, blank lines included."""
    lines = split_lines(text)
    if not lines:
        return ""
    level = min(_leading_whitespace(line) for line in lines)
    return "\n".join(line[level:] for line in lines)


def _leading_whitespace(line: str) -> int:
    count = 0
    for char in line:
        if not char.isspace():
            break
        count += 1
    return count
