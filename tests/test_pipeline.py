import logging
from pathlib import Path

import pytest

from tests._shared_cases import case_source
from unrealdocpy.config import ExportSettings, Settings
from unrealdocpy.diagnostics import (
    PARSER_PERMISSIVE_EXTRA_RBRACE,
    PARSER_UNEXPECTED_RBRACE,
    HeaderSyntaxError,
    MalformedFragmentError,
)
from unrealdocpy.document import Document
from unrealdocpy.parser import ParseMode, ParserOptions, parse_result
from unrealdocpy.pipeline import parse_header_file, parse_header_files, parse_header_text

_ENUM_SOURCE = "/// Kind.\nUENUM()\nenum class EKind : uint8 { A, B };\n"


def test_parse_header_text_builds_document() -> None:
    result = parse_header_text(case_source("example_header"), path="Example.h")

    assert result.document.enums.names() == ["EKind"]
    assert result.document.classes.names() == ["UExampleComponent"]
    assert result.parse.filename == "Example.h"
    assert result.diagnostics == result.parse.diagnostics


def test_parse_header_text_reuses_a_prior_parse() -> None:
    parse = parse_result(_ENUM_SOURCE, path="Kind.h")

    first = parse_header_text(_ENUM_SOURCE, parse=parse)
    second = parse_header_text(_ENUM_SOURCE, parse=parse)

    assert first.parse is parse
    assert second.parse is parse
    assert parse.syntax_root() is parse.syntax_root()
    enum = first.document.enums.get("EKind")
    assert enum is not None
    assert enum.filename == "Kind.h"


def test_parse_header_text_rejects_parse_with_options() -> None:
    parse = parse_result(_ENUM_SOURCE)

    with pytest.raises(ValueError, match="Pass either parse or options/mode, not both"):
        parse_header_text(_ENUM_SOURCE, parse=parse, mode=ParseMode.PERMISSIVE)
    with pytest.raises(ValueError, match="Pass either parse or options/mode, not both"):
        parse_header_text(_ENUM_SOURCE, parse=parse, options=ParserOptions())


def test_syntax_error_reports_path_line_and_column() -> None:
    source = case_source("edge_case_extraneous_closing_brace_fails_in_strict_mode")

    with pytest.raises(HeaderSyntaxError) as info:
        parse_header_text(source, path="Broken.h")

    error = info.value
    assert error.path == Path("Broken.h")
    assert (error.line, error.column) == (3, 1)
    assert error.diagnostics[0].code == PARSER_UNEXPECTED_RBRACE.code
    assert str(error).startswith("Broken.h:3:1: ")


def test_settings_parse_mode_is_used_when_no_mode_is_given() -> None:
    source = case_source("edge_case_extraneous_closing_brace_fails_in_strict_mode")
    settings = Settings(parse_mode=ParseMode.PERMISSIVE)

    result = parse_header_text(source, settings)

    assert result.document.enums.names() == ["EKind"]
    assert [diagnostic.code for diagnostic in result.diagnostics] == [PARSER_PERMISSIVE_EXTRA_RBRACE.code]

    with pytest.raises(HeaderSyntaxError):
        parse_header_text(source, settings, mode=ParseMode.STRICT)


def test_export_settings_flow_through_the_pipeline() -> None:
    settings = Settings(export=ExportSettings(show_all=False))
    source = "UENUM()\nenum class EHidden : uint8 { A };\n" + _ENUM_SOURCE

    result = parse_header_text(source, settings)

    assert result.document.enums.names() == ["EKind"]


def test_parse_header_file_reads_utf8_with_bom(tmp_path: Path) -> None:
    header = tmp_path / "Kind.h"
    header.write_bytes(b"\xef\xbb\xbf" + _ENUM_SOURCE.encode("utf-8"))

    result = parse_header_file(header)

    enum = result.document.enums.get("EKind")
    assert enum is not None
    assert enum.filename == "Kind.h"
    assert enum.line == 2
    assert result.parse.source_text == _ENUM_SOURCE


def test_parse_header_files_collects_failures_and_continues(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    good = tmp_path / "Good.h"
    good.write_text(_ENUM_SOURCE, encoding="utf-8")
    broken = tmp_path / "Broken.h"
    broken.write_text(case_source("edge_case_extraneous_closing_brace_fails_in_strict_mode"), encoding="utf-8")
    malformed = tmp_path / "Proxy.h"
    malformed.write_text("//// [proxy: core]\n/// Docs.\n//// this is not ( valid\n//// [/proxy]\n", encoding="utf-8")
    other = tmp_path / "Other.h"
    other.write_text("/// Helper.\nint32 Helper();\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        result = parse_header_files([good, broken, malformed, other])

    assert result.parsed_paths == [good, other]
    assert [failure.path for failure in result.failures] == [broken, malformed]
    assert isinstance(result.failures[0].error, HeaderSyntaxError)
    assert isinstance(result.failures[1].error, MalformedFragmentError)
    assert result.has_failures
    assert f"Failed to parse {broken}" in caplog.text

    assert result.document.enums.names() == ["EKind"]
    assert result.document.functions.names() == ["Helper"]
    assert result.document.proxy_functions == []


def test_failed_file_contributes_nothing(tmp_path: Path) -> None:
    partial = tmp_path / "Partial.h"
    partial.write_text(
        "UENUM()\nenum class EFirst : uint8 { A };\n//// [proxy]\n/// Docs.\n//// not ( valid\n//// [/proxy]\n",
        encoding="utf-8",
    )

    result = parse_header_files([partial])

    assert result.parsed_paths == []
    assert result.document.is_empty


def test_shared_document_overwrites_across_files(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    first = tmp_path / "First.h"
    first.write_text(_ENUM_SOURCE, encoding="utf-8")
    second = tmp_path / "Second.h"
    second.write_text("UENUM()\nenum class EKind : uint8 { C };\n", encoding="utf-8")
    document = Document()

    with caplog.at_level(logging.WARNING):
        result = parse_header_files([first, second], document=document)

    assert result.document is document
    enum = document.enums.get("EKind")
    assert enum is not None
    assert enum.variants == ("C",)
    assert enum.filename == "Second.h"
    assert "Overwriting existing enum: EKind" in caplog.text
