"""Shared parse carriers and lazy pipeline entrypoint exports."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from unrealdocpy.parser.options import ParseMode, ParserOptions
from unrealdocpy.pipeline.result import HeaderParseResult, ParseResultBase
from unrealdocpy.pipeline.results import FileFailure, HeaderFilesRunResult, HeaderRunResult

if TYPE_CHECKING:
    from unrealdocpy.config import Settings
    from unrealdocpy.document import Document


def parse_header_text(
    text: str,
    settings: Settings | None = None,
    *,
    path: Path | str = Path("<memory>"),
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
    parse: HeaderParseResult | None = None,
    document: Document | None = None,
) -> HeaderRunResult:
    from unrealdocpy.pipeline.entrypoints import parse_header_text as _parse_header_text

    return _parse_header_text(
        text,
        settings,
        path=path,
        options=options,
        mode=mode,
        parse=parse,
        document=document,
    )


def parse_header_file(
    path: Path | str,
    settings: Settings | None = None,
    *,
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
    document: Document | None = None,
) -> HeaderRunResult:
    from unrealdocpy.pipeline.entrypoints import parse_header_file as _parse_header_file

    return _parse_header_file(path, settings, options=options, mode=mode, document=document)


def parse_header_files(
    paths: Iterable[Path | str],
    settings: Settings | None = None,
    *,
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
    document: Document | None = None,
) -> HeaderFilesRunResult:
    from unrealdocpy.pipeline.entrypoints import parse_header_files as _parse_header_files

    return _parse_header_files(paths, settings, options=options, mode=mode, document=document)


__all__ = [
    "FileFailure",
    "HeaderFilesRunResult",
    "HeaderParseResult",
    "HeaderRunResult",
    "ParseResultBase",
    "parse_header_file",
    "parse_header_files",
    "parse_header_text",
]
