"""Entrypoints that turn header text or files into a Document."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from unrealdocpy.config import Settings
from unrealdocpy.diagnostics import HeaderParseError
from unrealdocpy.document import Document
from unrealdocpy.parser import ParseMode, ParserOptions, parse_result
from unrealdocpy.pipeline.result import HeaderParseResult
from unrealdocpy.pipeline.results import FileFailure, HeaderFilesRunResult, HeaderRunResult

logger = logging.getLogger(__name__)

MEMORY_PATH = Path("<memory>")


def parse_header_text(
    text: str,
    settings: Settings | None = None,
    *,
    path: Path | str = MEMORY_PATH,
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
    parse: HeaderParseResult | None = None,
    document: Document | None = None,
) -> HeaderRunResult:
    """Parse one header and build its entities.

    The header is built into a Document of its own; when `document` is given,
    that per-file Document is merged into it only after the whole file built
    without error, and the shared Document is returned.
    Raises `HeaderSyntaxError` or `MalformedFragmentError`.
    """
    resolved_settings = settings if settings is not None else Settings()
    resolved_parse = _resolve_parse(
        text,
        path=Path(path),
        settings=resolved_settings,
        options=options,
        mode=mode,
        parse=parse,
    )
    built = resolved_parse.build_document(resolved_settings.export)
    if document is not None:
        document.merge(built)
        built = document
    return HeaderRunResult(parse=resolved_parse, document=built, diagnostics=resolved_parse.diagnostics)


def parse_header_file(
    path: Path | str,
    settings: Settings | None = None,
    *,
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
    document: Document | None = None,
) -> HeaderRunResult:
    """Read and parse one header file (UTF-8, an optional BOM is dropped)."""
    resolved_path = Path(path)
    text = resolved_path.read_text(encoding="utf-8-sig")
    logger.debug("Parsing %s", resolved_path)
    return parse_header_text(
        text,
        settings,
        path=resolved_path,
        options=options,
        mode=mode,
        document=document,
    )


def parse_header_files(
    paths: Iterable[Path | str],
    settings: Settings | None = None,
    *,
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
    document: Document | None = None,
) -> HeaderFilesRunResult:
    """Parse headers in order into one Document.

    A file that fails to parse is logged and recorded; it contributes nothing
    and the remaining files are still processed.
    """
    result = HeaderFilesRunResult(document=document if document is not None else Document())
    for path in paths:
        resolved_path = Path(path)
        try:
            parse_header_file(
                resolved_path,
                settings,
                options=options,
                mode=mode,
                document=result.document,
            )
        except HeaderParseError as exc:
            logger.error("Failed to parse %s: %s", resolved_path, exc.message)
            result.failures.append(FileFailure(path=resolved_path, error=exc))
            continue
        result.parsed_paths.append(resolved_path)

    logger.debug(
        "Parsed %d header(s), %d failure(s)",
        len(result.parsed_paths),
        len(result.failures),
    )
    return result


def _resolve_parse(
    text: str,
    *,
    path: Path,
    settings: Settings,
    options: ParserOptions | None,
    mode: ParseMode | None,
    parse: HeaderParseResult | None,
) -> HeaderParseResult:
    if parse is not None:
        if options is not None or mode is not None:
            raise ValueError("Pass either parse or options/mode, not both")
        return parse
    if options is None and mode is None:
        mode = settings.parse_mode
    return parse_result(text, options=options, mode=mode, path=path)
