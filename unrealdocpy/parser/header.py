"""High-level parse entrypoints for reflected C++ header text."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from unrealdocpy.diagnostics import Diagnostic, collect_diagnostics
from unrealdocpy.lexer import Trivia
from unrealdocpy.parser.event import Event, process_events
from unrealdocpy.parser.grammar import parse_element_fragment_root, parse_file
from unrealdocpy.parser.options import ParseMode, ParserOptions
from unrealdocpy.parser.parser import Parser
from unrealdocpy.parser.token_source import TokenSource
from unrealdocpy.parser.tree_sink import LosslessTreeSink, ParsedGreenTree

if TYPE_CHECKING:
    from unrealdocpy.pipeline import HeaderParseResult


def _resolve_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def build_lossless_tree(
    text: str,
    events: list[Event],
    trivia: list[Trivia],
    diagnostics: list[Diagnostic],
) -> ParsedGreenTree:
    sink = LosslessTreeSink(text=text, trivia=trivia)
    process_events(sink, events, diagnostics)
    return sink.finish()


def parse_header(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ParsedGreenTree:
    """Parse a whole header into a ROOT > FILE tree."""
    resolved_options = _resolve_options(options=options, mode=mode)
    source = TokenSource.from_text(text)
    parser = Parser(source, options=resolved_options)

    parse_file(parser)
    return _finish(text, source, parser)


def parse_element_fragment(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ParsedGreenTree:
    """Parse text that must hold exactly one element, as proxy contents do."""
    resolved_options = _resolve_options(options=options, mode=mode)
    source = TokenSource.from_text(text)
    parser = Parser(source, options=resolved_options)

    parse_element_fragment_root(parser)
    return _finish(text, source, parser)


def _finish(text: str, source: TokenSource, parser: Parser) -> ParsedGreenTree:
    events, parser_diagnostics = parser.finish()
    trivia, lexer_diagnostics = source.finish()
    diagnostics = collect_diagnostics(lexer_diagnostics, parser_diagnostics)

    return build_lossless_tree(
        text=text,
        events=events,
        trivia=trivia,
        diagnostics=diagnostics,
    )


def parse_result(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    path: Path | str = Path("<memory>"),
) -> HeaderParseResult:
    from unrealdocpy.pipeline import HeaderParseResult

    resolved_options = _resolve_options(options=options, mode=mode)
    parsed = parse_header(text, options=resolved_options)
    return HeaderParseResult(
        source_text=text,
        parsed=parsed,
        options=resolved_options,
        path=Path(path),
    )
