"""Event-based parser core."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from unrealdocpy.diagnostics import Diagnostic
from unrealdocpy.lexer import TokenKind
from unrealdocpy.parser.event import Event, StartEvent, TokenEvent
from unrealdocpy.parser.marker import Marker
from unrealdocpy.parser.options import ParserOptions
from unrealdocpy.parser.parsed_syntax import ParsedSyntax
from unrealdocpy.parser.token_source import TokenSource, TokenSourceCheckpoint
from unrealdocpy.syntax import HeaderSyntaxKind
from unrealdocpy.text import TextRange, TextSize


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    source_checkpoint: TokenSourceCheckpoint
    events_len: int
    diagnostics_len: int
    error_count: int
    speculative_depth: int


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: TextSize | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Event-based recursive-descent parser over a `TokenSource`."""

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._events: list[Event] = []
        self._diagnostics: list[Diagnostic] = []
        self._error_count = 0
        self._speculative_depth = 0

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def events(self) -> list[Event]:
        return self._events

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def current(self) -> TokenKind:
        return self._source.current

    @property
    def current_range(self) -> TextRange:
        return self._source.current_range

    @property
    def current_text(self) -> str:
        return self._source.current_text

    @property
    def position(self) -> TextSize:
        return self._source.position

    @property
    def has_preceding_line_break(self) -> bool:
        return self._source.has_preceding_line_break

    @property
    def has_preceding_trivia(self) -> bool:
        return self._source.has_preceding_trivia

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def at_keyword(self, *words: str) -> bool:
        """True when the current token is an identifier spelled as one of `words`."""
        return self.current == TokenKind.IDENTIFIER and self.current_text in words

    def nth(self, n: int) -> TokenKind:
        return self._source.nth(n)

    def nth_range(self, n: int) -> TextRange:
        return self._source.nth_range(n)

    def nth_text(self, n: int) -> str:
        return self._source.nth_text(n)

    def nth_at_keyword(self, n: int, *words: str) -> bool:
        return self.nth(n) == TokenKind.IDENTIFIER and self.nth_text(n) in words

    def has_nth_preceding_line_break(self, n: int) -> bool:
        return self._source.has_nth_preceding_line_break(n)

    def has_nth_preceding_trivia(self, n: int) -> bool:
        return self._source.has_nth_preceding_trivia(n)

    def start(self) -> Marker:
        pos = len(self._events)
        self._events.append(StartEvent.tombstone())
        return Marker(pos=pos, start=self.position, old_start=pos)

    def checkpoint(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            source_checkpoint=self._source.checkpoint,
            events_len=len(self._events),
            diagnostics_len=len(self._diagnostics),
            error_count=self._error_count,
            speculative_depth=self._speculative_depth,
        )

    def rewind(self, checkpoint: ParserCheckpoint) -> None:
        self._source.rewind(checkpoint.source_checkpoint)
        del self._events[checkpoint.events_len :]
        del self._diagnostics[checkpoint.diagnostics_len :]
        self._error_count = checkpoint.error_count
        self._speculative_depth = checkpoint.speculative_depth

    def has_errors_since(self, checkpoint: ParserCheckpoint) -> bool:
        return self._error_count > checkpoint.error_count

    @contextmanager
    def speculative_parsing(self) -> Iterator[None]:
        self._speculative_depth += 1
        try:
            yield
        finally:
            self._speculative_depth -= 1

    def is_speculative_parsing(self) -> bool:
        return self._speculative_depth > 0

    def bump(self) -> None:
        if self.current == TokenKind.EOF:
            return
        self._events.append(
            TokenEvent(
                kind=HeaderSyntaxKind.from_token_kind(self.current),
                end=self.current_range.end,
            )
        )
        self._source.bump()

    def bump_any(self) -> None:
        self.bump()

    def eat(self, kind: TokenKind) -> bool:
        if self.current == kind:
            self.bump()
            return True
        return False

    def eat_keyword(self, *words: str) -> bool:
        if self.at_keyword(*words):
            self.bump()
            return True
        return False

    def expect(self, kind: TokenKind, diagnostic: Diagnostic) -> ParsedSyntax:
        if self.eat(kind):
            return ParsedSyntax.present()
        self.error(diagnostic)
        return ParsedSyntax.absent()

    def error(self, diagnostic: Diagnostic) -> None:
        if diagnostic.severity == "error":
            self._error_count += 1
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.range.start == diagnostic.range.start:
                return
        self._diagnostics.append(diagnostic)

    def finish(self) -> tuple[list[Event], list[Diagnostic]]:
        return self._events, self._diagnostics
