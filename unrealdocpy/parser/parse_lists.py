"""Reusable node-list parse loop."""

from collections.abc import Callable
from dataclasses import dataclass

from unrealdocpy.lexer import TokenKind
from unrealdocpy.parser.marker import CompletedMarker
from unrealdocpy.parser.parsed_syntax import ParsedSyntax
from unrealdocpy.parser.parser import Parser, ParserProgress
from unrealdocpy.syntax import HeaderSyntaxKind


@dataclass(slots=True)
class ParseNodeList:
    """Non-separated list parser with progress checks and a recovery hook.

    `parse_list` wraps the elements in a `list_kind` node; `parse_elements`
    only runs the loop, for lists whose enclosing node also owns delimiters.
    """

    list_kind: HeaderSyntaxKind
    is_at_list_end: Callable[[Parser], bool]
    parse_element: Callable[[Parser], ParsedSyntax]
    recover: Callable[[Parser, ParsedSyntax], bool]

    def parse_list(self, parser: Parser) -> CompletedMarker:
        marker = parser.start()
        self.parse_elements(parser)
        return marker.complete(parser, self.list_kind)

    def parse_elements(self, parser: Parser) -> None:
        progress = ParserProgress()
        while not parser.at(TokenKind.EOF) and not self.is_at_list_end(parser):
            progress.assert_progressing(parser)
            parsed = self.parse_element(parser)
            if not self.recover(parser, parsed):
                break
