"""Parser recovery primitives."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from unrealdocpy.lexer import TokenKind
from unrealdocpy.parser.marker import CompletedMarker
from unrealdocpy.syntax import HeaderSyntaxKind

if TYPE_CHECKING:
    from unrealdocpy.parser.parser import Parser


class RecoveryError(StrEnum):
    EOF = "eof"
    ALREADY_RECOVERED = "already_recovered"
    RECOVERY_DISABLED = "recovery_disabled"


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Consume tokens into a `node_kind` node until a safe token is reached.

    The offending token is always consumed, so a line-break boundary only
    applies from the second token on.
    """

    node_kind: HeaderSyntaxKind
    recovery_set: frozenset[TokenKind]
    line_break: bool = False

    def enable_recovery_on_line_break(self) -> ParseRecoveryTokenSet:
        return replace(self, line_break=True)

    def recover(self, parser: Parser) -> tuple[CompletedMarker | None, RecoveryError | None]:
        if parser.at(TokenKind.EOF):
            return None, RecoveryError.EOF

        if parser.at_set(self.recovery_set):
            return None, RecoveryError.ALREADY_RECOVERED

        if parser.is_speculative_parsing():
            return None, RecoveryError.RECOVERY_DISABLED

        marker = parser.start()
        parser.bump_any()
        while not parser.at(TokenKind.EOF) and not self.is_at_recovered(parser):
            parser.bump_any()

        return marker.complete(parser, self.node_kind), None

    def is_at_recovered(self, parser: Parser) -> bool:
        return parser.at_set(self.recovery_set) or (self.line_break and parser.has_preceding_line_break)
