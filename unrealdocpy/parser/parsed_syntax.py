"""Result wrapper returned by grammar routines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unrealdocpy.parser.marker import CompletedMarker


@dataclass(frozen=True, slots=True)
class ParsedSyntax:
    """Whether a rule matched, plus the node it completed when it built one."""

    marker: CompletedMarker | None = None
    ok: bool = False

    @staticmethod
    def present(marker: CompletedMarker | None = None) -> ParsedSyntax:
        return ParsedSyntax(marker=marker, ok=True)

    @staticmethod
    def absent() -> ParsedSyntax:
        return ParsedSyntax()

    def is_present(self) -> bool:
        return self.ok

    def is_absent(self) -> bool:
        return not self.ok
