"""Markers for event-based parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from unrealdocpy.parser.event import FinishEvent, StartEvent, TokenEvent
from unrealdocpy.syntax import HeaderSyntaxKind
from unrealdocpy.text import TextRange, TextSize

if TYPE_CHECKING:
    from unrealdocpy.parser.parser import Parser


@dataclass(slots=True)
class Marker:
    pos: int
    start: TextSize
    old_start: int
    child_idx: int | None = None

    def complete(self, parser: Parser, kind: HeaderSyntaxKind) -> CompletedMarker:
        event = parser.events[self.pos]
        if not isinstance(event, StartEvent):
            raise RuntimeError("Marker must point to a StartEvent")
        parser.events[self.pos] = StartEvent(kind=kind, forward_parent=event.forward_parent)

        finish_pos = len(parser.events)
        parser.events.append(FinishEvent())
        return CompletedMarker(
            start_pos=self.pos,
            finish_pos=finish_pos,
            offset=self.start,
            old_start=self.old_start,
        )

    def abandon(self, parser: Parser) -> None:
        if self.pos == len(parser.events) - 1:
            event = parser.events[-1]
            if isinstance(event, StartEvent) and event.forward_parent is None:
                parser.events.pop()

        if self.child_idx is not None:
            event = parser.events[self.child_idx]
            if isinstance(event, StartEvent):
                parser.events[self.child_idx] = StartEvent(kind=event.kind)


@dataclass(frozen=True, slots=True)
class CompletedMarker:
    start_pos: int
    finish_pos: int
    offset: TextSize
    old_start: int

    def change_kind(self, parser: Parser, new_kind: HeaderSyntaxKind) -> None:
        event = parser.events[self.start_pos]
        if not isinstance(event, StartEvent):
            raise RuntimeError("CompletedMarker points to non-start event")
        parser.events[self.start_pos] = StartEvent(kind=new_kind, forward_parent=event.forward_parent)

    def range(self, parser: Parser) -> TextRange:
        end = self.offset
        for event in reversed(parser.events[self.old_start : self.finish_pos]):
            if isinstance(event, TokenEvent):
                end = event.end
                break
        return TextRange.new(self.offset, end)

    def text(self, parser: Parser) -> str:
        rng = self.range(parser)
        return parser.source.text[rng.start.value : rng.end.value]

    def precede(self, parser: Parser) -> Marker:
        marker = parser.start()
        event = parser.events[self.start_pos]
        if not isinstance(event, StartEvent):
            raise RuntimeError("CompletedMarker points to non-start event")
        distance = marker.pos - self.start_pos
        if distance <= 0:
            raise RuntimeError("Invalid precede distance")
        parser.events[self.start_pos] = StartEvent(kind=event.kind, forward_parent=distance)

        marker.child_idx = self.start_pos
        marker.start = self.offset
        marker.old_start = min(marker.old_start, self.old_start)
        return marker
