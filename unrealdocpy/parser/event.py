"""Parser events and their replay into a tree sink."""

from dataclasses import dataclass
from typing import Protocol

from unrealdocpy.diagnostics import Diagnostic
from unrealdocpy.syntax import HeaderSyntaxKind
from unrealdocpy.text import TextSize


@dataclass(frozen=True, slots=True)
class StartEvent:
    kind: HeaderSyntaxKind
    forward_parent: int | None = None

    @staticmethod
    def tombstone() -> "StartEvent":
        return StartEvent(kind=HeaderSyntaxKind.TOMBSTONE)


@dataclass(frozen=True, slots=True)
class FinishEvent:
    pass


@dataclass(frozen=True, slots=True)
class TokenEvent:
    kind: HeaderSyntaxKind
    end: TextSize


type Event = StartEvent | FinishEvent | TokenEvent


class TreeSink(Protocol):
    def token(self, kind: HeaderSyntaxKind, end: TextSize) -> None: ...

    def start_node(self, kind: HeaderSyntaxKind) -> None: ...

    def finish_node(self) -> None: ...

    def errors(self, errors: list[Diagnostic]) -> None: ...


def process_events(sink: TreeSink, events: list[Event], errors: list[Diagnostic]) -> None:
    """Replay `events` into `sink`, resolving `precede` chains (forward parents)."""
    sink.errors(errors)
    pending: list[HeaderSyntaxKind] = []

    for index, event in enumerate(events):
        match event:
            case StartEvent(kind=HeaderSyntaxKind.TOMBSTONE):
                continue
            case StartEvent():
                pending.append(event.kind)
                cursor = index
                offset = event.forward_parent
                while offset is not None:
                    cursor += offset
                    if cursor >= len(events):
                        raise RuntimeError("forward_parent points past the end of the event list")
                    parent = events[cursor]
                    if not isinstance(parent, StartEvent):
                        raise RuntimeError("forward_parent must point to a StartEvent")
                    events[cursor] = StartEvent.tombstone()
                    if parent.kind != HeaderSyntaxKind.TOMBSTONE:
                        pending.append(parent.kind)
                    offset = parent.forward_parent

                while pending:
                    sink.start_node(pending.pop())
            case FinishEvent():
                sink.finish_node()
            case TokenEvent():
                sink.token(event.kind, event.end)
