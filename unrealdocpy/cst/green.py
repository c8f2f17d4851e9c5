"""Immutable green tree for parsed headers."""

from dataclasses import dataclass

from unrealdocpy.lexer import TriviaPiece
from unrealdocpy.syntax import HeaderSyntaxKind
from unrealdocpy.text import TextSize


@dataclass(frozen=True, slots=True)
class GreenToken:
    kind: HeaderSyntaxKind
    text: str
    leading_trivia: tuple[TriviaPiece, ...]
    trailing_trivia: tuple[TriviaPiece, ...]

    @property
    def text_len(self) -> TextSize:
        trivia = sum(piece.length.value for piece in self.leading_trivia)
        trivia += sum(piece.length.value for piece in self.trailing_trivia)
        return TextSize.from_int(len(self.text) + trivia)


@dataclass(frozen=True, slots=True)
class GreenNode:
    kind: HeaderSyntaxKind
    children: tuple["GreenElement", ...]

    @property
    def text_len(self) -> TextSize:
        return TextSize.from_int(sum(child.text_len.value for child in self.children))


type GreenElement = GreenNode | GreenToken


class TreeBuilder:
    """Stack-based builder turning start/token/finish calls into green nodes."""

    def __init__(self) -> None:
        self._open: list[tuple[HeaderSyntaxKind, list[GreenElement]]] = []
        self._top_level: list[GreenElement] = []

    def start_node(self, kind: HeaderSyntaxKind) -> None:
        self._open.append((kind, []))

    def token_with_trivia(
        self,
        kind: HeaderSyntaxKind,
        text: str,
        leading: tuple[TriviaPiece, ...],
        trailing: tuple[TriviaPiece, ...],
    ) -> None:
        self._attach(GreenToken(kind=kind, text=text, leading_trivia=leading, trailing_trivia=trailing))

    def finish_node(self) -> None:
        if not self._open:
            raise RuntimeError("finish_node called without a matching start_node")
        kind, children = self._open.pop()
        self._attach(GreenNode(kind=kind, children=tuple(children)))

    def finish(self) -> GreenNode:
        if self._open:
            names = ", ".join(kind.name for kind, _ in self._open)
            raise RuntimeError(f"Cannot finish tree with open nodes: {names}")

        if len(self._top_level) == 1:
            only = self._top_level[0]
            if isinstance(only, GreenNode) and only.kind == HeaderSyntaxKind.ROOT:
                return only

        return GreenNode(kind=HeaderSyntaxKind.ROOT, children=tuple(self._top_level))

    def _attach(self, element: GreenElement) -> None:
        if self._open:
            self._open[-1][1].append(element)
        else:
            self._top_level.append(element)
