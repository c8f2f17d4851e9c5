"""Red CST wrappers with absolute offsets and parent links."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from unrealdocpy.cst.green import GreenNode
from unrealdocpy.lexer import TriviaKind, TriviaPiece
from unrealdocpy.syntax import HeaderSyntaxKind


@dataclass(frozen=True, slots=True)
class SyntaxTriviaPiece:
    kind: TriviaKind
    text: str


class SyntaxToken:
    __slots__ = (
        "kind",
        "text",
        "leading_trivia",
        "trailing_trivia",
        "parent",
        "index_in_parent",
        "_start",
        "_token_start",
        "_token_end",
        "_end",
    )

    def __init__(
        self,
        *,
        kind: HeaderSyntaxKind,
        text: str,
        leading_pieces: tuple[TriviaPiece, ...],
        trailing_pieces: tuple[TriviaPiece, ...],
        parent: SyntaxNode,
        index_in_parent: int,
        source: str,
        start: int,
    ) -> None:
        self.kind = kind
        self.text = text
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._start = start
        self._token_start = start + sum(piece.length.value for piece in leading_pieces)
        self._token_end = self._token_start + len(text)
        self._end = self._token_end + sum(piece.length.value for piece in trailing_pieces)
        self.leading_trivia = _slice_trivia(source, start, leading_pieces)
        self.trailing_trivia = _slice_trivia(source, self._token_end, trailing_pieces)

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def token_start(self) -> int:
        return self._token_start

    @property
    def token_end(self) -> int:
        return self._token_end

    @property
    def text_trimmed(self) -> str:
        return self.text

    @property
    def leading_trivia_text(self) -> str:
        return "".join(piece.text for piece in self.leading_trivia)

    @property
    def trailing_trivia_text(self) -> str:
        return "".join(piece.text for piece in self.trailing_trivia)

    def __repr__(self) -> str:
        return f"SyntaxToken({self.kind.name}, {self.text!r}, {self._token_start}..{self._token_end})"


class SyntaxNode:
    __slots__ = (
        "kind",
        "parent",
        "index_in_parent",
        "_children",
        "_source",
        "_start",
        "_end",
    )

    def __init__(
        self,
        *,
        kind: HeaderSyntaxKind,
        parent: SyntaxNode | None,
        index_in_parent: int,
        source: str,
        start: int,
    ) -> None:
        self.kind = kind
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._source = source
        self._start = start
        self._end = start
        self._children: tuple[SyntaxElement, ...] = ()

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def text(self) -> str:
        """Source text covered by the node, trivia included."""
        return self._source[self._start : self._end]

    @property
    def token_start(self) -> int:
        """Offset of the first non-trivia character, or `start` for empty nodes."""
        first = self.first_token()
        return self._start if first is None else first.token_start

    @property
    def token_end(self) -> int:
        last = self.last_token()
        return self._start if last is None else last.token_end

    @property
    def text_trimmed(self) -> str:
        """Source text from the first token to the last token, trivia in between kept."""
        return self._source[self.token_start : self.token_end]

    @property
    def children(self) -> tuple[SyntaxElement, ...]:
        return self._children

    def child_nodes(self) -> tuple[SyntaxNode, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxNode))

    def child_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxToken))

    def find_node(self, *kinds: HeaderSyntaxKind) -> SyntaxNode | None:
        for child in self._children:
            if isinstance(child, SyntaxNode) and child.kind in kinds:
                return child
        return None

    def find_nodes(self, *kinds: HeaderSyntaxKind) -> tuple[SyntaxNode, ...]:
        return tuple(child for child in self.child_nodes() if child.kind in kinds)

    def find_token(self, *kinds: HeaderSyntaxKind) -> SyntaxToken | None:
        for child in self._children:
            if isinstance(child, SyntaxToken) and child.kind in kinds:
                return child
        return None

    def find_tokens(self, *kinds: HeaderSyntaxKind) -> tuple[SyntaxToken, ...]:
        return tuple(child for child in self.child_tokens() if child.kind in kinds)

    def iter_tokens(self) -> Iterator[SyntaxToken]:
        for child in self._children:
            if isinstance(child, SyntaxToken):
                yield child
            else:
                yield from child.iter_tokens()

    def descendants_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(self.iter_tokens())

    def first_token(self) -> SyntaxToken | None:
        return next(self.iter_tokens(), None)

    def last_token(self) -> SyntaxToken | None:
        for child in reversed(self._children):
            if isinstance(child, SyntaxToken):
                return child
            token = child.last_token()
            if token is not None:
                return token
        return None

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self._start}..{self._end})"


type SyntaxElement = SyntaxNode | SyntaxToken


def from_green(root: GreenNode, source: str = "") -> SyntaxNode:
    node, _ = _realize(root, parent=None, index_in_parent=0, source=source, start=0)
    return node


def _realize(
    green: GreenNode,
    *,
    parent: SyntaxNode | None,
    index_in_parent: int,
    source: str,
    start: int,
) -> tuple[SyntaxNode, int]:
    node = SyntaxNode(
        kind=green.kind,
        parent=parent,
        index_in_parent=index_in_parent,
        source=source,
        start=start,
    )

    offset = start
    children: list[SyntaxElement] = []
    for index, child in enumerate(green.children):
        if isinstance(child, GreenNode):
            red_child, offset = _realize(
                child,
                parent=node,
                index_in_parent=index,
                source=source,
                start=offset,
            )
            children.append(red_child)
            continue

        token = SyntaxToken(
            kind=child.kind,
            text=child.text,
            leading_pieces=child.leading_trivia,
            trailing_pieces=child.trailing_trivia,
            parent=node,
            index_in_parent=index,
            source=source,
            start=offset,
        )
        children.append(token)
        offset = token.end

    node._children = tuple(children)
    node._end = offset
    return node, offset


def _slice_trivia(source: str, start: int, pieces: tuple[TriviaPiece, ...]) -> tuple[SyntaxTriviaPiece, ...]:
    out: list[SyntaxTriviaPiece] = []
    offset = start
    for piece in pieces:
        end = offset + piece.length.value
        out.append(SyntaxTriviaPiece(kind=piece.kind, text=source[offset:end]))
        offset = end
    return tuple(out)


__all__ = [
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "SyntaxTriviaPiece",
    "from_green",
]
