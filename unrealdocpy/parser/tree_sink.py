"""Lossless tree sink for parser events."""

from dataclasses import dataclass

from unrealdocpy.cst import GreenNode, TreeBuilder
from unrealdocpy.diagnostics import Diagnostic
from unrealdocpy.lexer import Trivia, TriviaPiece
from unrealdocpy.syntax import HeaderSyntaxKind
from unrealdocpy.text import TextSize


@dataclass(frozen=True, slots=True)
class ParsedGreenTree:
    root: GreenNode
    diagnostics: list[Diagnostic]


class LosslessTreeSink:
    """Turns parser events plus recorded trivia into a green tree.

    Every trivia range is attached to exactly one token, so the text of the
    resulting tree is byte-identical to the parsed source.
    """

    def __init__(self, text: str, trivia: list[Trivia], builder: TreeBuilder | None = None) -> None:
        self._text = text
        self._trivia = trivia
        self._text_pos = TextSize.from_int(0)
        self._trivia_pos = 0
        self._depth = 0
        self._errors: list[Diagnostic] = []
        self._builder = builder if builder is not None else TreeBuilder()
        self._needs_eof = True
        self._pieces: list[TriviaPiece] = []

    def token(self, kind: HeaderSyntaxKind, end: TextSize) -> None:
        self._push_token(kind, end)

    def start_node(self, kind: HeaderSyntaxKind) -> None:
        self._builder.start_node(kind)
        self._depth += 1

    def finish_node(self) -> None:
        self._depth -= 1
        if self._depth < 0:
            raise RuntimeError("finish_node called more often than start_node")

        # The outermost node owns the EOF token and any trailing trivia.
        if self._depth == 0 and self._needs_eof:
            self._push_token(HeaderSyntaxKind.EOF, TextSize.from_int(len(self._text)))

        self._builder.finish_node()

    def errors(self, errors: list[Diagnostic]) -> None:
        self._errors = list(errors)

    def finish(self) -> ParsedGreenTree:
        return ParsedGreenTree(root=self._builder.finish(), diagnostics=self._errors)

    def _push_token(self, kind: HeaderSyntaxKind, token_end: TextSize) -> None:
        if kind == HeaderSyntaxKind.EOF:
            self._needs_eof = False

        self._take_trivia(trailing=False, token_end=token_end)
        token_start = self._text_pos
        leading_count = len(self._pieces)
        self._text_pos = token_end
        self._take_trivia(trailing=True, token_end=token_end)

        self._builder.token_with_trivia(
            kind=kind,
            text=self._text[token_start.value : token_end.value],
            leading=tuple(self._pieces[:leading_count]),
            trailing=tuple(self._pieces[leading_count:]),
        )
        self._pieces.clear()

    def _take_trivia(self, *, trailing: bool, token_end: TextSize) -> None:
        while self._trivia_pos < len(self._trivia):
            trivia = self._trivia[self._trivia_pos]
            if trivia.trailing != trailing or self._text_pos != trivia.range.start:
                break
            if not trailing and trivia.range.end > token_end:
                break

            self._pieces.append(TriviaPiece(kind=trivia.kind, length=trivia.range.len()))
            self._text_pos = trivia.range.end
            self._trivia_pos += 1
