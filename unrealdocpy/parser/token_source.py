"""Token source that hides trivia from the grammar and records its ownership."""

from dataclasses import dataclass

from unrealdocpy.diagnostics import Diagnostic
from unrealdocpy.lexer import Lexer, Token, TokenKind, Trivia, TriviaKind
from unrealdocpy.lexer.tokens import trivia_kind_from_token_kind
from unrealdocpy.text import TextRange, TextSize, slice_text_range


@dataclass(frozen=True, slots=True)
class TokenSourceCheckpoint:
    cursor: int


class TokenSource:
    """Cursor over the non-trivia tokens of a fully lexed header.

    The whole file is lexed up front, so lookahead and rewinding are plain
    index arithmetic. Trivia ownership is decided once: trivia is trailing
    when it follows a non-trivia token on the same line.
    """

    def __init__(self, text: str, tokens: list[Token], diagnostics: list[Diagnostic] | None = None) -> None:
        self._text = text
        self._tokens = tokens
        self._lexer_diagnostics = list(diagnostics or [])
        self._significant: list[Token] = []
        self._preceded_by_trivia: list[bool] = []
        self._trivia: list[Trivia] = []
        self._split_trivia()
        self._cursor = 0

    @classmethod
    def from_text(cls, text: str) -> "TokenSource":
        lexer = Lexer(text)
        tokens = lexer.lex()
        return cls(text, tokens, lexer.diagnostics)

    @property
    def text(self) -> str:
        return self._text

    @property
    def current(self) -> TokenKind:
        return self._significant[self._cursor].kind

    @property
    def current_range(self) -> TextRange:
        return self._significant[self._cursor].range

    @property
    def current_text(self) -> str:
        return slice_text_range(self._text, self.current_range)

    @property
    def position(self) -> TextSize:
        return self.current_range.start

    @property
    def has_preceding_line_break(self) -> bool:
        return self._significant[self._cursor].has_preceding_line_break()

    @property
    def has_preceding_trivia(self) -> bool:
        return self._preceded_by_trivia[self._cursor]

    @property
    def trivia(self) -> list[Trivia]:
        return self._trivia

    @property
    def checkpoint(self) -> TokenSourceCheckpoint:
        return TokenSourceCheckpoint(self._cursor)

    def bump(self) -> None:
        if self.current != TokenKind.EOF:
            self._cursor += 1

    def nth(self, n: int) -> TokenKind:
        return self._nth_token(n).kind

    def nth_range(self, n: int) -> TextRange:
        return self._nth_token(n).range

    def nth_text(self, n: int) -> str:
        token = self._nth_token(n)
        if token.kind == TokenKind.EOF:
            return ""
        return slice_text_range(self._text, token.range)

    def has_nth_preceding_line_break(self, n: int) -> bool:
        return self._nth_token(n).has_preceding_line_break()

    def has_nth_preceding_trivia(self, n: int) -> bool:
        index = min(self._cursor + n, len(self._significant) - 1)
        return self._preceded_by_trivia[index]

    def rewind(self, checkpoint: TokenSourceCheckpoint) -> None:
        self._cursor = checkpoint.cursor

    def finish(self) -> tuple[list[Trivia], list[Diagnostic]]:
        return self._trivia, self._lexer_diagnostics

    def _nth_token(self, n: int) -> Token:
        index = self._cursor + n
        if index >= len(self._significant):
            return self._significant[-1]
        return self._significant[index]

    def _split_trivia(self) -> None:
        seen_token = False
        trailing = False
        saw_trivia = False

        for token in self._tokens:
            if token.kind.is_trivia:
                saw_trivia = True
                kind = trivia_kind_from_token_kind(token.kind)
                if kind == TriviaKind.NEWLINE:
                    trailing = False
                self._trivia.append(Trivia(kind, token.range, trailing and seen_token))
                continue

            self._significant.append(token)
            self._preceded_by_trivia.append(saw_trivia)
            seen_token = True
            trailing = True
            saw_trivia = False

        if not self._significant or self._significant[-1].kind != TokenKind.EOF:
            end = TextSize.from_int(len(self._text))
            self._significant.append(Token(TokenKind.EOF, TextRange.empty(end)))
            self._preceded_by_trivia.append(saw_trivia)
