"""Lexer."""

import re
from typing import Final

from unrealdocpy.diagnostics import Diagnostic
from unrealdocpy.diagnostics.codes import (
    LEXER_UNTERMINATED_BLOCK_COMMENT,
    LEXER_UNTERMINATED_STRING,
)
from unrealdocpy.lexer.tokens import Token, TokenFlags, TokenKind
from unrealdocpy.text import TextRange, TextSize, slice_text_range

_DIRECTIVE_OPEN: Final[re.Pattern[str]] = re.compile(r"[ \t]*\[")
_DIRECTIVE_HEAD: Final[re.Pattern[str]] = re.compile(r"[ \t]*\[[ \t]*(/?)[ \t]*(\w+)")
_SNIPPET_CLOSE: Final[re.Pattern[str]] = re.compile(
    r"^[ \t]*////[ \t]*\[[ \t]*/[ \t]*snippet[ \t]*\]",
    re.MULTILINE,
)

_SINGLE_CHAR_TOKENS: Final[dict[str, TokenKind]] = {
    "=": TokenKind.EQUAL,
    "<": TokenKind.LESS_THAN,
    ">": TokenKind.GREATER_THAN,
    "!": TokenKind.BANG,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "/": TokenKind.SLASH,
    "#": TokenKind.HASH,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "|": TokenKind.PIPE,
    "&": TokenKind.AMP,
    "?": TokenKind.QUESTION,
    "~": TokenKind.TILDE,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


class Lexer:
    """Lossless lexer for reflected C++ headers.

    Besides plain C++ tokens it tracks the documentation directives:
    `////` markers open directive lines, proxy blocks turn every `////` into a
    marker, and a snippet opener makes the following lines one SNIPPET_TEXT token.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._after_newline = False
        self._at_line_start = True
        self._current_start = TextSize.from_int(0)
        self._current_kind = TokenKind.EOF
        self._current_flags = TokenFlags.NONE
        self._eof_emitted = False
        self._in_proxy = False
        self._pending_snippet = False
        self._in_snippet_body = False
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    @property
    def current(self) -> TokenKind:
        return self._current_kind

    @property
    def current_range(self) -> TextRange:
        return TextRange.new(self._current_start, TextSize.from_int(self._position))

    @property
    def current_flags(self) -> TokenFlags:
        return self._current_flags

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    @property
    def next_token(self) -> Token:
        self._current_start = TextSize.from_int(self._position)
        self._current_flags = TokenFlags.NONE

        if self.is_eof:
            self._eof_emitted = True
            self._current_kind = TokenKind.EOF
            return Token(TokenKind.EOF, TextRange.empty(self._current_start), self._current_flags)

        kind = self._lex_token()
        self._current_flags |= TokenFlags.PRECEDING_LINE_BREAK if self._after_newline else TokenFlags.NONE
        self._current_kind = kind

        if kind == TokenKind.NEWLINE:
            self._at_line_start = True
            if self._pending_snippet:
                self._pending_snippet = False
                self._in_snippet_body = True
        elif kind != TokenKind.WHITESPACE:
            self._at_line_start = False

        if not kind.is_trivia:
            self._after_newline = False

        return Token(kind, self.current_range, self._current_flags)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self.next_token
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def _lex_token(self) -> TokenKind:
        if self._in_snippet_body:
            self._in_snippet_body = False
            if self._lex_snippet_text():
                return TokenKind.SNIPPET_TEXT

        ch = self._current_char()

        if ch == "\r" or ch == "\n" or ch == "\t" or ch == " " or ch == "\f" or ch == "\v":
            return self._consume_newline_or_whitespaces()

        if ch == "/" and self._peek_char() == "/":
            return self._lex_slashes()

        if ch == "/" and self._peek_char() == "*":
            return self._lex_block_comment()

        if ch == "#" and self._at_line_start:
            return self._lex_preprocessor()

        if ch == '"':
            return self._lex_quoted('"', TokenKind.STRING)

        if ch == "'":
            return self._lex_quoted("'", TokenKind.CHAR)

        if ch.isdigit():
            return self._lex_number()

        if ch.isalpha() or ch == "_":
            return self._lex_identifier()

        if ch == ":" and self._peek_char() == ":":
            self._advance(2)
            return TokenKind.COLON_COLON

        kind = _SINGLE_CHAR_TOKENS.get(ch)
        if kind is not None:
            self._advance(1)
            return kind

        # Fallback: preserve bytes as SKIPPED trivia.
        self._advance(1)
        return TokenKind.SKIPPED

    def _lex_slashes(self) -> TokenKind:
        run = 0
        while self._peek_char(run) == "/":
            run += 1

        if run == 4:
            after_marker = self._position + 4
            if self._in_proxy or _DIRECTIVE_OPEN.match(self._source, after_marker):
                self._advance(4)
                self._note_directive_head()
                return TokenKind.DIRECTIVE

        if run == 3:
            self._consume_until_line_end()
            return TokenKind.DOC_COMMENT

        self._consume_until_line_end()
        return TokenKind.COMMENT

    def _note_directive_head(self) -> None:
        head = _DIRECTIVE_HEAD.match(self._source, self._position)
        if head is None:
            return
        closing = head.group(1) == "/"
        name = head.group(2)
        if name == "proxy":
            self._in_proxy = not closing
        elif name == "snippet" and not closing:
            self._pending_snippet = True

    def _lex_snippet_text(self) -> bool:
        closing = _SNIPPET_CLOSE.search(self._source, self._position)
        end = closing.start() if closing is not None else len(self._source)
        body = self._source[self._position : end]
        if body.endswith("\r\n"):
            end -= 2
        elif body.endswith("\n"):
            end -= 1
        if end <= self._position:
            return False
        self._advance(end - self._position)
        return True

    def _lex_block_comment(self) -> TokenKind:
        end = self._source.find("*/", self._position + 2)
        if end < 0:
            self._advance(len(self._source) - self._position)
            self._diagnostics.append(LEXER_UNTERMINATED_BLOCK_COMMENT.at(self.current_range))
            return TokenKind.COMMENT
        self._advance(end + 2 - self._position)
        return TokenKind.COMMENT

    def _lex_preprocessor(self) -> TokenKind:
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\\" and self._peek_char() in ("\n", "\r"):
                self._advance(1)
                self._consume_newline()
                continue
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)
        return TokenKind.PREPROCESSOR

    def _lex_quoted(self, quote: str, kind: TokenKind) -> TokenKind:
        # Consume opening quote
        self._advance(1)
        self._current_flags |= TokenFlags.WAS_QUOTED
        escaped = False
        closed = False

        while not self.is_eof:
            ch = self._current_char()
            if ch == quote:
                self._advance(1)
                closed = True
                break
            if ch == "\\":
                escaped = True
                self._advance(1)
                if not self.is_eof:
                    self._advance(1)
                continue
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)

        if escaped:
            self._current_flags |= TokenFlags.HAS_ESCAPE

        if not closed:
            self._diagnostics.append(LEXER_UNTERMINATED_STRING.at(self.current_range))

        return kind

    def _lex_number(self) -> TokenKind:
        is_float = False
        is_hex = self._current_char() == "0" and self._peek_char() in ("x", "X")
        while not self.is_eof:
            ch = self._current_char()
            if ch in "eEpP" and not is_hex and self._peek_char() in ("+", "-"):
                is_float = True
                self._advance(2)
                continue
            if ch == ".":
                is_float = True
                self._advance(1)
                continue
            if ch.isalnum() or ch == "_" or ch == "'":
                if ch in "eE" and not is_hex:
                    is_float = True
                self._advance(1)
                continue
            break
        return TokenKind.FLOAT if is_float else TokenKind.INT

    def _lex_identifier(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_":
                self._advance(1)
                continue
            break
        return TokenKind.IDENTIFIER

    def _consume_newline_or_whitespaces(self) -> TokenKind:
        if self._consume_newline():
            self._after_newline = True
            return TokenKind.NEWLINE
        self._consume_whitespaces()
        return TokenKind.WHITESPACE

    def _consume_whitespaces(self) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch == " " or ch == "\t" or ch == "\f" or ch == "\v":
                self._advance(1)
                continue
            break

    def _consume_newline(self) -> bool:
        if self._current_char() == "\n":
            self._advance(1)
            return True
        if self._current_char() == "\r":
            if self._peek_char() == "\n":
                self._advance(2)
            else:
                self._advance(1)
            return True
        return False

    def _consume_until_line_end(self) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def token_text(
    source: str,
    token: Token,
    null_char_on_eof: bool = False,
) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return "\0" if null_char_on_eof else ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str, diagnostics: list[Diagnostic] | None = None) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<14} range={tok.range.as_tuple()} flags={tok.flags} text={text!r}")

    if diagnostics is not None:
        print("\nDiagnostics:")
        for d in diagnostics:
            print(f"- {d.severity.upper()} {d.code} range={d.range.as_tuple()} message={d.message}")
