"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Final

from unrealdocpy.text import TextRange, TextSize


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    NEWLINE = 11
    COMMENT = 12  # `// ...` and `/* ... */`
    PREPROCESSOR = 13  # `#include`, `#pragma`, ... with line continuations
    SKIPPED = 14  # characters with no meaning in headers

    # -------------------------
    # Documentation tokens
    # -------------------------
    DOC_COMMENT = 15  # `/// ...` up to end of line
    DIRECTIVE = 16  # `////` marker opening a directive or proxy line
    SNIPPET_TEXT = 17  # raw snippet body between directive lines

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENTIFIER = 20
    STRING = 21
    CHAR = 22
    INT = 23
    FLOAT = 24

    # -------------------------
    # Punctuation / operators
    # -------------------------
    EQUAL = 30  # =
    LESS_THAN = 31  # <
    GREATER_THAN = 32  # >
    BANG = 33  # !

    COLON = 40  # :
    COLON_COLON = 41  # ::
    SEMICOLON = 42  # ;
    COMMA = 43  # ,
    DOT = 44  # .
    SLASH = 45  # /
    HASH = 46  # # (not at line start)

    PLUS = 50  # +
    MINUS = 51  # -
    STAR = 52  # *
    PERCENT = 53  # %
    CARET = 54  # ^
    PIPE = 55  # |
    AMP = 56  # &
    QUESTION = 57  # ?
    TILDE = 58  # ~

    LBRACE = 60  # {
    RBRACE = 61  # }
    LBRACKET = 62  # [
    RBRACKET = 63  # ]
    LPAREN = 64  # (
    RPAREN = 65  # )

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.NEWLINE,
            TokenKind.COMMENT,
            TokenKind.PREPROCESSOR,
            TokenKind.SKIPPED,
        )


class TriviaKind(IntEnum):
    """The trivia vocabulary (separate from TokenKind for type-safety)."""

    WHITESPACE = 1
    NEWLINE = 2
    COMMENT = 3
    PREPROCESSOR = 4
    SKIPPED = 5


def trivia_kind_from_token_kind(kind: TokenKind) -> TriviaKind:
    """Map lexer trivia token kinds to TriviaKind.

    Raises if called with a non-trivia TokenKind.
    """
    match kind:
        case TokenKind.NEWLINE:
            return TriviaKind.NEWLINE
        case TokenKind.WHITESPACE:
            return TriviaKind.WHITESPACE
        case TokenKind.COMMENT:
            return TriviaKind.COMMENT
        case TokenKind.PREPROCESSOR:
            return TriviaKind.PREPROCESSOR
        case TokenKind.SKIPPED:
            return TriviaKind.SKIPPED
        case _:
            raise ValueError(f"Not a trivia token kind: {kind!r}")


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # NEWLINE before
    WAS_QUOTED = 1 << 1
    HAS_ESCAPE = 1 << 2


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)


@dataclass(frozen=True, slots=True)
class Trivia:
    """Range-based trivia recorded by the TokenSource."""

    kind: TriviaKind
    range: TextRange
    trailing: bool


@dataclass(frozen=True, slots=True)
class TriviaPiece:
    """Compact trivia unit stored in the CST (kind + length)."""

    kind: TriviaKind
    length: TextSize


EOF_TOKEN: Final[Token] = Token(TokenKind.EOF, TextRange.empty(TextSize.from_int(0)))
