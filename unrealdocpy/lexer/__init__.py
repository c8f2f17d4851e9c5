"""Lexer."""

from unrealdocpy.lexer.lexer import Lexer, dump_tokens, token_text
from unrealdocpy.lexer.tokens import (
    Token,
    TokenFlags,
    TokenKind,
    Trivia,
    TriviaKind,
    TriviaPiece,
)

__all__ = [
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "Trivia",
    "TriviaKind",
    "TriviaPiece",
    "dump_tokens",
    "token_text",
]
