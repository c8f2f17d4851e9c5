"""Parser modes and configuration options."""

from dataclasses import dataclass
from enum import StrEnum


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    STRICT = "strict"
    PERMISSIVE = "permissive"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Flags controlling how forgiving the header grammar is about braces."""

    mode: ParseMode = ParseMode.STRICT
    allow_extra_rbrace: bool = False
    allow_missing_rbrace: bool = False

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        lenient = mode == ParseMode.PERMISSIVE
        return ParserOptions(
            mode=mode,
            allow_extra_rbrace=lenient,
            allow_missing_rbrace=lenient,
        )
