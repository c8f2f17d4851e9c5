"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final

from unrealdocpy.diagnostics.diagnostic import Diagnostic, Severity
from unrealdocpy.text import TextRange


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None

    def at(self, range: TextRange, message: str | None = None) -> Diagnostic:
        return Diagnostic(
            code=self.code,
            message=message if message is not None else self.message,
            range=range,
            severity=self.severity,
            hint=self.hint,
            category=self.category,
        )


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string or character literal.",
    hint="Close the literal with a matching quote on the same line.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_BLOCK_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_BLOCK_COMMENT",
    message="Unterminated block comment.",
    hint="Close the comment with `*/`.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_IDENTIFIER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_IDENTIFIER",
    message="Expected an identifier",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_TYPE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TYPE",
    message="Expected a type",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_DECLARATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_DECLARATION",
    message="Expected a property or function declaration after reflection macro",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_ELEMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_ELEMENT",
    message="Expected a single reflected declaration",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_MISSING_RBRACE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_RBRACE",
    message="Unbalanced braces: missing closing `}` before end of file",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_RBRACE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_RBRACE",
    message="Unbalanced braces: unexpected closing `}`",
    severity="error",
    category="parser",
)

PARSER_UNTERMINATED_DIRECTIVE_BLOCK: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNTERMINATED_DIRECTIVE_BLOCK",
    message="Unterminated directive block",
    hint="Close snippet blocks with `//// [/snippet]` and proxy blocks with `//// [/proxy]`.",
    severity="error",
    category="parser",
)

PARSER_UNKNOWN_DIRECTIVE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNKNOWN_DIRECTIVE",
    message="Ignoring unknown `////` directive",
    severity="warning",
    category="parser",
)

PARSER_PERMISSIVE_MISSING_RBRACE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_PERMISSIVE_MISSING_RBRACE",
    message="Ignoring missing closing brace at end of file in permissive mode",
    severity="warning",
    category="parser",
)

PARSER_PERMISSIVE_EXTRA_RBRACE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_PERMISSIVE_EXTRA_RBRACE",
    message="Ignoring extra closing brace in permissive mode",
    severity="warning",
    category="parser",
)
