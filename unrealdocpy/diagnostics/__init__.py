"""Diagnostics."""

from unrealdocpy.diagnostics.codes import (
    LEXER_UNTERMINATED_BLOCK_COMMENT,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_DECLARATION,
    PARSER_EXPECTED_ELEMENT,
    PARSER_EXPECTED_IDENTIFIER,
    PARSER_EXPECTED_TOKEN,
    PARSER_EXPECTED_TYPE,
    PARSER_MISSING_RBRACE,
    PARSER_PERMISSIVE_EXTRA_RBRACE,
    PARSER_PERMISSIVE_MISSING_RBRACE,
    PARSER_UNEXPECTED_RBRACE,
    PARSER_UNEXPECTED_TOKEN,
    PARSER_UNKNOWN_DIRECTIVE,
    PARSER_UNTERMINATED_DIRECTIVE_BLOCK,
    DiagnosticSpec,
)
from unrealdocpy.diagnostics.diagnostic import Diagnostic, Severity
from unrealdocpy.diagnostics.errors import HeaderParseError, HeaderSyntaxError, MalformedFragmentError
from unrealdocpy.diagnostics.report import collect_diagnostics, first_error, has_errors

__all__ = [
    "LEXER_UNTERMINATED_BLOCK_COMMENT",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_DECLARATION",
    "PARSER_EXPECTED_ELEMENT",
    "PARSER_EXPECTED_IDENTIFIER",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_EXPECTED_TYPE",
    "PARSER_MISSING_RBRACE",
    "PARSER_PERMISSIVE_EXTRA_RBRACE",
    "PARSER_PERMISSIVE_MISSING_RBRACE",
    "PARSER_UNEXPECTED_RBRACE",
    "PARSER_UNEXPECTED_TOKEN",
    "PARSER_UNKNOWN_DIRECTIVE",
    "PARSER_UNTERMINATED_DIRECTIVE_BLOCK",
    "Diagnostic",
    "DiagnosticSpec",
    "HeaderParseError",
    "HeaderSyntaxError",
    "MalformedFragmentError",
    "Severity",
    "collect_diagnostics",
    "first_error",
    "has_errors",
]
