"""Reflected C++ header grammar routines that emit CST events.

Declarations introduced by a reflection macro (or a `DECLARE_*DELEGATE*`
macro) are committed: any grammar failure inside them is reported. Plain C++
declarations are tried speculatively and, when none of the candidate rules
matches, skipped as a JUNK node.
"""

import re
from collections.abc import Callable
from typing import Final

from unrealdocpy.diagnostics import Diagnostic
from unrealdocpy.diagnostics.codes import (
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
)
from unrealdocpy.lexer import TokenKind
from unrealdocpy.parser.marker import CompletedMarker
from unrealdocpy.parser.parse_lists import ParseNodeList
from unrealdocpy.parser.parse_recovery import ParseRecoveryTokenSet
from unrealdocpy.parser.parsed_syntax import ParsedSyntax
from unrealdocpy.parser.parser import Parser
from unrealdocpy.syntax import HeaderSyntaxKind

type ElementRule = Callable[[Parser], CompletedMarker]

DELEGATE_MACRO: Final[re.Pattern[str]] = re.compile(r"^DECLARE_(DYNAMIC_)?(MULTICAST_)?DELEGATE(_RetVal)?(_\w+Params?)?$")

VISIBILITY_KEYWORDS: Final[frozenset[str]] = frozenset({"public", "protected", "private"})

_API_MACRO: Final[re.Pattern[str]] = re.compile(r"^[A-Z][A-Z0-9_]*_API$")
_MACRO_CALL: Final[re.Pattern[str]] = re.compile(r"^([A-Z_][A-Z0-9_]*|[A-Z][A-Z0-9]+_\w*)$")

_JUNK_KEYWORDS: Final[frozenset[str]] = frozenset(
    {"friend", "using", "typedef", "static_assert", "namespace", "extern", "operator"}
)
_TYPE_QUALIFIERS: Final[frozenset[str]] = frozenset(
    {"const", "volatile", "typename", "struct", "class", "enum", "mutable"}
)
_SIGN_WORDS: Final[frozenset[str]] = frozenset({"unsigned", "signed", "long", "short"})
_BUILTIN_AFTER_SIGN: Final[frozenset[str]] = frozenset({"int", "char", "long", "short", "double"})
_DECLARATION_PREFIXES: Final[frozenset[str]] = frozenset(
    {
        "inline",
        "explicit",
        "constexpr",
        "consteval",
        "extern",
        "thread_local",
        "FORCEINLINE",
        "FORCENOINLINE",
        "FORCEINLINE_DEBUGGABLE",
        "UE_NODISCARD",
        "UE_NODISCARD_CTOR",
    }
)

_DEPRECATION_MACROS: Final[frozenset[str]] = frozenset({"UE_DEPRECATED", "UE_DEPRECATED_FORGAME", "DEPRECATED"})

_OPENERS: Final[dict[TokenKind, TokenKind]] = {
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LBRACE: TokenKind.RBRACE,
}
_ALWAYS_STOP: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.EOF,
        TokenKind.RPAREN,
        TokenKind.RBRACKET,
        TokenKind.RBRACE,
        TokenKind.SEMICOLON,
        TokenKind.DOC_COMMENT,
        TokenKind.DIRECTIVE,
    }
)
_MACRO_LINE_CONTINUATIONS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.LBRACE,
        TokenKind.SEMICOLON,
        TokenKind.COLON,
        TokenKind.COMMA,
        TokenKind.EQUAL,
        TokenKind.DOT,
    }
)

_FILE_RECOVERY: Final[ParseRecoveryTokenSet] = ParseRecoveryTokenSet(
    node_kind=HeaderSyntaxKind.ERROR,
    recovery_set=frozenset({TokenKind.DIRECTIVE, TokenKind.DOC_COMMENT}),
).enable_recovery_on_line_break()


# ---------------------------------------------------------------------------
# Entry rules
# ---------------------------------------------------------------------------


def parse_file(parser: Parser) -> CompletedMarker:
    """`file := (proxy | snippet | element | namespace-open | '}' | junk)*`"""
    open_blocks = 0

    def parse_file_item(current: Parser) -> ParsedSyntax:
        nonlocal open_blocks

        if current.at(TokenKind.RBRACE):
            if open_blocks > 0:
                open_blocks -= 1
                return ParsedSyntax.present(_parse_raw(current, _bump_block_close))
            if current.options.allow_extra_rbrace:
                current.error(PARSER_PERMISSIVE_EXTRA_RBRACE.at(current.current_range))
                return ParsedSyntax.present(_parse_raw(current, _bump_block_close))
            return ParsedSyntax.absent()

        if _at_block_open(current):
            open_blocks += 1
            return ParsedSyntax.present(_parse_raw(current, _bump_block_open))

        return parse_item(current, in_body=False)

    def recover_file_item(current: Parser, parsed: ParsedSyntax) -> bool:
        if parsed.is_present():
            return True
        if current.at(TokenKind.RBRACE):
            current.error(PARSER_UNEXPECTED_RBRACE.at(current.current_range))
        else:
            current.error(_unexpected_token(current))
        _, recovery_error = _FILE_RECOVERY.recover(current)
        return recovery_error is None

    completed = ParseNodeList(
        list_kind=HeaderSyntaxKind.FILE,
        is_at_list_end=lambda current: False,
        parse_element=parse_file_item,
        recover=recover_file_item,
    ).parse_list(parser)

    if open_blocks > 0:
        if parser.options.allow_missing_rbrace:
            parser.error(PARSER_PERMISSIVE_MISSING_RBRACE.at(parser.current_range))
        else:
            parser.error(PARSER_MISSING_RBRACE.at(parser.current_range))

    return completed


def parse_element_fragment_root(parser: Parser) -> CompletedMarker:
    """A standalone `element` followed by end of input."""
    root = parser.start()
    parse_element(parser, fallback_to_junk=False, in_body=True)
    if not parser.at(TokenKind.EOF):
        parser.error(_unexpected_token(parser))
        rest = parser.start()
        while not parser.at(TokenKind.EOF):
            parser.bump()
        rest.complete(parser, HeaderSyntaxKind.ERROR)
    return root.complete(parser, HeaderSyntaxKind.ROOT)


def parse_item(parser: Parser, *, in_body: bool) -> ParsedSyntax:
    if parser.at(TokenKind.DIRECTIVE):
        return parse_directive(parser)
    if in_body and _at_visibility_label(parser):
        return ParsedSyntax.present(parse_visibility_label(parser))
    return parse_element(parser, fallback_to_junk=True, in_body=in_body)


# ---------------------------------------------------------------------------
# `////` directives
# ---------------------------------------------------------------------------


def parse_directive(parser: Parser) -> ParsedSyntax:
    name = parser.nth_text(2) if parser.nth(1) == TokenKind.LBRACKET else ""
    if parser.nth(2) != TokenKind.SLASH:
        if name == "snippet":
            return ParsedSyntax.present(parse_snippet(parser))
        if name == "proxy":
            return ParsedSyntax.present(parse_proxy(parser))
        if name == "inject":
            return ParsedSyntax.present(parse_inject(parser))

    parser.error(PARSER_UNKNOWN_DIRECTIVE.at(parser.current_range))
    line = parser.start()
    parser.bump()
    while not parser.at(TokenKind.EOF) and not parser.has_preceding_line_break:
        parser.bump()
    return ParsedSyntax.present(line.complete(parser, HeaderSyntaxKind.JUNK))


def parse_snippet(parser: Parser) -> CompletedMarker:
    """`'////' '[' 'snippet' ':' IDENT ']' SNIPPET_TEXT? '////' '[' '/' 'snippet' ']'`"""
    marker = parser.start()
    _bump_directive_head(parser)
    _expect(parser, TokenKind.COLON)
    _expect_identifier(parser)
    _expect(parser, TokenKind.RBRACKET)

    inner = parser.start()
    parser.eat(TokenKind.SNIPPET_TEXT)
    inner.complete(parser, HeaderSyntaxKind.SNIPPET_INNER)

    _parse_directive_close(parser, "snippet")
    return marker.complete(parser, HeaderSyntaxKind.SNIPPET)


def parse_proxy(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    _bump_directive_head(parser)
    if parser.eat(TokenKind.COLON):
        tags = parser.start()
        _expect_identifier(parser)
        while parser.eat(TokenKind.COMMA):
            _expect_identifier(parser)
        tags.complete(parser, HeaderSyntaxKind.PROXY_TAGS)
    _expect(parser, TokenKind.RBRACKET)

    if parser.at(TokenKind.DOC_COMMENT):
        parse_doc_comment_lines(parser)

    while parser.at(TokenKind.DIRECTIVE) and not _at_directive_close(parser, "proxy"):
        parser.bump()
        if parser.at(TokenKind.EOF) or parser.has_preceding_line_break:
            continue
        line = parser.start()
        while not parser.at(TokenKind.EOF) and not parser.has_preceding_line_break:
            parser.bump()
        line.complete(parser, HeaderSyntaxKind.PROXY_LINE_CONTENT)

    _parse_directive_close(parser, "proxy")
    return marker.complete(parser, HeaderSyntaxKind.PROXY)


def parse_inject(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    _bump_directive_head(parser)
    _expect(parser, TokenKind.COLON)
    _expect_identifier(parser)
    while parser.eat(TokenKind.COMMA):
        _expect_identifier(parser)
    _expect(parser, TokenKind.RBRACKET)
    return marker.complete(parser, HeaderSyntaxKind.INJECT)


def parse_doc_comment_lines(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    while parser.at(TokenKind.DOC_COMMENT):
        parser.bump()
    return marker.complete(parser, HeaderSyntaxKind.DOC_COMMENT_LINES)


def _bump_directive_head(parser: Parser) -> None:
    # `////` `[` name
    parser.bump()
    parser.bump()
    parser.bump()


def _at_directive_close(parser: Parser, name: str) -> bool:
    return (
        parser.at(TokenKind.DIRECTIVE)
        and parser.nth(1) == TokenKind.LBRACKET
        and parser.nth(2) == TokenKind.SLASH
        and parser.nth_at_keyword(3, name)
    )


def _parse_directive_close(parser: Parser, name: str) -> None:
    if not _at_directive_close(parser, name):
        parser.error(
            PARSER_UNTERMINATED_DIRECTIVE_BLOCK.at(
                parser.current_range,
                f"Unterminated `{name}` block: expected `//// [/{name}]`",
            )
        )
        return
    for _ in range(4):
        parser.bump()
    _expect(parser, TokenKind.RBRACKET)


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


def parse_element(parser: Parser, *, fallback_to_junk: bool, in_body: bool) -> ParsedSyntax:
    """`element := doc_comment_lines? element_*`

    Outside a struct or class body a declaration must have a return type, so
    `Name(...)` there is a macro call rather than a constructor.
    """
    before = parser.checkpoint()
    element = parser.start()
    if parser.at(TokenKind.DOC_COMMENT):
        parse_doc_comment_lines(parser)

    committed = _committed_rule(parser)
    if committed is not None:
        committed(parser)
        return ParsedSyntax.present(element.complete(parser, HeaderSyntaxKind.ELEMENT))

    for rule in _speculative_rules(parser, in_body=in_body):
        attempt = parser.checkpoint()
        with parser.speculative_parsing():
            rule(parser)
        if not parser.has_errors_since(attempt):
            return ParsedSyntax.present(element.complete(parser, HeaderSyntaxKind.ELEMENT))
        parser.rewind(attempt)

    parser.rewind(before)
    if fallback_to_junk:
        return ParsedSyntax.present(parse_junk(parser))
    parser.error(PARSER_EXPECTED_ELEMENT.at(parser.current_range))
    return ParsedSyntax.absent()


def _committed_rule(parser: Parser) -> ElementRule | None:
    if not parser.at(TokenKind.IDENTIFIER):
        return None
    match parser.current_text:
        case "UENUM":
            return parse_element_enum
        case "USTRUCT":
            return parse_element_struct
        case "UCLASS":
            return parse_element_class
        case "UPROPERTY":
            return parse_element_property
        case "UFUNCTION":
            return parse_element_function
        case "UDELEGATE":
            return parse_element_delegate
        case text if DELEGATE_MACRO.match(text):
            return parse_element_delegate
        case _:
            return None


def _speculative_rules(parser: Parser, *, in_body: bool) -> tuple[ElementRule, ...]:
    if parser.at(TokenKind.COLON_COLON):
        return (parse_element_property, parse_element_function)
    if not parser.at(TokenKind.IDENTIFIER):
        return ()

    text = parser.current_text
    if text in _JUNK_KEYWORDS or _at_visibility_label(parser):
        return ()
    if text == "virtual" and parser.nth(1) == TokenKind.TILDE:
        return ()
    if parser.nth(1) == TokenKind.LPAREN and text not in _DEPRECATION_MACROS:
        if not in_body or _MACRO_CALL.match(text):
            return ()

    match text:
        case "enum":
            return (parse_element_enum,)
        case "struct":
            return (parse_element_struct, parse_element_property, parse_element_function)
        case "class":
            return (parse_element_class, parse_element_property, parse_element_function)
        case "template":
            return (parse_element_struct, parse_element_class, parse_element_function)
        case _:
            return (parse_element_property, parse_element_function)


def parse_junk(parser: Parser) -> CompletedMarker:
    """Skip a declaration the grammar does not model.

    Stops after a `;` or a balanced `{...}` at depth zero, before a doc comment,
    directive, visibility label or closing `}`, and after a parenthesised macro
    call that ends its line (`GENERATED_BODY()`).
    """
    marker = parser.start()
    progressed = False
    if parser.at(TokenKind.DOC_COMMENT):
        parse_doc_comment_lines(parser)
        progressed = True

    braces = 0
    parens = 0
    while not parser.at(TokenKind.EOF):
        at_top = braces == 0 and parens == 0
        if at_top and progressed and _at_junk_boundary(parser):
            break

        kind = parser.current
        parser.bump()
        progressed = True

        if kind == TokenKind.LBRACE:
            braces += 1
        elif kind == TokenKind.RBRACE:
            braces = max(braces - 1, 0)
            if braces == 0 and parens == 0:
                parser.eat(TokenKind.SEMICOLON)
                break
        elif kind == TokenKind.LPAREN:
            parens += 1
        elif kind == TokenKind.RPAREN:
            parens = max(parens - 1, 0)
            if parens == 0 and braces == 0 and _ends_macro_line(parser):
                break
        elif kind == TokenKind.SEMICOLON and at_top:
            break

    return marker.complete(parser, HeaderSyntaxKind.JUNK)


def _at_junk_boundary(parser: Parser) -> bool:
    return parser.at_set(
        frozenset({TokenKind.DOC_COMMENT, TokenKind.DIRECTIVE, TokenKind.RBRACE})
    ) or _at_visibility_label(parser)


def _ends_macro_line(parser: Parser) -> bool:
    if parser.at(TokenKind.EOF):
        return True
    if not parser.has_preceding_line_break:
        return False
    if parser.at_set(_MACRO_LINE_CONTINUATIONS):
        return False
    return not parser.at_keyword("const", "override", "final", "noexcept")


# ---------------------------------------------------------------------------
# Specifier macros
# ---------------------------------------------------------------------------


def parse_specifier_macro(parser: Parser, kind: HeaderSyntaxKind) -> CompletedMarker:
    """`MACRO '(' specifiers? ')'`"""
    marker = parser.start()
    parser.bump()
    if _expect(parser, TokenKind.LPAREN):
        if not parser.at(TokenKind.RPAREN):
            parse_specifiers(parser)
        _expect(parser, TokenKind.RPAREN)
    return marker.complete(parser, kind)


def parse_specifiers(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    while True:
        if parser.at_keyword("meta", "Meta") and parser.nth(1) == TokenKind.EQUAL and parser.nth(2) == TokenKind.LPAREN:
            _parse_specifier_meta(parser)
        else:
            _parse_specifier_entry(parser)
        if not parser.eat(TokenKind.COMMA) or parser.at(TokenKind.RPAREN):
            break
    return marker.complete(parser, HeaderSyntaxKind.SPECIFIERS)


def _parse_specifier_meta(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    parser.bump()
    parser.bump()
    while not parser.at_set(frozenset({TokenKind.RPAREN, TokenKind.EOF})):
        _parse_specifier_entry(parser)
        if not parser.eat(TokenKind.COMMA):
            break
    _expect(parser, TokenKind.RPAREN)
    return marker.complete(parser, HeaderSyntaxKind.SPECIFIER_META)


def _parse_specifier_entry(parser: Parser) -> CompletedMarker | None:
    """`specifier_single := IDENT` or `specifier_pair := IDENT '=' specifier_value`"""
    if not parser.at(TokenKind.IDENTIFIER):
        parser.error(_expected_identifier(parser))
        if not parser.at_set(_ALWAYS_STOP | {TokenKind.COMMA}):
            parser.bump()
        return None

    marker = parser.start()
    parser.bump()
    if not parser.eat(TokenKind.EQUAL):
        return marker.complete(parser, HeaderSyntaxKind.SPECIFIER_SINGLE)

    value = parser.start()
    if _bump_until(parser, frozenset({TokenKind.COMMA})) == 0:
        parser.error(PARSER_EXPECTED_TOKEN.at(parser.current_range, "Expected a specifier value"))
    value.complete(parser, HeaderSyntaxKind.SPECIFIER_VALUE)
    return marker.complete(parser, HeaderSyntaxKind.SPECIFIER_PAIR)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


def parse_element_enum(parser: Parser) -> CompletedMarker:
    """`element_enum := uenum? enum_signature enum_body ';'?`"""
    marker = parser.start()
    if parser.at_keyword("UENUM"):
        parse_specifier_macro(parser, HeaderSyntaxKind.UENUM)

    signature = parser.start()
    _expect_keyword(parser, "enum")
    parser.eat_keyword("class", "struct")
    _expect_identifier(parser)
    if parser.eat(TokenKind.COLON):
        parse_value_type(parser)
    signature.complete(parser, HeaderSyntaxKind.ENUM_SIGNATURE)

    parse_enum_body(parser)
    parser.eat(TokenKind.SEMICOLON)
    return marker.complete(parser, HeaderSyntaxKind.ELEMENT_ENUM)


def parse_enum_body(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    if not _expect(parser, TokenKind.LBRACE):
        return marker.complete(parser, HeaderSyntaxKind.ENUM_BODY)

    while not parser.at_set(frozenset({TokenKind.RBRACE, TokenKind.EOF})):
        if parser.at(TokenKind.DOC_COMMENT):
            parse_doc_comment_lines(parser)
            continue
        if not parser.at(TokenKind.IDENTIFIER):
            parser.error(_expected_identifier(parser))
            parser.bump()
            continue
        variant = parser.start()
        parser.bump()
        _bump_until(parser, frozenset({TokenKind.COMMA}))
        variant.complete(parser, HeaderSyntaxKind.ENUM_VARIANT)
        parser.eat(TokenKind.COMMA)

    _expect_closing_brace(parser)
    return marker.complete(parser, HeaderSyntaxKind.ENUM_BODY)


# ---------------------------------------------------------------------------
# Structs and classes
# ---------------------------------------------------------------------------


def parse_element_struct(parser: Parser) -> CompletedMarker:
    return _parse_struct_class(
        parser,
        keyword="struct",
        macro_kind=HeaderSyntaxKind.USTRUCT,
        signature_kind=HeaderSyntaxKind.STRUCT_SIGNATURE,
        element_kind=HeaderSyntaxKind.ELEMENT_STRUCT,
    )


def parse_element_class(parser: Parser) -> CompletedMarker:
    return _parse_struct_class(
        parser,
        keyword="class",
        macro_kind=HeaderSyntaxKind.UCLASS,
        signature_kind=HeaderSyntaxKind.CLASS_SIGNATURE,
        element_kind=HeaderSyntaxKind.ELEMENT_CLASS,
    )


def _parse_struct_class(
    parser: Parser,
    *,
    keyword: str,
    macro_kind: HeaderSyntaxKind,
    signature_kind: HeaderSyntaxKind,
    element_kind: HeaderSyntaxKind,
) -> CompletedMarker:
    marker = parser.start()
    if parser.at_keyword(macro_kind.name):
        parse_specifier_macro(parser, macro_kind)

    signature = parser.start()
    if parser.at_keyword("template"):
        parse_template_declaration(parser)
    _expect_keyword(parser, keyword)
    if _at_attribute_specifier(parser):
        _parse_raw(parser, _bump_attribute_specifiers)
    if parser.at(TokenKind.IDENTIFIER) and parser.nth(1) == TokenKind.IDENTIFIER and not parser.nth_at_keyword(1, "final"):
        api = parser.start()
        parser.bump()
        api.complete(parser, HeaderSyntaxKind.API)
    _expect_identifier(parser)
    parser.eat_keyword("final")
    if parser.at(TokenKind.COLON):
        parse_inheritances(parser)
    signature.complete(parser, signature_kind)

    parse_struct_class_body(parser)
    _expect(parser, TokenKind.SEMICOLON)
    return marker.complete(parser, element_kind)


def parse_inheritances(parser: Parser) -> CompletedMarker:
    """`inheritances := ':' inheritance (',' inheritance)*`"""
    marker = parser.start()
    parser.bump()
    while True:
        inheritance = parser.start()
        for _ in range(2):
            if parser.at_keyword(*VISIBILITY_KEYWORDS):
                visibility = parser.start()
                parser.bump()
                visibility.complete(parser, HeaderSyntaxKind.VISIBILITY)
            parser.eat_keyword("virtual")
        parse_value_type(parser)
        inheritance.complete(parser, HeaderSyntaxKind.INHERITANCE)
        if not parser.eat(TokenKind.COMMA):
            break
    return marker.complete(parser, HeaderSyntaxKind.INHERITANCES)


def parse_struct_class_body(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    if not _expect(parser, TokenKind.LBRACE):
        return marker.complete(parser, HeaderSyntaxKind.STRUCT_CLASS_BODY)

    def recover_body_item(current: Parser, parsed: ParsedSyntax) -> bool:
        if parsed.is_present():
            return True
        current.error(_unexpected_token(current))
        return False

    ParseNodeList(
        list_kind=HeaderSyntaxKind.STRUCT_CLASS_BODY,
        is_at_list_end=lambda current: current.at(TokenKind.RBRACE),
        parse_element=lambda current: parse_item(current, in_body=True),
        recover=recover_body_item,
    ).parse_elements(parser)

    _expect_closing_brace(parser)
    return marker.complete(parser, HeaderSyntaxKind.STRUCT_CLASS_BODY)


def parse_visibility_label(parser: Parser) -> CompletedMarker:
    visibility = parser.start()
    parser.bump()
    completed = visibility.complete(parser, HeaderSyntaxKind.VISIBILITY)
    parser.bump()
    return completed


def parse_template_declaration(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.at(TokenKind.LESS_THAN):
        _bump_angle_group(parser)
    else:
        parser.error(_expected_token(parser, TokenKind.LESS_THAN))
    return marker.complete(parser, HeaderSyntaxKind.TEMPLATE_DECLARATION)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def parse_element_property(parser: Parser) -> CompletedMarker:
    """`element_property := uproperty? property_signature`"""
    marker = parser.start()
    if parser.at_keyword("UPROPERTY"):
        parse_specifier_macro(parser, HeaderSyntaxKind.UPROPERTY)

    signature = parser.start()
    while True:
        if parser.at_keyword("static"):
            _parse_flag(parser, HeaderSyntaxKind.STATICNESS)
        elif not _parse_declaration_prefix(parser):
            break
    parse_value_type(parser)
    if parser.at_keyword("operator"):
        parser.error(_expected_identifier(parser))
    else:
        _expect_identifier(parser)
    if parser.at(TokenKind.LBRACKET):
        parse_property_array(parser)
    if parser.at(TokenKind.COLON) and parser.nth(1) == TokenKind.INT:
        _parse_raw(parser, _bump_pair)
    if parser.at(TokenKind.EQUAL) or parser.at(TokenKind.LBRACE):
        parse_default_value(parser)
    _expect(parser, TokenKind.SEMICOLON)
    signature.complete(parser, HeaderSyntaxKind.PROPERTY_SIGNATURE)
    return marker.complete(parser, HeaderSyntaxKind.ELEMENT_PROPERTY)


def parse_property_array(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if not parser.at(TokenKind.RBRACKET):
        size = parser.start()
        _bump_until(parser, frozenset())
        size.complete(parser, HeaderSyntaxKind.EXPRESSION)
    _expect(parser, TokenKind.RBRACKET)
    return marker.complete(parser, HeaderSyntaxKind.PROPERTY_ARRAY)


def parse_default_value(parser: Parser) -> CompletedMarker:
    """`default_value := '=' expression | '{' ... '}'`"""
    marker = parser.start()
    if parser.eat(TokenKind.EQUAL):
        expression = parser.start()
        if _bump_until(parser, frozenset({TokenKind.COMMA}), templates=True) == 0:
            parser.error(PARSER_EXPECTED_TOKEN.at(parser.current_range, "Expected a default value"))
        expression.complete(parser, HeaderSyntaxKind.EXPRESSION)
    else:
        expression = parser.start()
        _bump_group(parser)
        expression.complete(parser, HeaderSyntaxKind.EXPRESSION)
    return marker.complete(parser, HeaderSyntaxKind.DEFAULT_VALUE)


def parse_value_type(parser: Parser) -> CompletedMarker:
    """Qualified, possibly templated type name with cv-qualifiers, `*` and `&`."""
    marker = parser.start()
    while parser.at_keyword(*_TYPE_QUALIFIERS):
        parser.bump()

    if parser.at_keyword(*_SIGN_WORDS):
        parser.bump()
        while parser.at_keyword(*_SIGN_WORDS, *_BUILTIN_AFTER_SIGN):
            parser.bump()
    elif parser.at_keyword("decltype") and parser.nth(1) == TokenKind.LPAREN:
        parser.bump()
        _bump_group(parser)
    else:
        parser.eat(TokenKind.COLON_COLON)
        if parser.at(TokenKind.IDENTIFIER):
            _bump_qualified_name(parser)
        else:
            parser.error(PARSER_EXPECTED_TYPE.at(parser.current_range))

    while parser.at(TokenKind.STAR) or parser.at(TokenKind.AMP) or parser.at_keyword("const", "volatile"):
        parser.bump()
    return marker.complete(parser, HeaderSyntaxKind.VALUE_TYPE)


def _bump_qualified_name(parser: Parser) -> None:
    parser.bump()
    if parser.at(TokenKind.LESS_THAN):
        _bump_angle_group(parser)
    while parser.at(TokenKind.COLON_COLON) and parser.nth(1) == TokenKind.IDENTIFIER:
        parser.bump()
        parser.bump()
        if parser.at(TokenKind.LESS_THAN):
            _bump_angle_group(parser)


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


def parse_element_function(parser: Parser) -> CompletedMarker:
    """`element_function := ufunction? (function_signature | constructor_signature) (function_body | ';')`"""
    marker = parser.start()
    if parser.at_keyword("UFUNCTION"):
        parse_specifier_macro(parser, HeaderSyntaxKind.UFUNCTION)

    is_constructor = parse_function_signature(parser)
    if is_constructor and parser.at(TokenKind.COLON):
        _parse_raw(parser, _bump_initializer_list)

    if parser.at(TokenKind.LBRACE):
        parse_function_body(parser)
    else:
        _expect(parser, TokenKind.SEMICOLON)
    return marker.complete(parser, HeaderSyntaxKind.ELEMENT_FUNCTION)


def parse_function_signature(parser: Parser) -> bool:
    """Parse a function or constructor signature; return whether it has no return type."""
    signature = parser.start()
    if parser.at_keyword("template"):
        parse_template_declaration(parser)
    _parse_function_prefixes(parser)

    is_constructor = _at_function_name(parser)
    if not is_constructor:
        parse_value_type(parser)

    if parser.at_keyword("operator"):
        _parse_operator(parser)
    else:
        _expect_identifier(parser)
    parse_function_arguments(parser)
    _parse_function_trailers(parser)

    kind = HeaderSyntaxKind.CONSTRUCTOR_SIGNATURE if is_constructor else HeaderSyntaxKind.FUNCTION_SIGNATURE
    signature.complete(parser, kind)
    return is_constructor


def _parse_function_prefixes(parser: Parser) -> None:
    while True:
        if parser.at_keyword("virtual"):
            _parse_flag(parser, HeaderSyntaxKind.VIRTUALNESS)
        elif parser.at_keyword("static"):
            _parse_flag(parser, HeaderSyntaxKind.STATICNESS)
        elif not _parse_declaration_prefix(parser):
            return


def _parse_declaration_prefix(parser: Parser) -> bool:
    if parser.at_keyword(*_DECLARATION_PREFIXES) or (
        parser.at(TokenKind.IDENTIFIER) and _API_MACRO.match(parser.current_text)
    ):
        _parse_raw(parser, Parser.bump)
        return True
    if parser.at_keyword(*_DEPRECATION_MACROS) and parser.nth(1) == TokenKind.LPAREN:
        _parse_raw(parser, _bump_macro_call)
        return True
    if _at_attribute_specifier(parser):
        _parse_raw(parser, _bump_attribute_specifiers)
        return True
    return False


def _at_function_name(parser: Parser) -> bool:
    if parser.at_keyword("operator"):
        return True
    return parser.at(TokenKind.IDENTIFIER) and parser.nth(1) == TokenKind.LPAREN


def _parse_operator(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.at(TokenKind.LPAREN) and parser.nth(1) == TokenKind.RPAREN:
        parser.bump()
        parser.bump()
    while not parser.at_set(frozenset({TokenKind.LPAREN, TokenKind.EOF, TokenKind.SEMICOLON, TokenKind.LBRACE})):
        parser.bump()
    return marker.complete(parser, HeaderSyntaxKind.OPERATOR)


def parse_function_arguments(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    if _expect(parser, TokenKind.LPAREN):
        if not parser.at(TokenKind.RPAREN):
            while True:
                parse_function_argument(parser)
                if not parser.eat(TokenKind.COMMA):
                    break
        _expect(parser, TokenKind.RPAREN)
    return marker.complete(parser, HeaderSyntaxKind.FUNCTION_ARGUMENTS)


def parse_function_argument(parser: Parser) -> CompletedMarker:
    """`function_argument := doc_comment_lines? UPARAM(...)? value_type IDENT? default_value?`"""
    marker = parser.start()
    if parser.at(TokenKind.DOC_COMMENT):
        parse_doc_comment_lines(parser)
    if parser.at_keyword("UPARAM") and parser.nth(1) == TokenKind.LPAREN:
        _parse_raw(parser, _bump_macro_call)
    parse_value_type(parser)
    if parser.at(TokenKind.IDENTIFIER):
        parser.bump()
    if parser.at(TokenKind.LBRACKET):
        _parse_raw(parser, _bump_group)
    if parser.at(TokenKind.EQUAL):
        parse_default_value(parser)
    return marker.complete(parser, HeaderSyntaxKind.FUNCTION_ARGUMENT)


def _parse_function_trailers(parser: Parser) -> None:
    while True:
        if parser.at_keyword("const"):
            _parse_flag(parser, HeaderSyntaxKind.CONSTNESS)
        elif parser.at_keyword("override"):
            _parse_flag(parser, HeaderSyntaxKind.OVERRIDENESS)
        elif parser.at_keyword("noexcept"):
            _parse_raw(parser, _bump_optional_call)
        elif parser.at_keyword("final", "volatile") or parser.at(TokenKind.AMP):
            _parse_raw(parser, Parser.bump)
        elif parser.at_keyword("PURE_VIRTUAL") and parser.nth(1) == TokenKind.LPAREN:
            _parse_raw(parser, _bump_macro_call)
        elif parser.at(TokenKind.EQUAL) and (
            parser.nth_at_keyword(1, "default", "delete")
            or (parser.nth(1) == TokenKind.INT and parser.nth_text(1) == "0")
        ):
            _parse_raw(parser, _bump_pair)
        elif parser.at(TokenKind.MINUS) and parser.nth(1) == TokenKind.GREATER_THAN:
            _parse_raw(parser, _bump_trailing_return)
        else:
            return


def parse_function_body(parser: Parser) -> CompletedMarker:
    """Function bodies are opaque except for nested snippet blocks."""
    marker = parser.start()
    parser.bump()
    depth = 0
    while not parser.at(TokenKind.EOF):
        if parser.at(TokenKind.RBRACE) and depth == 0:
            break
        if parser.at(TokenKind.DIRECTIVE) and parser.nth(1) == TokenKind.LBRACKET and parser.nth_at_keyword(2, "snippet"):
            parse_snippet(parser)
            continue
        if parser.at(TokenKind.LBRACE):
            depth += 1
        elif parser.at(TokenKind.RBRACE):
            depth -= 1
        parser.bump()
    _expect_closing_brace(parser)
    return marker.complete(parser, HeaderSyntaxKind.FUNCTION_BODY)


# ---------------------------------------------------------------------------
# Delegates
# ---------------------------------------------------------------------------


def parse_element_delegate(parser: Parser) -> CompletedMarker:
    """`udelegate? DECLARE_..._DELEGATE_...( [ret ','] name [',' args] ) ';'?`"""
    marker = parser.start()
    if parser.at_keyword("UDELEGATE"):
        parse_specifier_macro(parser, HeaderSyntaxKind.UDELEGATE)

    macro = DELEGATE_MACRO.match(parser.current_text) if parser.at(TokenKind.IDENTIFIER) else None
    if macro is None:
        parser.error(PARSER_EXPECTED_DECLARATION.at(parser.current_range, "Expected a DECLARE_*DELEGATE* macro"))
        return marker.complete(parser, HeaderSyntaxKind.ELEMENT_DELEGATE)

    dynamic = macro.group(1) is not None
    multicast = macro.group(2) is not None
    parser.bump()

    if _expect(parser, TokenKind.LPAREN):
        if macro.group(3) is not None:
            parse_value_type(parser)
            _expect(parser, TokenKind.COMMA)

        name = parser.start()
        _expect_identifier(parser)
        name.complete(parser, HeaderSyntaxKind.DELEGATE_NAME)

        if parser.eat(TokenKind.COMMA):
            if dynamic:
                parse_dynamic_delegate_arguments(parser)
            else:
                parse_delegate_arguments(parser)
        _expect(parser, TokenKind.RPAREN)
    parser.eat(TokenKind.SEMICOLON)

    return marker.complete(parser, delegate_element_kind(dynamic=dynamic, multicast=multicast))


def delegate_element_kind(*, dynamic: bool, multicast: bool) -> HeaderSyntaxKind:
    if dynamic and multicast:
        return HeaderSyntaxKind.ELEMENT_DYN_MULTICAST_DELEGATE
    if dynamic:
        return HeaderSyntaxKind.ELEMENT_DYNAMIC_DELEGATE
    if multicast:
        return HeaderSyntaxKind.ELEMENT_MULTICAST_DELEGATE
    return HeaderSyntaxKind.ELEMENT_DELEGATE


def parse_delegate_arguments(parser: Parser) -> CompletedMarker:
    """`delegate_argument := value_type delegate_argument_name?`"""
    marker = parser.start()
    while True:
        argument = parser.start()
        parse_value_type(parser)
        if parser.at(TokenKind.IDENTIFIER):
            name = parser.start()
            parser.bump()
            name.complete(parser, HeaderSyntaxKind.DELEGATE_ARGUMENT_NAME)
        argument.complete(parser, HeaderSyntaxKind.DELEGATE_ARGUMENT)
        if not parser.eat(TokenKind.COMMA):
            break
    return marker.complete(parser, HeaderSyntaxKind.DELEGATE_ARGUMENTS)


def parse_dynamic_delegate_arguments(parser: Parser) -> CompletedMarker:
    """`dynamic_delegate_argument := value_type ',' IDENT`"""
    marker = parser.start()
    while True:
        argument = parser.start()
        parse_value_type(parser)
        _expect(parser, TokenKind.COMMA)
        _expect_identifier(parser)
        argument.complete(parser, HeaderSyntaxKind.DYNAMIC_DELEGATE_ARGUMENT)
        if not parser.eat(TokenKind.COMMA):
            break
    return marker.complete(parser, HeaderSyntaxKind.DYNAMIC_DELEGATE_ARGUMENTS)


# ---------------------------------------------------------------------------
# Token-level helpers
# ---------------------------------------------------------------------------


def _parse_flag(parser: Parser, kind: HeaderSyntaxKind) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, kind)


def _parse_raw(parser: Parser, consume: Callable[[Parser], object]) -> CompletedMarker:
    """Wrap tokens the document model ignores in a JUNK node."""
    marker = parser.start()
    consume(parser)
    return marker.complete(parser, HeaderSyntaxKind.JUNK)


def _bump_until(parser: Parser, stop: frozenset[TokenKind], *, templates: bool = False) -> int:
    """Bump tokens up to a depth-zero `stop` token or closer; return how many were bumped."""
    count = 0
    angles = 0
    previous: TokenKind | None = None
    while True:
        kind = parser.current
        if kind in _ALWAYS_STOP or (kind in stop and angles == 0):
            return count
        if kind in _OPENERS:
            count += _bump_group(parser)
            previous = kind
            continue
        if templates and kind == TokenKind.LESS_THAN and previous == TokenKind.IDENTIFIER:
            angles += 1
        elif templates and kind == TokenKind.GREATER_THAN and angles > 0:
            angles -= 1
        parser.bump()
        previous = kind
        count += 1


def _bump_group(parser: Parser) -> int:
    """Bump a balanced `(...)`, `[...]` or `{...}` group starting at the current opener."""
    closers: list[TokenKind] = []
    count = 0
    while not parser.at(TokenKind.EOF):
        kind = parser.current
        if kind in _OPENERS:
            closers.append(_OPENERS[kind])
        elif closers and kind == closers[-1]:
            closers.pop()
        parser.bump()
        count += 1
        if not closers:
            return count
    parser.error(_expected_token(parser, closers[-1]))
    return count


def _bump_angle_group(parser: Parser) -> None:
    """Bump `<...>` template arguments, nesting through `<>` and bracket groups."""
    parser.bump()
    depth = 1
    while depth > 0:
        if parser.at_set(frozenset({TokenKind.EOF, TokenKind.SEMICOLON, TokenKind.LBRACE, TokenKind.RBRACE})):
            parser.error(_expected_token(parser, TokenKind.GREATER_THAN))
            return
        if parser.at(TokenKind.LPAREN) or parser.at(TokenKind.LBRACKET):
            _bump_group(parser)
            continue
        if parser.at(TokenKind.LESS_THAN):
            depth += 1
        elif parser.at(TokenKind.GREATER_THAN):
            depth -= 1
        parser.bump()


def _bump_macro_call(parser: Parser) -> None:
    parser.bump()
    _bump_group(parser)


def _bump_optional_call(parser: Parser) -> None:
    parser.bump()
    if parser.at(TokenKind.LPAREN):
        _bump_group(parser)


def _bump_pair(parser: Parser) -> None:
    parser.bump()
    parser.bump()


def _bump_trailing_return(parser: Parser) -> None:
    parser.bump()
    parser.bump()
    parse_value_type(parser)


def _bump_initializer_list(parser: Parser) -> None:
    parser.bump()
    previous: TokenKind | None = None
    while not parser.at_set(frozenset({TokenKind.EOF, TokenKind.SEMICOLON})):
        if parser.at(TokenKind.LBRACE) and previous not in (TokenKind.IDENTIFIER, TokenKind.GREATER_THAN):
            return
        previous = parser.current
        if parser.current in _OPENERS:
            _bump_group(parser)
        else:
            parser.bump()


def _at_attribute_specifier(parser: Parser) -> bool:
    if parser.at_keyword("alignas") and parser.nth(1) == TokenKind.LPAREN:
        return True
    return parser.at(TokenKind.LBRACKET) and parser.nth(1) == TokenKind.LBRACKET


def _bump_attribute_specifiers(parser: Parser) -> None:
    while _at_attribute_specifier(parser):
        if parser.at(TokenKind.LBRACKET):
            _bump_group(parser)
        else:
            _bump_macro_call(parser)


def _at_visibility_label(parser: Parser) -> bool:
    return parser.at_keyword(*VISIBILITY_KEYWORDS) and parser.nth(1) == TokenKind.COLON


def _at_block_open(parser: Parser) -> bool:
    """`namespace X {` or `extern "C" {`, possibly behind doc comments."""
    lookahead = 0
    while parser.nth(lookahead) == TokenKind.DOC_COMMENT:
        lookahead += 1
    if parser.nth_at_keyword(lookahead, "inline") and parser.nth_at_keyword(lookahead + 1, "namespace"):
        lookahead += 1
    if parser.nth_at_keyword(lookahead, "namespace"):
        lookahead += 1
        while parser.nth(lookahead) in (TokenKind.IDENTIFIER, TokenKind.COLON_COLON):
            lookahead += 1
        return parser.nth(lookahead) == TokenKind.LBRACE
    return (
        parser.nth_at_keyword(lookahead, "extern")
        and parser.nth(lookahead + 1) == TokenKind.STRING
        and parser.nth(lookahead + 2) == TokenKind.LBRACE
    )


def _bump_block_open(parser: Parser) -> None:
    while not parser.at(TokenKind.LBRACE):
        parser.bump()
    parser.bump()


def _bump_block_close(parser: Parser) -> None:
    parser.bump()
    parser.eat(TokenKind.SEMICOLON)


def _expect(parser: Parser, kind: TokenKind) -> bool:
    return parser.expect(kind, _expected_token(parser, kind)).is_present()


def _expect_identifier(parser: Parser) -> bool:
    return parser.expect(TokenKind.IDENTIFIER, _expected_identifier(parser)).is_present()


def _expect_keyword(parser: Parser, word: str) -> bool:
    if parser.eat_keyword(word):
        return True
    parser.error(PARSER_EXPECTED_TOKEN.at(parser.current_range, f"Expected `{word}`, found {_describe(parser)}"))
    return False


def _expect_closing_brace(parser: Parser) -> None:
    if parser.eat(TokenKind.RBRACE):
        return
    if parser.at(TokenKind.EOF):
        if parser.options.allow_missing_rbrace:
            parser.error(PARSER_PERMISSIVE_MISSING_RBRACE.at(parser.current_range))
        else:
            parser.error(PARSER_MISSING_RBRACE.at(parser.current_range))
        return
    parser.error(_expected_token(parser, TokenKind.RBRACE))


def _describe(parser: Parser) -> str:
    if parser.at(TokenKind.EOF):
        return "end of file"
    return f"{parser.current.name} `{parser.current_text}`"


def _expected_token(parser: Parser, kind: TokenKind) -> Diagnostic:
    return PARSER_EXPECTED_TOKEN.at(parser.current_range, f"Expected token {kind.name}, found {_describe(parser)}")


def _expected_identifier(parser: Parser) -> Diagnostic:
    return PARSER_EXPECTED_IDENTIFIER.at(parser.current_range, f"Expected an identifier, found {_describe(parser)}")


def _unexpected_token(parser: Parser) -> Diagnostic:
    return PARSER_UNEXPECTED_TOKEN.at(parser.current_range, f"Unexpected token {_describe(parser)}")
