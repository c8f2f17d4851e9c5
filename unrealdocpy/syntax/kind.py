"""Unified syntax kinds for parser and CST."""

from enum import IntEnum

from unrealdocpy.lexer import TokenKind


class HeaderSyntaxKind(IntEnum):
    """Header syntax vocabulary (tokens + rule nodes)."""

    TOMBSTONE = 0
    EOF = 1

    # Trivia tokens
    WHITESPACE = 10
    NEWLINE = 11
    COMMENT = 12
    PREPROCESSOR = 13
    SKIPPED = 14

    # Documentation tokens
    DOC_COMMENT = 15
    DIRECTIVE = 16
    SNIPPET_TEXT = 17

    # Lexical tokens
    IDENTIFIER = 20
    STRING = 21
    CHAR = 22
    INT = 23
    FLOAT = 24

    EQUAL = 30
    LESS_THAN = 31
    GREATER_THAN = 32
    BANG = 33

    COLON = 40
    COLON_COLON = 41
    SEMICOLON = 42
    COMMA = 43
    DOT = 44
    SLASH = 45
    HASH = 46

    PLUS = 50
    MINUS = 51
    STAR = 52
    PERCENT = 53
    CARET = 54
    PIPE = 55
    AMP = 56
    QUESTION = 57
    TILDE = 58

    LBRACE = 60
    RBRACE = 61
    LBRACKET = 62
    RBRACKET = 63
    LPAREN = 64
    RPAREN = 65

    # Node kinds
    ROOT = 1000
    ERROR = 1001
    FILE = 1002
    JUNK = 1003

    # Directive blocks
    PROXY = 1010
    PROXY_TAGS = 1011
    PROXY_LINE_CONTENT = 1012
    SNIPPET = 1013
    SNIPPET_INNER = 1014
    INJECT = 1015
    DOC_COMMENT_LINES = 1016

    # Reflected declarations
    ELEMENT = 1020
    ELEMENT_ENUM = 1021
    ELEMENT_STRUCT = 1022
    ELEMENT_CLASS = 1023
    ELEMENT_PROPERTY = 1024
    ELEMENT_FUNCTION = 1025
    ELEMENT_DELEGATE = 1026
    ELEMENT_MULTICAST_DELEGATE = 1027
    ELEMENT_DYNAMIC_DELEGATE = 1028
    ELEMENT_DYN_MULTICAST_DELEGATE = 1029

    # Reflection macros and specifier lists
    UENUM = 1040
    USTRUCT = 1041
    UCLASS = 1042
    UPROPERTY = 1043
    UFUNCTION = 1044
    UDELEGATE = 1045
    SPECIFIERS = 1046
    SPECIFIER_SINGLE = 1047
    SPECIFIER_PAIR = 1048
    SPECIFIER_META = 1049
    SPECIFIER_VALUE = 1050

    # Enums
    ENUM_SIGNATURE = 1060
    ENUM_BODY = 1061
    ENUM_VARIANT = 1062

    # Structs / classes
    STRUCT_SIGNATURE = 1070
    CLASS_SIGNATURE = 1071
    STRUCT_CLASS_BODY = 1072
    TEMPLATE_DECLARATION = 1073
    API = 1074
    INHERITANCES = 1075
    INHERITANCE = 1076
    VISIBILITY = 1077

    # Properties and shared type fragments
    PROPERTY_SIGNATURE = 1080
    VALUE_TYPE = 1081
    PROPERTY_ARRAY = 1082
    DEFAULT_VALUE = 1083
    EXPRESSION = 1084
    STATICNESS = 1085

    # Functions
    FUNCTION_SIGNATURE = 1090
    CONSTRUCTOR_SIGNATURE = 1091
    FUNCTION_ARGUMENTS = 1092
    FUNCTION_ARGUMENT = 1093
    FUNCTION_BODY = 1094
    OPERATOR = 1095
    VIRTUALNESS = 1096
    CONSTNESS = 1097
    OVERRIDENESS = 1098

    # Delegates
    DELEGATE_NAME = 1110
    DELEGATE_ARGUMENTS = 1111
    DELEGATE_ARGUMENT = 1112
    DELEGATE_ARGUMENT_NAME = 1113
    DYNAMIC_DELEGATE_ARGUMENTS = 1114
    DYNAMIC_DELEGATE_ARGUMENT = 1115

    @property
    def is_trivia(self) -> bool:
        return self in (
            HeaderSyntaxKind.WHITESPACE,
            HeaderSyntaxKind.NEWLINE,
            HeaderSyntaxKind.COMMENT,
            HeaderSyntaxKind.PREPROCESSOR,
            HeaderSyntaxKind.SKIPPED,
        )

    @property
    def is_token(self) -> bool:
        return self != HeaderSyntaxKind.TOMBSTONE and self.value < HeaderSyntaxKind.ROOT.value

    @property
    def is_node(self) -> bool:
        return self.value >= HeaderSyntaxKind.ROOT.value

    @property
    def is_delegate(self) -> bool:
        return self in DELEGATE_ELEMENT_KINDS

    @staticmethod
    def from_token_kind(kind: TokenKind) -> "HeaderSyntaxKind":
        try:
            return HeaderSyntaxKind[kind.name]
        except KeyError:
            raise ValueError(f"Unsupported TokenKind mapping: {kind!r}") from None


DELEGATE_ELEMENT_KINDS: frozenset[HeaderSyntaxKind] = frozenset(
    {
        HeaderSyntaxKind.ELEMENT_DELEGATE,
        HeaderSyntaxKind.ELEMENT_MULTICAST_DELEGATE,
        HeaderSyntaxKind.ELEMENT_DYNAMIC_DELEGATE,
        HeaderSyntaxKind.ELEMENT_DYN_MULTICAST_DELEGATE,
    }
)
