"""
Shared token and grammar tables for the Tabby language.

This module is the single source of truth for the lexical vocabulary and the
operator precedences used by the lexer and parser. Every table here is built
once at import time and exposed read-only.

Exports:
    TokenKind: Closed enumeration of every token kind the lexer can emit.
    KEYWORDS: Reserved word text -> keyword kind.
    SINGLE_CHAR_TOKENS: One-character punctuation/operators -> kind.
    TWO_CHAR_TOKENS: Two-character operators -> kind.
    Precedence: Binding strengths used by the Pratt parser.
    PRECEDENCES: Token kind -> binding strength for infix positions.
    COMPOUND_OPERATORS: Compound assignment spelling -> plain operator.
    INDENT_WIDTH: Column width of one indentation level.
"""

from enum import Enum, IntEnum
from types import MappingProxyType

INDENT_WIDTH = 4


class TokenKind(Enum):
    """Every kind of token the lexer emits. Values are display strings."""

    EOF = "EOF"
    NEWLINE = "NEWLINE"
    INDENT = "INDENT"
    ILLEGAL = "ILLEGAL"

    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # Keywords
    IF = "IF"
    ELIF = "ELIF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    FOR = "FOR"
    IN = "IN"
    PRINT = "PRINT"
    INT_KW = "INT_KW"
    STR_KW = "STR_KW"
    AND = "AND"
    OR = "OR"

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    COLON = ":"
    ASSIGN = "="
    COMMA = ","

    # Operators
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    CARET = "^"
    BANG = "!"

    # Compound assignment
    PLUS_EQ = "+="
    MINUS_EQ = "-="
    STAR_EQ = "*="
    SLASH_EQ = "/="
    PERCENT_EQ = "%="
    CARET_EQ = "^="

    # Comparison
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="
    NOT_EQ = "!="

    def __str__(self) -> str:
        return self.value


KEYWORDS = MappingProxyType(
    {
        "if": TokenKind.IF,
        "elif": TokenKind.ELIF,
        "else": TokenKind.ELSE,
        "while": TokenKind.WHILE,
        "for": TokenKind.FOR,
        "in": TokenKind.IN,
        "print": TokenKind.PRINT,
        "int": TokenKind.INT_KW,
        "str": TokenKind.STR_KW,
        "and": TokenKind.AND,
        "or": TokenKind.OR,
    }
)

SINGLE_CHAR_TOKENS = MappingProxyType(
    {
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
        ":": TokenKind.COLON,
        "=": TokenKind.ASSIGN,
        ",": TokenKind.COMMA,
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "*": TokenKind.STAR,
        "/": TokenKind.SLASH,
        "%": TokenKind.PERCENT,
        "^": TokenKind.CARET,
        "!": TokenKind.BANG,
        "<": TokenKind.LT,
        ">": TokenKind.GT,
    }
)

TWO_CHAR_TOKENS = MappingProxyType(
    {
        "==": TokenKind.EQ,
        "!=": TokenKind.NOT_EQ,
        "<=": TokenKind.LE,
        ">=": TokenKind.GE,
        "+=": TokenKind.PLUS_EQ,
        "-=": TokenKind.MINUS_EQ,
        "*=": TokenKind.STAR_EQ,
        "/=": TokenKind.SLASH_EQ,
        "%=": TokenKind.PERCENT_EQ,
        "^=": TokenKind.CARET_EQ,
    }
)


class Precedence(IntEnum):
    """Binding strengths, weakest first."""

    LOWEST = 1
    EQUALITY = 2
    RELATIONAL = 3
    ADDITIVE = 4
    MULTIPLICATIVE = 5
    PREFIX = 6
    CALL = 7


PRECEDENCES = MappingProxyType(
    {
        TokenKind.EQ: Precedence.EQUALITY,
        TokenKind.NOT_EQ: Precedence.EQUALITY,
        TokenKind.LT: Precedence.RELATIONAL,
        TokenKind.LE: Precedence.RELATIONAL,
        TokenKind.GT: Precedence.RELATIONAL,
        TokenKind.GE: Precedence.RELATIONAL,
        TokenKind.AND: Precedence.RELATIONAL,
        TokenKind.OR: Precedence.RELATIONAL,
        TokenKind.PLUS: Precedence.ADDITIVE,
        TokenKind.PLUS_EQ: Precedence.ADDITIVE,
        TokenKind.MINUS: Precedence.ADDITIVE,
        TokenKind.MINUS_EQ: Precedence.ADDITIVE,
        TokenKind.STAR: Precedence.MULTIPLICATIVE,
        TokenKind.STAR_EQ: Precedence.MULTIPLICATIVE,
        TokenKind.SLASH: Precedence.MULTIPLICATIVE,
        TokenKind.SLASH_EQ: Precedence.MULTIPLICATIVE,
        TokenKind.PERCENT: Precedence.MULTIPLICATIVE,
        TokenKind.PERCENT_EQ: Precedence.MULTIPLICATIVE,
        TokenKind.LPAREN: Precedence.CALL,
    }
)

COMPOUND_OPERATORS = MappingProxyType(
    {
        "+=": "+",
        "-=": "-",
        "*=": "*",
        "/=": "/",
        "%=": "%",
    }
)

__all__ = [
    "COMPOUND_OPERATORS",
    "INDENT_WIDTH",
    "KEYWORDS",
    "PRECEDENCES",
    "Precedence",
    "SINGLE_CHAR_TOKENS",
    "TWO_CHAR_TOKENS",
    "TokenKind",
]
