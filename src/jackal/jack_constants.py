"""
Closed vocabulary of the Jack language.

Every set in this module is fixed by the language definition and is not
configurable. The lexer classifies lexemes against `KEYWORDS` and `SYMBOLS`;
the parser dispatches on the smaller keyword/operator groups below.

Exports:
    - KEYWORDS, SYMBOLS
    - BINARY_OPS, UNARY_OPS, KEYWORD_CONSTANTS
    - CLASS_VAR_KEYWORDS, SUBROUTINE_KEYWORDS, PRIMITIVE_TYPES, STATEMENT_KEYWORDS
    - MAX_INT_CONSTANT
    - SYMBOL_ESCAPES
"""

KEYWORDS: frozenset[str] = frozenset(
    {
        "class",
        "constructor",
        "function",
        "method",
        "field",
        "static",
        "var",
        "int",
        "char",
        "boolean",
        "void",
        "true",
        "false",
        "null",
        "this",
        "let",
        "do",
        "if",
        "else",
        "while",
        "return",
    }
)

SYMBOLS: frozenset[str] = frozenset("{}()[].,;+-*/&|<>=~")

BINARY_OPS: frozenset[str] = frozenset("+-*/&|<>=")
UNARY_OPS: frozenset[str] = frozenset("-~")
KEYWORD_CONSTANTS: frozenset[str] = frozenset({"true", "false", "null", "this"})

CLASS_VAR_KEYWORDS: frozenset[str] = frozenset({"static", "field"})
SUBROUTINE_KEYWORDS: frozenset[str] = frozenset({"constructor", "function", "method"})
PRIMITIVE_TYPES: frozenset[str] = frozenset({"int", "char", "boolean"})
STATEMENT_KEYWORDS: frozenset[str] = frozenset({"let", "if", "while", "do", "return"})

MAX_INT_CONSTANT = 32767

# Deepest chain of open productions the parser will follow.
MAX_NESTING_DEPTH = 256

# Only these three symbols collide with markup.
SYMBOL_ESCAPES: dict[str, str] = {"<": "&lt;", ">": "&gt;", "&": "&amp;"}


__all__ = [
    "BINARY_OPS",
    "CLASS_VAR_KEYWORDS",
    "KEYWORDS",
    "KEYWORD_CONSTANTS",
    "MAX_INT_CONSTANT",
    "MAX_NESTING_DEPTH",
    "PRIMITIVE_TYPES",
    "STATEMENT_KEYWORDS",
    "SUBROUTINE_KEYWORDS",
    "SYMBOLS",
    "SYMBOL_ESCAPES",
    "UNARY_OPS",
]
