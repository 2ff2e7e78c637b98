"""
Lexical analyzer for the Jack programming language.

This module provides the components for converting raw source code into a flat
list of classified tokens:

Classes:
    SourceReader: Forward-only character cursor with line/column tracking.
    TokenKind: The five lexical categories, valued by their markup tag names.
    Token: An immutable classified lexeme with its source location.
    Lexer: Converts a SourceReader into a sequence of tokens.

Features:
    - Skips whitespace, `//` line comments and `/* ... */` block comments
      (block comments may span any number of lines)
    - Recognizes, in this order of precedence at each position:
        * String constants (`"..."`, no escapes, must close on the same line)
        * Integer constants (maximal digit run, 0..32767)
        * Identifiers and keywords (maximal run of letters, digits, underscore)
        * Single-character symbols

Raises:
    LexError: On an unterminated comment or string, an out-of-range integer,
        or a character outside the language's alphabet.

Example:
    >>> [str(tok) for tok in tokenize("let x = 1;")]
    ['keyword let', 'identifier x', 'symbol =', 'integerConstant 1', 'symbol ;']

Exports:
    - SourceReader
    - Token
    - TokenKind
    - Lexer
    - tokenize
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from jackal.jack_constants import KEYWORDS, MAX_INT_CONSTANT, SYMBOLS
from jackal.jack_errors import LexError
from jackal.jack_logging import get_logger

logger = get_logger(__name__)

_DIGITS = frozenset("0123456789")
_WORD_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"
)


class SourceReader:
    """Forward-only cursor over source text that knows where it is.

    Attributes:
        source (str): The text being read.
        position (int): Index of the next unread character.
        line (int): 1-based line of the next unread character.
        col (int): 1-based column of the next unread character.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.line = 1
        self.col = 1

    @property
    def location(self) -> tuple[int, int]:
        return self.line, self.col

    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """The character `offset` places ahead, or "" past the end."""
        return self.source[self.position + offset : self.position + offset + 1]

    def advance(self) -> str:
        char = self.source[self.position]
        self.position += 1
        if char == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return char

    def take_while(self, accept: Callable[[str], bool]) -> str:
        """Consume the longest run of characters satisfying `accept`."""
        start = self.position
        while not self.at_end() and accept(self.peek()):
            self.advance()
        return self.source[start : self.position]


class TokenKind(Enum):
    """Lexical category of a token. Values double as markup tag names."""

    KEYWORD = "keyword"
    SYMBOL = "symbol"
    IDENTIFIER = "identifier"
    INT_CONST = "integerConstant"
    STRING_CONST = "stringConstant"

    @property
    def tag(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind (TokenKind): The token's lexical category.
        text (str): The lexeme for keywords, identifiers and symbols; the
            decimal rendering of the value for integer constants; the
            unquoted contents for string constants.
        line (int): 1-based line where the token starts (0 if synthetic).
        col (int): 1-based column where the token starts (0 if synthetic).
    """

    kind: TokenKind
    text: str
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.kind.tag}, {self.text})"

    def __str__(self) -> str:
        return f"{self.kind.tag} {self.text}"

    def is_symbol(self, *symbols: str) -> bool:
        return self.kind is TokenKind.SYMBOL and self.text in symbols

    def is_keyword(self, *keywords: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.text in keywords


class Lexer:
    """Lexical analyzer for the Jack language.

    Pulls characters from a SourceReader and produces Token objects, one call
    to `next_token` at a time.

    Attributes:
        reader (SourceReader): The source being tokenized.
    """

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments."""
        reader = self.reader
        while not reader.at_end():
            ch = reader.peek()
            if ch.isspace():
                reader.advance()
            elif ch == "/" and reader.peek(1) == "/":
                reader.take_while(lambda c: c != "\n")
            elif ch == "/" and reader.peek(1) == "*":
                self.skip_block_comment()
            else:
                break

    def skip_block_comment(self) -> None:
        """Advances past a `/* ... */` comment, which may span lines.

        Raises:
            LexError: If the input ends before the closing `*/`.
        """
        reader = self.reader
        line, col = reader.location
        reader.advance()
        reader.advance()
        while not reader.at_end():
            if reader.peek() == "*" and reader.peek(1) == "/":
                reader.advance()
                reader.advance()
                return
            reader.advance()
        raise LexError("Unterminated block comment", line, col)

    def read_string(self, line: int, col: int) -> Token:
        self.reader.advance()  # opening quote
        text = self.reader.take_while(lambda c: c not in ('"', "\n"))
        if self.reader.peek() != '"':
            raise LexError("Unterminated string constant", line, col)
        self.reader.advance()
        return Token(TokenKind.STRING_CONST, text, line, col)

    def read_integer(self, line: int, col: int) -> Token:
        digits = self.reader.take_while(_DIGITS.__contains__)
        value = int(digits)
        if value > MAX_INT_CONSTANT:
            raise LexError(
                f"Integer constant {digits} out of range 0..{MAX_INT_CONSTANT}",
                line,
                col,
            )
        return Token(TokenKind.INT_CONST, str(value), line, col)

    def read_word(self, line: int, col: int) -> Token:
        word = self.reader.take_while(_WORD_CHARS.__contains__)
        kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
        return Token(kind, word, line, col)

    def next_token(self) -> Token | None:
        """Consumes and returns the next Token, or None once the source is exhausted.

        Raises:
            LexError: If a malformed token is encountered.
        """
        self.skip_whitespace()
        if self.reader.at_end():
            return None

        ch = self.reader.peek()
        line, col = self.reader.location

        if ch == '"':
            return self.read_string(line, col)
        if ch in _DIGITS:
            return self.read_integer(line, col)
        if ch in _WORD_CHARS:
            return self.read_word(line, col)
        if ch in SYMBOLS:
            self.reader.advance()
            return Token(TokenKind.SYMBOL, ch, line, col)

        raise LexError(f"Unexpected character {ch!r}", line, col)

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            if tok is None:
                break
            tokens.append(tok)
        logger.debug("lexed %d tokens", len(tokens))
        return tokens


def tokenize(source: str) -> list[Token]:
    """Split `source` into an ordered list of classified tokens.

    Raises:
        LexError: If the source contains a lexical error.
    """
    return Lexer(SourceReader(source)).tokenize()


__all__ = ["Lexer", "SourceReader", "Token", "TokenKind", "tokenize"]
