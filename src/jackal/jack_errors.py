"""
Error types raised by the Jack front-end.

Lexical and grammatical failures are `SyntaxError` subclasses so callers that
already guard a compile step with `except SyntaxError` keep working. I/O
failures are `OSError` subclasses that remember which path was involved.

Classes:
    LexError: Malformed comment, string, integer, or stray character.
    JackSyntaxError: Expected terminal or nonterminal start missing.
    ResourceError: Source unreadable or output unwritable.

None of these are recoverable inside a compilation unit; the driver reports
them and moves on to the next file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jackal.jack_lexer import Token


class LexError(SyntaxError):
    """Raised when source text cannot be split into tokens.

    Attributes:
        line (int): 1-based line of the offending character.
        col (int): 1-based column of the offending character.
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"{message} at line {line}, col {col}")
        self.line = line
        self.col = col


class JackSyntaxError(SyntaxError):
    """Raised when the token stream does not match the grammar.

    Attributes:
        production (str): Grammar rule being matched (e.g. ``whileStmt``).
        index (int): Index of the offending token in the stream; equals the
            stream length when input ended early.
        token (Token | None): The offending token, or None at end of input.
        rules (tuple[str, ...]): Enclosing productions, outermost first,
            ending with `production`. `production` is where matching stopped,
            often a `term` or `expression`; `rules` (or `statement`) tells
            which statement or declaration it was inside.
    """

    def __init__(
        self,
        message: str,
        production: str,
        index: int,
        token: Token | None = None,
        rules: tuple[str, ...] = (),
    ) -> None:
        if token is None:
            where = f"token #{index} (end of input)"
        else:
            where = f"token #{index} {token.text!r} at line {token.line}, col {token.col}"
        chain = f" ({' > '.join(rules)})" if len(rules) > 1 else ""
        super().__init__(f"{message} in {production}{chain}: {where}")
        self.production = production
        self.rules = rules or (production,)
        self.index = index
        self.token = token

    @property
    def statement(self) -> str | None:
        """Innermost enclosing statement rule, e.g. ``whileStmt``, or None."""
        for rule in reversed(self.rules):
            if rule.endswith("Stmt"):
                return rule
        return None


class ResourceError(OSError):
    """Raised when a source file cannot be read or an output cannot be written.

    Attributes:
        path (str): The file that could not be accessed.
    """

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


__all__ = ["JackSyntaxError", "LexError", "ResourceError"]
