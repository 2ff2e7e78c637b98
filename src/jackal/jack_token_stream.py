"""
Cursor over a pre-classified token sequence.

The parser reads tokens exclusively through a `TokenStream`. The sequence is
fixed at construction; only the cursor moves. Because tokens are classified
once by the lexer, stepping back is a plain index decrement with no rescan.

Cursor states:
    -1          before the first `advance()`
    0..len-1    positioned on a token
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from jackal.jack_lexer import Token


class TokenStream:
    """An immutable token sequence with a forward cursor and one-token pushback.

    Attributes:
        position (int): Index of the current token, -1 before the first advance.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self.position: int = -1
        self._can_push_back = False

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __repr__(self) -> str:
        return f"TokenStream(position={self.position}, length={len(self._tokens)})"

    def has_next(self) -> bool:
        return self.position + 1 < len(self._tokens)

    def advance(self) -> Token:
        """Moves the cursor forward one token and returns it.

        Raises:
            IndexError: If no tokens remain.
        """
        if not self.has_next():
            raise IndexError(f"No token after position {self.position}")
        self.position += 1
        self._can_push_back = True
        return self._tokens[self.position]

    def current(self) -> Token:
        """Returns the token under the cursor.

        Raises:
            IndexError: Before the first advance or past the end.
        """
        if not 0 <= self.position < len(self._tokens):
            raise IndexError(f"No current token at position {self.position}")
        return self._tokens[self.position]

    def peek(self) -> Token | None:
        """Returns the token after the cursor without moving, or None at the end."""
        if not self.has_next():
            return None
        return self._tokens[self.position + 1]

    def pushback(self) -> None:
        """Moves the cursor back exactly one token.

        Valid only directly after an `advance`; a second pushback in a row or a
        pushback off the first token means the caller's grammar walk is
        broken.

        Raises:
            RuntimeError: On any pushback not immediately preceded by an advance.
        """
        if not self._can_push_back or self.position <= 0:
            raise RuntimeError(
                f"Invalid pushback at position {self.position}: only one token may be returned"
            )
        self.position -= 1
        self._can_push_back = False


__all__ = ["TokenStream"]
