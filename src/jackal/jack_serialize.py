"""
Provides the `Serializer` class and the emitter interface for rendering Jack parse trees.

Classes and Features:
    - Emitter (Protocol): Interface every output sink implements: `open_tag`,
      `leaf`, `close_tag` and `get_output`.
    - XmlEmitter: The line-oriented tagged markup used by the Jack tooling.
    - JsonEmitter: A nested JSON rendering of the same tree.
    - Serializer: Picks an emitter by target name and drives it over a parse
      tree or over a flat token list.
    - walk(): Replays a tree as parse events into any emitter.

Usage:
    The parser builds a `NonTerminal` tree; the serializer turns it into text.
    Parsing never writes output itself.

Example:
    >>> serializer = Serializer("xml")
    >>> text = serializer.serialize(tree)
    >>> listing = serializer.serialize_tokens(tokens)

Raises:
    ValueError: If the target is not supported.
    TypeError: If something other than a parse node reaches the walker.
"""

from collections.abc import Callable, Iterable
from typing import Protocol

from jackal.emitters.json_emitter import JsonEmitter
from jackal.emitters.xml_emitter import XmlEmitter
from jackal.jack_ast import NonTerminal, ParseNode, Terminal
from jackal.jack_lexer import Token

TOKEN_LISTING_TAG = "tokens"


class Emitter(Protocol):  # pragma: no cover
    """Protocol for parse-event sinks.

    Methods:
        open_tag(name): A nonterminal starts.
        leaf(kind, text): A terminal token.
        close_tag(name): The innermost open nonterminal ends.
        get_output(): Returns the complete rendered document.
    """

    def open_tag(self, name: str) -> None: ...

    def leaf(self, kind: str, text: str) -> None: ...

    def close_tag(self, name: str) -> None: ...

    def get_output(self) -> str: ...


EmitterFactory = Callable[[], Emitter]
"""Zero-argument callable producing a fresh emitter."""

EMITTERS: dict[str, type] = {
    "xml": XmlEmitter,
    "json": JsonEmitter,
}

OUTPUT_EXTENSIONS: dict[str, str] = {
    "xml": ".xml",
    "json": ".json",
}


def walk(node: ParseNode, emitter: Emitter) -> None:
    """Replays `node` as open/leaf/close events into `emitter`, in source order.

    Raises:
        TypeError: If the tree contains an object that is not a parse node.
    """
    if isinstance(node, Terminal):
        emitter.leaf(node.kind, node.text)
    elif isinstance(node, NonTerminal):
        emitter.open_tag(node.name)
        for child in node.children:
            walk(child, emitter)
        emitter.close_tag(node.name)
    else:
        raise TypeError(f"Cannot serialize {type(node).__name__}; expected a ParseNode")


class Serializer:
    """Renders parse trees and token listings through a target emitter.

    Attributes:
        target (str): Normalized target name ("xml" or "json").
        factory (EmitterFactory): Builds a fresh emitter for each document.
    """

    def __init__(self, target: str = "xml", indent: int | None = None) -> None:
        """Initializes the serializer with the desired output target.

        Args:
            target: The output format ("xml" or "json", case-insensitive).
            indent: Indent width passed to the emitter; None keeps its default.

        Raises:
            ValueError: If the target is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown output target: {target!r}")
        self.target = target
        emitter_cls = EMITTERS[target]
        if indent is None:
            self.factory: EmitterFactory = emitter_cls
        else:
            self.factory = lambda: emitter_cls(indent=indent)

    @property
    def extension(self) -> str:
        return OUTPUT_EXTENSIONS[self.target]

    def serialize(self, tree: ParseNode) -> str:
        emitter = self.factory()
        walk(tree, emitter)
        return emitter.get_output()

    def serialize_tokens(self, tokens: Iterable[Token]) -> str:
        """Renders a flat `<tokens>` listing, independent of any parse."""
        emitter = self.factory()
        emitter.open_tag(TOKEN_LISTING_TAG)
        for token in tokens:
            emitter.leaf(token.kind.tag, token.text)
        emitter.close_tag(TOKEN_LISTING_TAG)
        return emitter.get_output()


__all__ = [
    "EMITTERS",
    "Emitter",
    "JsonEmitter",
    "Serializer",
    "XmlEmitter",
    "walk",
]
