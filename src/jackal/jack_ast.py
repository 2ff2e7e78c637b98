"""
Defines the parse-tree node structure for the Jack language.

Classes:
    ParseNode:
        Common base of the two node shapes. Never instantiated directly.

    NonTerminal:
        One instance of a grammar rule, named by its markup tag
        (e.g. "class", "letStatement", "term") with ordered children.

    Terminal:
        One token as it appears in the tree: its kind tag and text.

    NodeDict:
        TypedDict representation for serializing nodes to plain Python dictionaries.

Children are kept in source order, so an in-order walk of the terminals
reproduces the token sequence the parser consumed.

Example:
    node = NonTerminal("term", [Terminal("integerConstant", "1")])
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, TypedDict

from jackal.jack_lexer import Token


class NodeDict(TypedDict, total=False):
    """
    Dictionary shape of a serialized node.

    Nonterminals carry `tag` and `children`; terminals carry `kind` and `text`.
    """

    tag: str
    children: list["NodeDict"]
    kind: str
    text: str


class ParseNode:
    """Base class for parse-tree nodes."""

    __slots__ = ()

    def to_dict(self) -> NodeDict:
        raise NotImplementedError

    def iter_terminals(self) -> Iterator[Terminal]:
        raise NotImplementedError


class Terminal(ParseNode):
    """
    A leaf of the parse tree.

    Args:
        kind (str): Token kind tag ("keyword", "symbol", "identifier",
            "integerConstant", "stringConstant").
        text (str): The token text, unescaped.
    """

    __slots__ = ("kind", "text")

    def __init__(self, kind: str, text: str) -> None:
        self.kind = kind
        self.text = text

    @classmethod
    def from_token(cls, token: Token) -> Terminal:
        return cls(token.kind.tag, token.text)

    def __repr__(self) -> str:
        return f"Terminal({self.kind}, {self.text!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Terminal)
            and self.kind == other.kind
            and self.text == other.text
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text))

    def to_dict(self) -> NodeDict:
        return {"kind": self.kind, "text": self.text}

    def iter_terminals(self) -> Iterator[Terminal]:
        yield self


class NonTerminal(ParseNode):
    """
    An interior node of the parse tree.

    Args:
        name (str): The rule's tag name (lower camel case).
        children (list[ParseNode], optional): Child nodes in source order.

    Methods:
        append(child): Adds a child at the end.
        find_all(name): Yields every descendant nonterminal with that name, pre-order.
        iter_terminals(): Yields the leaves in source order.
        to_dict(): Converts the subtree to nested dictionaries.
    """

    __slots__ = ("name", "children")

    def __init__(self, name: str, children: list[ParseNode] | None = None) -> None:
        self.name = name
        self.children: list[ParseNode] = children or []

    def append(self, child: ParseNode) -> ParseNode:
        self.children.append(child)
        return child

    def __repr__(self) -> str:
        preview = ", ".join(repr(c) for c in self.children[:3])
        if len(self.children) > 3:
            preview += ", ..."
        return f"NonTerminal({self.name}, children=[{preview}])"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, NonTerminal)
            and self.name == other.name
            and self.children == other.children
        )

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, index: int) -> ParseNode:
        return self.children[index]

    def __len__(self) -> int:
        return len(self.children)

    def nonterminals(self) -> list[NonTerminal]:
        """Direct children that are nonterminals."""
        return [c for c in self.children if isinstance(c, NonTerminal)]

    def find_all(self, name: str) -> Iterator[NonTerminal]:
        for child in self.children:
            if isinstance(child, NonTerminal):
                if child.name == name:
                    yield child
                yield from child.find_all(name)

    def iter_terminals(self) -> Iterator[Terminal]:
        for child in self.children:
            yield from child.iter_terminals()

    def to_dict(self) -> NodeDict:
        return {"tag": self.name, "children": [c.to_dict() for c in self.children]}


__all__ = ["NodeDict", "NonTerminal", "ParseNode", "Terminal"]
