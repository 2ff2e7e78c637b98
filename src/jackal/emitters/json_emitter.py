"""
Renders parse events as a nested JSON document.

Nonterminals become `{"tag": name, "children": [...]}` and terminals become
`{"kind": kind, "text": text}`, mirroring `NonTerminal.to_dict()` and
`Terminal.to_dict()`. Token text is stored unescaped; JSON needs no markup
escaping.
"""

import json
from typing import Any


class JsonEmitter:
    """Builds a JSON tree from parse events.

    Attributes:
        root (dict | None): The finished outermost node, set when its tag closes.
        stack (list[dict]): Nodes opened and not yet closed.
        indent (int): Indentation passed to `json.dumps`.
    """

    def __init__(self, indent: int = 2) -> None:
        self.root: dict[str, Any] | None = None
        self.stack: list[dict[str, Any]] = []
        self.indent = indent

    def open_tag(self, name: str) -> None:
        self.stack.append({"tag": name, "children": []})

    def leaf(self, kind: str, text: str) -> None:
        if not self.stack:
            raise ValueError(f"Terminal {kind} {text!r} outside of any tag")
        self.stack[-1]["children"].append({"kind": kind, "text": text})

    def close_tag(self, name: str) -> None:
        if not self.stack or self.stack[-1]["tag"] != name:
            expected = self.stack[-1]["tag"] if self.stack else None
            raise ValueError(f"Close tag {name!r} does not match open tag {expected!r}")
        node = self.stack.pop()
        if self.stack:
            self.stack[-1]["children"].append(node)
        else:
            self.root = node

    def get_output(self) -> str:
        if self.stack:
            raise ValueError(f"Unclosed tags: {', '.join(n['tag'] for n in self.stack)}")
        if self.root is None:
            return ""
        return json.dumps(self.root, indent=self.indent or None) + "\n"
