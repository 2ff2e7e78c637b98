"""
Renders parse events as the line-oriented tagged markup used by the Jack tooling.

This module defines the `XmlEmitter` class, a sink for the three parse events
(open tag, leaf, close tag) that accumulates one markup line per event:

    <class>
    <keyword> class </keyword>
    <identifier> Main </identifier>
    <symbol> { </symbol>
    ...
    </class>

Behavior:
    - Terminals render as `<kind> text </kind>` with a single space of padding.
    - The symbols `<`, `>` and `&` render as `&lt;`, `&gt;` and `&amp;`; every
      other token text is written as is.
    - Lines are not indented unless an indent width is requested.
    - Close tags are checked against the open ones, so the output is always
      balanced.

Raises:
    - `ValueError`: If a close tag does not match the innermost open tag, or
      output is requested while tags are still open.
"""

from jackal.jack_constants import SYMBOL_ESCAPES


def escape_symbol(text: str) -> str:
    return SYMBOL_ESCAPES.get(text, text)


class XmlEmitter:
    """Emits tagged markup from parse events.

    Attributes:
        lines (list[str]): Accumulated output lines.
        indent (int): Spaces per nesting level (0 for flat output).
        open_tags (list[str]): Tags opened and not yet closed, outermost first.
    """

    def __init__(self, indent: int = 0) -> None:
        self.lines: list[str] = []
        self.indent = indent
        self.open_tags: list[str] = []

    def indent_str(self) -> str:
        return " " * (self.indent * len(self.open_tags))

    def open_tag(self, name: str) -> None:
        self.lines.append(f"{self.indent_str()}<{name}>")
        self.open_tags.append(name)

    def leaf(self, kind: str, text: str) -> None:
        if kind == "symbol":
            text = escape_symbol(text)
        self.lines.append(f"{self.indent_str()}<{kind}> {text} </{kind}>")

    def close_tag(self, name: str) -> None:
        if not self.open_tags or self.open_tags[-1] != name:
            expected = self.open_tags[-1] if self.open_tags else None
            raise ValueError(f"Close tag </{name}> does not match open tag <{expected}>")
        self.open_tags.pop()
        self.lines.append(f"{self.indent_str()}</{name}>")

    def get_output(self) -> str:
        """
        Returns the full markup document, newline-terminated.

        Raises
        ------
        ValueError
            If any tag is still open.
        """
        if self.open_tags:
            raise ValueError(f"Unclosed tags: {', '.join(self.open_tags)}")
        return "\n".join(self.lines) + "\n" if self.lines else ""
