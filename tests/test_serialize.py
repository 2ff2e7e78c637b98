import html
import json
import re
import textwrap
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jackal.jack_ast import NonTerminal, Terminal
from jackal.jack_lexer import Token, TokenKind, tokenize
from jackal.jack_parser import parse_source
from jackal.jack_serialize import Emitter, Serializer, walk

SCENARIO = "class Foo { field int x; constructor Foo new() { return this; } }"

SCENARIO_XML = textwrap.dedent(
    """\
    <class>
    <keyword> class </keyword>
    <identifier> Foo </identifier>
    <symbol> { </symbol>
    <classVarDec>
    <keyword> field </keyword>
    <keyword> int </keyword>
    <identifier> x </identifier>
    <symbol> ; </symbol>
    </classVarDec>
    <subroutineDec>
    <keyword> constructor </keyword>
    <identifier> Foo </identifier>
    <identifier> new </identifier>
    <symbol> ( </symbol>
    <parameterList>
    </parameterList>
    <symbol> ) </symbol>
    <subroutineBody>
    <symbol> { </symbol>
    <statements>
    <returnStatement>
    <keyword> return </keyword>
    <expression>
    <term>
    <keyword> this </keyword>
    </term>
    </expression>
    <symbol> ; </symbol>
    </returnStatement>
    </statements>
    <symbol> } </symbol>
    </subroutineBody>
    </subroutineDec>
    <symbol> } </symbol>
    </class>
    """
)


class RecordingEmitter:
    """Collects raw events; satisfies the Emitter protocol."""

    def __init__(self) -> None:
        self.events: list[tuple[str, ...]] = []

    def open_tag(self, name: str) -> None:
        self.events.append(("open", name))

    def leaf(self, kind: str, text: str) -> None:
        self.events.append(("leaf", kind, text))

    def close_tag(self, name: str) -> None:
        self.events.append(("close", name))

    def get_output(self) -> str:
        return repr(self.events)


def test_scenario_xml_is_bit_exact() -> None:
    assert Serializer("xml").serialize(parse_source(SCENARIO)) == SCENARIO_XML


def test_token_listing_format() -> None:
    listing = Serializer("xml").serialize_tokens(tokenize('if (x < 10) { let s = "a&b"; }'))
    assert listing.splitlines() == [
        "<tokens>",
        "<keyword> if </keyword>",
        "<symbol> ( </symbol>",
        "<identifier> x </identifier>",
        "<symbol> &lt; </symbol>",
        "<integerConstant> 10 </integerConstant>",
        "<symbol> ) </symbol>",
        "<symbol> { </symbol>",
        "<keyword> let </keyword>",
        "<identifier> s </identifier>",
        "<symbol> = </symbol>",
        "<stringConstant> a&b </stringConstant>",
        "<symbol> ; </symbol>",
        "<symbol> } </symbol>",
        "</tokens>",
    ]


@pytest.mark.parametrize("symbol,rendered", [("<", "&lt;"), (">", "&gt;"), ("&", "&amp;"), ("|", "|")])
def test_symbol_escaping(symbol: str, rendered: str) -> None:
    tree = parse_source(f"class A {{ function int f() {{ return a {symbol} b; }} }}")
    assert f"<symbol> {rendered} </symbol>" in Serializer("xml").serialize(tree).splitlines()


def test_walk_drives_any_emitter() -> None:
    emitter: Emitter = RecordingEmitter()
    walk(NonTerminal("term", [Terminal("integerConstant", "7")]), emitter)
    assert emitter.events == [  # type: ignore[attr-defined]
        ("open", "term"),
        ("leaf", "integerConstant", "7"),
        ("close", "term"),
    ]


def test_walk_rejects_non_nodes() -> None:
    with pytest.raises(TypeError, match="expected a ParseNode"):
        walk("not-a-node", RecordingEmitter())  # type: ignore[arg-type]


def test_unknown_target_raises() -> None:
    with pytest.raises(ValueError, match="Unknown output target"):
        Serializer("yaml")


def test_target_is_case_insensitive() -> None:
    assert Serializer("JSON").target == "json"
    assert Serializer("XML").extension == ".xml"


def test_xml_indent_option() -> None:
    text = Serializer("xml", indent=2).serialize(NonTerminal("term", [Terminal("keyword", "null")]))
    assert text == "<term>\n  <keyword> null </keyword>\n</term>\n"


def test_json_target_mirrors_tree(main_source: str) -> None:
    tree = parse_source(main_source)
    assert json.loads(Serializer("json").serialize(tree)) == tree.to_dict()


def test_json_token_listing() -> None:
    data = json.loads(Serializer("json").serialize_tokens(tokenize("x < 1")))
    assert data == {
        "tag": "tokens",
        "children": [
            {"kind": "identifier", "text": "x"},
            {"kind": "symbol", "text": "<"},
            {"kind": "integerConstant", "text": "1"},
        ],
    }


def test_tags_balance(main_source: str, square_source: str) -> None:
    for source in (main_source, square_source):
        stack: list[str] = []
        for line in Serializer("xml").serialize(parse_source(source)).splitlines():
            if re.fullmatch(r"<(\w+)> .* </\1>", line):
                continue
            opening = re.fullmatch(r"<(\w+)>", line)
            closing = re.fullmatch(r"</(\w+)>", line)
            if opening:
                stack.append(opening.group(1))
            else:
                assert closing is not None, line
                assert stack.pop() == closing.group(1)
        assert stack == []


def tokens_from_listing(listing: str) -> list[Token]:
    """Rebuild source from a token listing by dropping markup, then lex it again."""
    pieces = []
    for match in re.finditer(r"<(\w+)> (.*) </\1>", listing):
        kind, text = match.group(1), match.group(2)
        if kind == TokenKind.SYMBOL.tag:
            text = html.unescape(text)
        elif kind == TokenKind.STRING_CONST.tag:
            text = f'"{text}"'
        pieces.append(text)
    return tokenize(" ".join(pieces))


def test_token_listing_round_trips(main_source: str, square_source: str) -> None:
    for source in (main_source, square_source):
        tokens = tokenize(source)
        assert tokens_from_listing(Serializer("xml").serialize_tokens(tokens)) == tokens


lexemes = st.one_of(
    st.sampled_from(sorted("{}()[].,;+-*/&|<>=~")),
    st.sampled_from(["class", "let", "while", "this", "null"]),
    st.from_regex(r"[a-z_][a-z0-9_]{0,6}", fullmatch=True),
    st.integers(min_value=0, max_value=32767).map(str),
    st.from_regex(r'"[a-z <>&]{0,8}"', fullmatch=True),
)


@given(st.lists(lexemes, max_size=30))
def test_token_listing_round_trips_for_random_tokens(parts: list[str]) -> None:
    tokens = tokenize(" ".join(parts))
    assert tokens_from_listing(Serializer("xml").serialize_tokens(tokens)) == tokens


def summarize(events: list[Any]) -> int:
    return sum(1 for e in events if e[0] == "leaf")


def test_event_leaf_count_matches_tokens(square_source: str) -> None:
    emitter = RecordingEmitter()
    walk(parse_source(square_source), emitter)
    assert summarize(emitter.events) == len(tokenize(square_source))
