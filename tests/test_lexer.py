import pytest
from hypothesis import given
from hypothesis import strategies as st

from jackal.jack_constants import KEYWORDS, SYMBOLS
from jackal.jack_errors import LexError
from jackal.jack_lexer import Lexer, SourceReader, Token, TokenKind, tokenize


def kinds_and_texts(source: str) -> list[tuple[TokenKind, str]]:
    return [(tok.kind, tok.text) for tok in tokenize(source)]


def test_all_symbols_are_single_char_tokens() -> None:
    code = " ".join(sorted(SYMBOLS))
    tokens = tokenize(code)
    assert [t.kind for t in tokens] == [TokenKind.SYMBOL] * len(SYMBOLS)
    assert [t.text for t in tokens] == sorted(SYMBOLS)


def test_adjacent_symbols_need_no_whitespace() -> None:
    assert [t.text for t in tokenize("a[i]=-1;")] == ["a", "[", "i", "]", "=", "-", "1", ";"]


@pytest.mark.parametrize("word", sorted(KEYWORDS))
def test_every_keyword_is_classified(word: str) -> None:
    assert kinds_and_texts(word) == [(TokenKind.KEYWORD, word)]


@pytest.mark.parametrize("word", ["classy", "Class", "_this", "x1", "while_"])
def test_keyword_lookalikes_are_identifiers(word: str) -> None:
    assert kinds_and_texts(word) == [(TokenKind.IDENTIFIER, word)]


def test_integer_constant_is_decoded() -> None:
    assert kinds_and_texts("007") == [(TokenKind.INT_CONST, "7")]


def test_integer_constant_upper_bound() -> None:
    assert kinds_and_texts("32767") == [(TokenKind.INT_CONST, "32767")]
    with pytest.raises(LexError, match="out of range"):
        tokenize("32768")


def test_digits_then_letters_split_into_two_tokens() -> None:
    assert kinds_and_texts("12ab") == [
        (TokenKind.INT_CONST, "12"),
        (TokenKind.IDENTIFIER, "ab"),
    ]


def test_string_constant_is_unquoted() -> None:
    assert kinds_and_texts('"hello world"') == [(TokenKind.STRING_CONST, "hello world")]


def test_empty_string_constant() -> None:
    assert kinds_and_texts('""') == [(TokenKind.STRING_CONST, "")]


def test_comment_markers_inside_string_are_content() -> None:
    tokens = tokenize('let s = "a // b /* c */";')
    assert tokens[3] == Token(TokenKind.STRING_CONST, "a // b /* c */")
    assert tokens[4].text == ";"


def test_unterminated_string_raises() -> None:
    with pytest.raises(LexError, match="Unterminated string constant at line 1, col 5"):
        tokenize('let "abc')


def test_string_may_not_cross_a_line() -> None:
    with pytest.raises(LexError, match="Unterminated string constant"):
        tokenize('"abc\ndef"')


def test_line_comment_is_skipped() -> None:
    assert kinds_and_texts("x // y z\nw") == [
        (TokenKind.IDENTIFIER, "x"),
        (TokenKind.IDENTIFIER, "w"),
    ]


def test_block_comment_spanning_lines_is_skipped() -> None:
    source = "a /* one\n two\n three */ b /** doc */ c"
    assert [t.text for t in tokenize(source)] == ["a", "b", "c"]


def test_block_comment_mid_line() -> None:
    assert [t.text for t in tokenize("let x/* inline */= 1;")] == ["let", "x", "=", "1", ";"]


def test_unterminated_block_comment_raises() -> None:
    with pytest.raises(LexError, match="Unterminated block comment at line 2, col 3"):
        tokenize("x\n  /* never closed\n y")


def test_division_is_not_a_comment() -> None:
    assert [t.text for t in tokenize("a / b")] == ["a", "/", "b"]


@pytest.mark.parametrize("bad", ["#", "$", "@", "!", "'", "\\", "?", "%", "é"])
def test_unexpected_character_raises(bad: str) -> None:
    with pytest.raises(LexError, match="Unexpected character"):
        tokenize(f"x {bad} y")


def test_lex_error_records_position() -> None:
    with pytest.raises(LexError) as excinfo:
        tokenize("let x = 1;\n  x = $;")
    assert (excinfo.value.line, excinfo.value.col) == (2, 7)


def test_line_and_column_tracking() -> None:
    tokens = tokenize("class Main {\n  field int x;\n}")
    field_tok = tokens[3]
    assert field_tok.text == "field"
    assert (field_tok.line, field_tok.col) == (2, 3)


def test_empty_and_blank_inputs() -> None:
    assert tokenize("") == []
    assert tokenize("  \n\t // only a comment\n /* and another */ ") == []


def test_next_token_returns_none_at_end() -> None:
    lexer = Lexer(SourceReader("x"))
    assert lexer.next_token() == Token(TokenKind.IDENTIFIER, "x")
    assert lexer.next_token() is None


def test_token_equality_ignores_location() -> None:
    t1 = Token(TokenKind.INT_CONST, "42", 1, 2)
    t2 = Token(TokenKind.INT_CONST, "42", 7, 9)
    t3 = Token(TokenKind.IDENTIFIER, "x")

    assert repr(t1) == "Token(integerConstant, 42)"
    assert str(t3) == "identifier x"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_token_is_immutable() -> None:
    tok = Token(TokenKind.SYMBOL, ";")
    with pytest.raises(AttributeError):
        tok.text = ","  # type: ignore[misc]


def test_source_reader_tracks_location() -> None:
    reader = SourceReader("ab\ncd")
    assert reader.take_while(str.isalpha) == "ab"
    assert reader.location == (1, 3)
    reader.advance()
    assert reader.location == (2, 1)
    assert reader.peek() == "c"
    assert reader.peek(5) == ""
    assert reader.take_while(str.isalpha) == "cd"
    assert reader.at_end()


def test_source_reader_advance_past_end_raises() -> None:
    with pytest.raises(IndexError):
        SourceReader("").advance()


@given(st.text(alphabet="abcxyz019 \n\t{}()[].,;+-*/&|<>=~\"", max_size=80))
def test_lexer_only_fails_with_lex_error(source: str) -> None:
    try:
        tokens = tokenize(source)
    except LexError:
        return
    assert all(isinstance(t, Token) for t in tokens)


@given(st.text(min_size=1, max_size=60))
def test_arbitrary_text_never_crashes(source: str) -> None:
    try:
        tokenize(source)
    except LexError:
        pass
