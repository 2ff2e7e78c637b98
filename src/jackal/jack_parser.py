"""
Jack Language Parser

Parses Jack language tokens into a fully nested parse tree.

This module implements the recursive-descent "compilation engine": one method
per grammar production, all mutually recursive, each consuming tokens from a
shared `TokenStream` and returning the `NonTerminal` it built. The tree is
materialized in full before anything is serialized, so a failed parse never
produces partial output.

Grammar
-------
    unit            := 'class' identifier '{' memberDecl* '}'
    memberDecl      := fieldDecl | subroutineDecl
    fieldDecl       := ('static'|'field') type varName (',' varName)* ';'
    type            := 'int' | 'char' | 'boolean' | identifier
    subroutineDecl  := ('constructor'|'function'|'method') ('void'|type) identifier
                        '(' paramList ')' subroutineBody
    paramList       := (type varName (',' type varName)*)?
    subroutineBody  := '{' localVarDecl* statementList '}'
    localVarDecl    := 'var' type varName (',' varName)* ';'
    statementList   := statement*
    statement       := letStmt | ifStmt | whileStmt | doStmt | returnStmt
    letStmt         := 'let' varName ('[' expression ']')? '=' expression ';'
    ifStmt          := 'if' '(' expression ')' '{' statementList '}'
                        ('else' '{' statementList '}')?
    whileStmt       := 'while' '(' expression ')' '{' statementList '}'
    doStmt          := 'do' call ';'
    returnStmt      := 'return' expression? ';'
    expression      := term (binOp term)*
    term            := intConst | strConst | keywordConst | unaryOp term
                      | '(' expression ')' | varName | varName '[' expression ']' | call
    call            := identifier '(' argList ')' | identifier '.' identifier '(' argList ')'
    argList         := (expression (',' expression)*)?

Parser Behavior
---------------
- Expressions are flat: `term (op term)*` grouped strictly left to right,
  with no operator precedence.
- An identifier in term position is disambiguated by one token of lookahead:
  `[` means array element, `(` or `.` means call, anything else is pushed back
  and the identifier is a plain variable.
- Rules with a "zero or more" shape stop quietly when the next token does not
  start another item; a missing required terminal raises immediately.
- Tokens left over after the class body closes are an error.
- Productions may nest at most MAX_NESTING_DEPTH deep; deeper input is
  rejected with a JackSyntaxError instead of exhausting the Python stack.

Entry Points
------------
- `Parser.compile_class()` / `parse_unit()`: parse a whole compilation unit.
- Every `Parser.compile_*` method can be called directly on a synthetic token
  stream to parse just that production.

Raises
------
JackSyntaxError
    Carries the production being matched, the enclosing production chain,
    and the index of the offending token.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from enum import Enum

from jackal.jack_ast import NonTerminal, Terminal
from jackal.jack_constants import (
    BINARY_OPS,
    KEYWORD_CONSTANTS,
    MAX_NESTING_DEPTH,
    PRIMITIVE_TYPES,
    UNARY_OPS,
)
from jackal.jack_errors import JackSyntaxError
from jackal.jack_lexer import Token, TokenKind, tokenize
from jackal.jack_logging import get_logger
from jackal.jack_token_stream import TokenStream

logger = get_logger(__name__)


class Production(Enum):
    """Grammar productions, valued by their rule names."""

    UNIT = "unit"
    FIELD_DECL = "fieldDecl"
    TYPE = "type"
    SUBROUTINE_DECL = "subroutineDecl"
    PARAM_LIST = "paramList"
    SUBROUTINE_BODY = "subroutineBody"
    LOCAL_VAR_DECL = "localVarDecl"
    STATEMENT_LIST = "statementList"
    LET_STMT = "letStmt"
    IF_STMT = "ifStmt"
    WHILE_STMT = "whileStmt"
    DO_STMT = "doStmt"
    RETURN_STMT = "returnStmt"
    EXPRESSION = "expression"
    TERM = "term"
    CALL = "call"
    ARG_LIST = "argList"

    @property
    def tag(self) -> str | None:
        """Markup tag emitted for this production, or None for dispatch-only rules."""
        return PRODUCTION_TAGS.get(self)


PRODUCTION_TAGS: dict[Production, str] = {
    Production.UNIT: "class",
    Production.FIELD_DECL: "classVarDec",
    Production.SUBROUTINE_DECL: "subroutineDec",
    Production.PARAM_LIST: "parameterList",
    Production.SUBROUTINE_BODY: "subroutineBody",
    Production.LOCAL_VAR_DECL: "varDec",
    Production.STATEMENT_LIST: "statements",
    Production.LET_STMT: "letStatement",
    Production.IF_STMT: "ifStatement",
    Production.WHILE_STMT: "whileStatement",
    Production.DO_STMT: "doStatement",
    Production.RETURN_STMT: "returnStatement",
    Production.EXPRESSION: "expression",
    Production.TERM: "term",
    Production.ARG_LIST: "expressionList",
}

# Leading keyword -> production selector.
MEMBER_SELECTORS: dict[str, Production] = {
    "static": Production.FIELD_DECL,
    "field": Production.FIELD_DECL,
    "constructor": Production.SUBROUTINE_DECL,
    "function": Production.SUBROUTINE_DECL,
    "method": Production.SUBROUTINE_DECL,
}

STATEMENT_SELECTORS: dict[str, Production] = {
    "let": Production.LET_STMT,
    "if": Production.IF_STMT,
    "while": Production.WHILE_STMT,
    "do": Production.DO_STMT,
    "return": Production.RETURN_STMT,
}


def select(selectors: dict[str, Production], token: Token | None) -> Production | None:
    """Decode a leading keyword into a production selector, or None."""
    if token is None or token.kind is not TokenKind.KEYWORD:
        return None
    return selectors.get(token.text)


class Parser:
    """
    Jack Parser Class

    Transforms a token stream into a `NonTerminal` tree rooted at `class`.

    Attributes
    ----------
    tokens : TokenStream
        The cursor over the input tokens. Owned by this parser for one parse.
    rules : list[Production]
        Productions currently being matched, outermost first. Used for
        diagnostics only.
    """

    def __init__(self, tokens: TokenStream | Iterable[Token]) -> None:
        self.tokens: TokenStream = (
            tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
        )
        self.rules: list[Production] = []

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _rule(self, production: Production) -> Iterator[None]:
        self.rules.append(production)
        try:
            if len(self.rules) > MAX_NESTING_DEPTH:
                raise self._error("Nesting too deep")
            yield
        finally:
            self.rules.pop()

    def _lookahead(self) -> Token | None:
        return self.tokens.peek()

    def _error(self, message: str) -> JackSyntaxError:
        production = self.rules[-1].value if self.rules else Production.UNIT.value
        return JackSyntaxError(
            message,
            production,
            self.tokens.position + 1,
            self._lookahead(),
            rules=tuple(rule.value for rule in self.rules),
        )

    def _expect(self, node: NonTerminal, accept: bool, description: str) -> Token:
        if not accept:
            tok = self._lookahead()
            found = "end of input" if tok is None else repr(tok.text)
            raise self._error(f"Expected {description}, got {found}")
        token = self.tokens.advance()
        node.append(Terminal.from_token(token))
        return token

    def _expect_symbol(self, node: NonTerminal, symbol: str) -> Token:
        tok = self._lookahead()
        return self._expect(node, tok is not None and tok.is_symbol(symbol), repr(symbol))

    def _expect_keyword(self, node: NonTerminal, *keywords: str) -> Token:
        tok = self._lookahead()
        description = " or ".join(repr(k) for k in keywords)
        return self._expect(node, tok is not None and tok.is_keyword(*keywords), description)

    def _expect_identifier(self, node: NonTerminal) -> Token:
        tok = self._lookahead()
        accept = tok is not None and tok.kind is TokenKind.IDENTIFIER
        return self._expect(node, accept, "identifier")

    def _next_is_symbol(self, *symbols: str) -> bool:
        tok = self._lookahead()
        return tok is not None and tok.is_symbol(*symbols)

    def _next_is_keyword(self, *keywords: str) -> bool:
        tok = self._lookahead()
        return tok is not None and tok.is_keyword(*keywords)

    def _next_is_type(self) -> bool:
        tok = self._lookahead()
        return tok is not None and (
            tok.kind is TokenKind.IDENTIFIER or tok.is_keyword(*PRIMITIVE_TYPES)
        )

    def _compile_type(self, node: NonTerminal, allow_void: bool = False) -> Token:
        with self._rule(Production.TYPE):
            if allow_void and self._next_is_keyword("void"):
                return self._expect_keyword(node, "void")
            return self._expect(node, self._next_is_type(), "type")

    def _compile_var_names(self, node: NonTerminal) -> None:
        """varName (',' varName)* ';'"""
        self._expect_identifier(node)
        while self._next_is_symbol(","):
            self._expect_symbol(node, ",")
            self._expect_identifier(node)
        self._expect_symbol(node, ";")

    # ------------------------------------------------------------------
    # Program structure
    # ------------------------------------------------------------------

    def compile_class(self) -> NonTerminal:
        """Parse a complete compilation unit and require end of input after it."""
        node = NonTerminal(PRODUCTION_TAGS[Production.UNIT])
        with self._rule(Production.UNIT):
            self._expect_keyword(node, "class")
            self._expect_identifier(node)
            self._expect_symbol(node, "{")

            while True:
                match select(MEMBER_SELECTORS, self._lookahead()):
                    case Production.FIELD_DECL:
                        node.append(self.compile_class_var_dec())
                    case Production.SUBROUTINE_DECL:
                        node.append(self.compile_subroutine())
                    case _:
                        break

            self._expect_symbol(node, "}")
            if self.tokens.has_next():
                raise self._error("Unexpected token after end of class")
        return node

    def compile_class_var_dec(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.FIELD_DECL])
        with self._rule(Production.FIELD_DECL):
            self._expect_keyword(node, "static", "field")
            self._compile_type(node)
            self._compile_var_names(node)
        return node

    def compile_subroutine(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.SUBROUTINE_DECL])
        with self._rule(Production.SUBROUTINE_DECL):
            self._expect_keyword(node, "constructor", "function", "method")
            self._compile_type(node, allow_void=True)
            self._expect_identifier(node)
            self._expect_symbol(node, "(")
            node.append(self.compile_parameter_list())
            self._expect_symbol(node, ")")
            node.append(self.compile_subroutine_body())
        return node

    def compile_parameter_list(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.PARAM_LIST])
        with self._rule(Production.PARAM_LIST):
            if self._next_is_type():
                self._compile_type(node)
                self._expect_identifier(node)
                while self._next_is_symbol(","):
                    self._expect_symbol(node, ",")
                    self._compile_type(node)
                    self._expect_identifier(node)
        return node

    def compile_subroutine_body(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.SUBROUTINE_BODY])
        with self._rule(Production.SUBROUTINE_BODY):
            self._expect_symbol(node, "{")
            while self._next_is_keyword("var"):
                node.append(self.compile_var_dec())
            node.append(self.compile_statements())
            self._expect_symbol(node, "}")
        return node

    def compile_var_dec(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.LOCAL_VAR_DECL])
        with self._rule(Production.LOCAL_VAR_DECL):
            self._expect_keyword(node, "var")
            self._compile_type(node)
            self._compile_var_names(node)
        return node

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def compile_statements(self) -> NonTerminal:
        """Parse statements until the next token does not start one."""
        node = NonTerminal(PRODUCTION_TAGS[Production.STATEMENT_LIST])
        with self._rule(Production.STATEMENT_LIST):
            while True:
                match select(STATEMENT_SELECTORS, self._lookahead()):
                    case Production.LET_STMT:
                        node.append(self.compile_let())
                    case Production.IF_STMT:
                        node.append(self.compile_if())
                    case Production.WHILE_STMT:
                        node.append(self.compile_while())
                    case Production.DO_STMT:
                        node.append(self.compile_do())
                    case Production.RETURN_STMT:
                        node.append(self.compile_return())
                    case _:
                        break
        return node

    def compile_let(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.LET_STMT])
        with self._rule(Production.LET_STMT):
            self._expect_keyword(node, "let")
            self._expect_identifier(node)
            if self._next_is_symbol("["):
                self._expect_symbol(node, "[")
                node.append(self.compile_expression())
                self._expect_symbol(node, "]")
            self._expect_symbol(node, "=")
            node.append(self.compile_expression())
            self._expect_symbol(node, ";")
        return node

    def _compile_block(self, node: NonTerminal) -> None:
        """'{' statementList '}'"""
        self._expect_symbol(node, "{")
        node.append(self.compile_statements())
        self._expect_symbol(node, "}")

    def _compile_parenthesized(self, node: NonTerminal) -> None:
        """'(' expression ')'"""
        self._expect_symbol(node, "(")
        node.append(self.compile_expression())
        self._expect_symbol(node, ")")

    def compile_if(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.IF_STMT])
        with self._rule(Production.IF_STMT):
            self._expect_keyword(node, "if")
            self._compile_parenthesized(node)
            self._compile_block(node)
            if self._next_is_keyword("else"):
                self._expect_keyword(node, "else")
                self._compile_block(node)
        return node

    def compile_while(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.WHILE_STMT])
        with self._rule(Production.WHILE_STMT):
            self._expect_keyword(node, "while")
            self._compile_parenthesized(node)
            self._compile_block(node)
        return node

    def compile_do(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.DO_STMT])
        with self._rule(Production.DO_STMT):
            self._expect_keyword(node, "do")
            self._expect_identifier(node)
            self._compile_call_rest(node)
            self._expect_symbol(node, ";")
        return node

    def compile_return(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.RETURN_STMT])
        with self._rule(Production.RETURN_STMT):
            self._expect_keyword(node, "return")
            if not self._next_is_symbol(";"):
                node.append(self.compile_expression())
            self._expect_symbol(node, ";")
        return node

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def compile_expression(self) -> NonTerminal:
        """term (binOp term)*, flat and left to right."""
        node = NonTerminal(PRODUCTION_TAGS[Production.EXPRESSION])
        with self._rule(Production.EXPRESSION):
            node.append(self.compile_term())
            while self._next_is_symbol(*BINARY_OPS):
                node.append(Terminal.from_token(self.tokens.advance()))
                node.append(self.compile_term())
        return node

    def compile_term(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.TERM])
        with self._rule(Production.TERM):
            tok = self._lookahead()
            if tok is None:
                raise self._error("Expected a term, got end of input")

            if tok.kind in (TokenKind.INT_CONST, TokenKind.STRING_CONST):
                node.append(Terminal.from_token(self.tokens.advance()))
            elif tok.is_keyword(*KEYWORD_CONSTANTS):
                node.append(Terminal.from_token(self.tokens.advance()))
            elif tok.is_symbol(*UNARY_OPS):
                node.append(Terminal.from_token(self.tokens.advance()))
                node.append(self.compile_term())
            elif tok.is_symbol("("):
                self._compile_parenthesized(node)
            elif tok.kind is TokenKind.IDENTIFIER:
                self._compile_identifier_term(node)
            else:
                raise self._error(f"Expected a term, got {tok.text!r}")
        return node

    def _compile_identifier_term(self, node: NonTerminal) -> None:
        """Resolve varName | varName '[' expression ']' | call with one token of lookahead."""
        node.append(Terminal.from_token(self.tokens.advance()))
        if not self.tokens.has_next():
            return

        follower = self.tokens.advance()
        self.tokens.pushback()
        if follower.is_symbol("["):
            self._expect_symbol(node, "[")
            node.append(self.compile_expression())
            self._expect_symbol(node, "]")
        elif follower.is_symbol("(", "."):
            self._compile_call_rest(node)

    def _compile_call_rest(self, node: NonTerminal) -> None:
        """The part of a call after its leading identifier."""
        with self._rule(Production.CALL):
            if self._next_is_symbol("."):
                self._expect_symbol(node, ".")
                self._expect_identifier(node)
            self._expect_symbol(node, "(")
            node.append(self.compile_expression_list())
            self._expect_symbol(node, ")")

    def compile_expression_list(self) -> NonTerminal:
        node = NonTerminal(PRODUCTION_TAGS[Production.ARG_LIST])
        with self._rule(Production.ARG_LIST):
            if not self._next_is_symbol(")"):
                node.append(self.compile_expression())
                while self._next_is_symbol(","):
                    self._expect_symbol(node, ",")
                    node.append(self.compile_expression())
        return node


def parse_unit(tokens: TokenStream | Iterable[Token]) -> NonTerminal:
    """Parse one compilation unit into its `class` tree.

    Raises:
        JackSyntaxError: If the tokens do not form exactly one class.
    """
    parser = Parser(tokens)
    try:
        tree = parser.compile_class()
    except RecursionError as e:
        # Only reachable when the interpreter's limit is below MAX_NESTING_DEPTH.
        raise JackSyntaxError(
            "Nesting too deep",
            Production.UNIT.value,
            parser.tokens.position + 1,
            parser.tokens.peek(),
        ) from e
    logger.debug("parsed class with %d tokens", len(parser.tokens))
    return tree


def parse_source(source: str) -> NonTerminal:
    """Tokenize and parse `source` in one step.

    Raises:
        LexError: On lexical errors.
        JackSyntaxError: On grammatical errors.
    """
    return parse_unit(tokenize(source))


__all__ = [
    "MEMBER_SELECTORS",
    "PRODUCTION_TAGS",
    "Parser",
    "Production",
    "STATEMENT_SELECTORS",
    "parse_source",
    "parse_unit",
]
