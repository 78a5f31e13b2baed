"""
MFL Language Parser

Parses an MFL token stream into an abstract syntax tree (AST).

This module implements a recursive-descent parser with one method per grammar
non-terminal. Each method consumes exactly the tokens of the construct it
recognizes and returns a fully built subtree, or raises `ParseError`; a partially
built node never escapes a parsing method.

Grammar
-------
Precedence runs from lowest (top) to highest (bottom)::

    prog    → val ";" { val ";" }
    val     → "val" ID ":=" expr | expr
    expr    → rexpr { ( and | or ) rexpr }
    rexpr   → mexpr [ ( < | <= | > | >= | = | != ) mexpr ]
    mexpr   → term { ( + | - ) term }
    term    → unary { ( * | / ) unary }
    unary   → "not" factor | factor
    factor  → INT | REAL | true | false | ID | "(" expr ")"

- Repeated operators on one tier fold left: `a - b - c` is `(a - b) - c`.
- `and` and `or` share a tier.
- Relational operators are non-associative: `a < b < c` is a syntax error.
- `not` applies to a single factor: `not a < b` is `(not a) < b`.
- Parentheses leave no node of their own.
- `val x := e` is built as `BinOpNode(TokenNode(x), e, ASSIGN)`.

Cursor Invariant
----------------
On entry to and exit from every parsing method, the token source's current token
is the next unconsumed token. `match` and `check_match` advance only on success;
`token_is` never advances.

Parser Behavior
---------------
- Fail-fast: the first unexpected token aborts the whole parse.
- Each failure is logged on the `mfl.mfl_parser` logger before `ParseError` is raised.
- Never looks more than one token ahead.
- Parentheses nested deeper than the interpreter stack allows fail with
  `ParseError("Expression nested too deeply")`, not `RecursionError`.

Entry Points
------------
- `Parser.parse()`: parse a full program into a `SyntaxTree`.
- `Parser.from_string(text)`, `Parser.from_file(path)`: build a parser over source text.
- `parse_source(text)`, `parse_file(path)`: one-call conveniences.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from mfl.mfl_ast import (
    BinOpNode,
    ProgNode,
    RelOpNode,
    SyntaxNode,
    SyntaxTree,
    TokenNode,
    UnaryOpNode,
)
from mfl.mfl_constants import (
    TokenType,
    additive_ops,
    literal_tokens,
    logical_ops,
    multiplicative_ops,
    relational_ops,
)
from mfl.mfl_errors import ParseError
from mfl.mfl_lexer import CharacterStream, Lexer, Token

logger = logging.getLogger(__name__)


class TokenSource(Protocol):
    """The lexical interface the parser depends on."""

    def next_token(self) -> Token: ...  # pragma: no cover

    def current_token(self) -> Token: ...  # pragma: no cover

    def current_line(self) -> int: ...  # pragma: no cover


class Parser:
    """
    MFL Parser Class

    Transforms a token source into a `SyntaxTree`. A parser instance owns its token
    source and is good for a single `parse()` call.

    Attributes
    ----------
    source : TokenSource
        The token source being parsed.

    Methods
    -------
    parse() -> SyntaxTree
        Parse a complete program and require end of input.
    parse_prog() -> SyntaxNode
        Parse one or more `;`-terminated statements.
    parse_val() -> SyntaxNode
        Parse a `val` binding or a bare expression.
    parse_expr() -> SyntaxNode
        Parse an `and`/`or` chain of relational expressions.
    parse_rel_op(left) -> SyntaxNode
        Parse an optional single relational operator following `left`.
    parse_mexpr() -> SyntaxNode
        Parse an additive chain.
    parse_term() -> SyntaxNode
        Parse a multiplicative chain.
    parse_unary_op() -> SyntaxNode
        Parse an optionally negated factor.
    parse_factor() -> SyntaxNode
        Parse a literal, identifier, or parenthesized expression.

    Raises
    ------
    ParseError
        On the first token that does not fit the grammar.
    """

    def __init__(self, source: TokenSource) -> None:
        self.source = source

    @classmethod
    def from_string(cls, text: str) -> Parser:
        return cls(Lexer(CharacterStream(text)))

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Parser:
        with open(path, encoding="utf-8") as f:
            return cls.from_string(f.read())

    # Cursor primitives

    def next_token(self) -> Token:
        return self.source.next_token()

    def current_token(self) -> Token:
        return self.source.current_token()

    def current_line(self) -> int:
        return self.source.current_line()

    def token_is(self, *types: TokenType) -> bool:
        """Checks the current token against `types` without consuming it."""
        return self.current_token().type in types

    def match(self, type_: TokenType, expected: str) -> Token:
        """Consumes and returns the current token if it has `type_`, otherwise fails."""
        tok = self.current_token()
        if tok.type is not type_:
            raise self.error(f"Expected {expected}")
        self.next_token()
        return tok

    def check_match(self, type_: TokenType) -> bool:
        """Consumes the current token and returns True if it has `type_`."""
        if self.token_is(type_):
            self.next_token()
            return True
        return False

    def error(self, message: str) -> ParseError:
        """Logs `message` against the current token and returns the error to raise."""
        tok = self.current_token()
        line = self.current_line()
        found = "end of input" if tok.type is TokenType.EOF else repr(tok)
        full = f"{message}, found {found}"
        logger.error("Parse error on line %d: %s", line, full)
        return ParseError(full, line, tok)

    # Grammar

    def parse(self) -> SyntaxTree:
        """Parse a full MFL program and return its syntax tree."""
        self.next_token()
        try:
            root = self.parse_prog()
        except RecursionError:
            raise self.error("Expression nested too deeply") from None
        self.match(TokenType.EOF, "end of input")
        logger.debug("Parsed %d statement(s)", len(root.statements))
        return SyntaxTree(root)

    def parse_prog(self) -> ProgNode:
        """prog → val ";" { val ";" }"""
        line = self.current_line()
        statements = [self.parse_val()]
        self.match(TokenType.SEMI, "';'")

        while not self.token_is(TokenType.EOF):
            statements.append(self.parse_val())
            self.match(TokenType.SEMI, "';'")

        return ProgNode(tuple(statements), line=line)

    def parse_val(self) -> SyntaxNode:
        """val → "val" ID ":=" expr | expr"""
        if not self.token_is(TokenType.VAL):
            return self.parse_expr()

        line = self.current_line()
        self.next_token()
        ident = self.match(TokenType.ID, "identifier after 'val'")
        self.match(TokenType.ASSIGN, "':='")
        rhs = self.parse_expr()
        return BinOpNode(
            TokenNode(ident, line=ident.line), rhs, TokenType.ASSIGN, line=line
        )

    def parse_expr(self) -> SyntaxNode:
        """expr → rexpr { ( and | or ) rexpr }"""
        left = self.parse_rel_op(self.parse_mexpr())

        while self.token_is(*logical_ops):
            op_tok = self.current_token()
            self.next_token()
            right = self.parse_rel_op(self.parse_mexpr())
            left = BinOpNode(left, right, op_tok.type, line=op_tok.line)

        return left

    def parse_rel_op(self, left: SyntaxNode) -> SyntaxNode:
        """rexpr → mexpr [ relop mexpr ], given the already parsed left mexpr.

        At most one relational operator is consumed, so a second one is left for the
        caller and fails there.
        """
        if not self.token_is(*relational_ops):
            return left

        op_tok = self.current_token()
        self.next_token()
        right = self.parse_mexpr()
        return RelOpNode(left, right, op_tok.type, line=op_tok.line)

    def parse_mexpr(self) -> SyntaxNode:
        """mexpr → term { ( + | - ) term }"""
        left = self.parse_term()

        while self.token_is(*additive_ops):
            op_tok = self.current_token()
            self.next_token()
            right = self.parse_term()
            left = BinOpNode(left, right, op_tok.type, line=op_tok.line)

        return left

    def parse_term(self) -> SyntaxNode:
        """term → unary { ( * | / ) unary }"""
        left = self.parse_unary_op()

        while self.token_is(*multiplicative_ops):
            op_tok = self.current_token()
            self.next_token()
            right = self.parse_unary_op()
            left = BinOpNode(left, right, op_tok.type, line=op_tok.line)

        return left

    def parse_unary_op(self) -> SyntaxNode:
        """unary → "not" factor | factor"""
        if not self.token_is(TokenType.NOT):
            return self.parse_factor()

        line = self.current_line()
        self.next_token()
        operand = self.parse_factor()
        return UnaryOpNode(operand, TokenType.NOT, line=line)

    def parse_factor(self) -> SyntaxNode:
        """factor → INT | REAL | true | false | ID | "(" expr ")" """
        line = self.current_line()

        if self.token_is(*literal_tokens):
            tok = self.current_token()
            self.next_token()
            return TokenNode(tok, line=line)

        if self.check_match(TokenType.LPAREN):
            expr = self.parse_expr()
            self.match(TokenType.RPAREN, "')'")
            return expr

        raise self.error("Expected a value or '('")


def parse_source(text: str) -> SyntaxTree:
    """Parse MFL source text into a syntax tree."""
    return Parser.from_string(text).parse()


def parse_file(path: str | os.PathLike[str]) -> SyntaxTree:
    """Parse the MFL source file at `path` into a syntax tree."""
    return Parser.from_file(path).parse()


__all__ = ["Parser", "TokenSource", "parse_file", "parse_source"]
