"""
Token vocabulary for the MFL language.

Defines the closed set of token types produced by the lexer and consumed by the
parser, the lexeme table used for keyword and operator recognition, and the
operator groups that drive each precedence tier of the grammar.

Exports:
    - TokenType
    - token_hashmap
    - literal_tokens, logical_ops, relational_ops, additive_ops, multiplicative_ops
"""

from enum import Enum


class TokenType(Enum):
    """Every kind of token the MFL lexer can produce."""

    # Literals
    INT = "INT"
    REAL = "REAL"
    TRUE = "TRUE"
    FALSE = "FALSE"
    ID = "ID"

    # Keywords
    VAL = "VAL"
    NOT = "NOT"
    AND = "AND"
    OR = "OR"

    # Operators
    ASSIGN = "ASSIGN"
    ADD = "ADD"
    SUB = "SUB"
    MULT = "MULT"
    DIV = "DIV"
    LT = "LT"
    LTE = "LTE"
    GT = "GT"
    GTE = "GTE"
    EQ = "EQ"
    NEQ = "NEQ"

    # Punctuation
    SEMI = "SEMI"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"

    EOF = "EOF"

    def __str__(self) -> str:
        return self.name


# Keywords and symbols, keyed by lexeme. Keywords are case-sensitive.
token_hashmap: dict[str, TokenType] = {
    "val": TokenType.VAL,
    "not": TokenType.NOT,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    ":=": TokenType.ASSIGN,
    "+": TokenType.ADD,
    "-": TokenType.SUB,
    "*": TokenType.MULT,
    "/": TokenType.DIV,
    "<": TokenType.LT,
    "<=": TokenType.LTE,
    ">": TokenType.GT,
    ">=": TokenType.GTE,
    "=": TokenType.EQ,
    "!=": TokenType.NEQ,
    ";": TokenType.SEMI,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

keywords: frozenset[str] = frozenset(k for k in token_hashmap if k.isalpha())

literal_tokens: tuple[TokenType, ...] = (
    TokenType.TRUE,
    TokenType.FALSE,
    TokenType.INT,
    TokenType.REAL,
    TokenType.ID,
)

logical_ops: tuple[TokenType, ...] = (TokenType.AND, TokenType.OR)

relational_ops: tuple[TokenType, ...] = (
    TokenType.LT,
    TokenType.LTE,
    TokenType.GT,
    TokenType.GTE,
    TokenType.EQ,
    TokenType.NEQ,
)

additive_ops: tuple[TokenType, ...] = (TokenType.ADD, TokenType.SUB)

multiplicative_ops: tuple[TokenType, ...] = (TokenType.MULT, TokenType.DIV)


__all__ = [
    "TokenType",
    "additive_ops",
    "keywords",
    "literal_tokens",
    "logical_ops",
    "multiplicative_ops",
    "relational_ops",
    "token_hashmap",
]
