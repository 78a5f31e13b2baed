"""
Lexical analyzer for the MFL language.

This module provides the token source consumed by the MFL parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, literal value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens on demand.
    TokenStream: Serves an already-built list of tokens through the same interface.

Both `Lexer` and `TokenStream` expose the three operations the parser relies on:
`next_token()` (advance and fetch), `current_token()` and `current_line()`. Once
input is exhausted they keep returning an `EOF` sentinel token.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Longest-match recognition of operators (`:=`, `<=`, `>=`, `!=`)
    - Recognizes:
        * Keywords (`val`, `not`, `and`, `or`, `true`, `false`)
        * Identifiers
        * Integer and real literals
        * Operators and punctuation

Raises:
    ParseError: On characters outside the language or malformed real literals.

Example:
    >>> lexer = Lexer(CharacterStream("val x := 42;"))
    >>> lexer.next_token()
    Token(VAL, 'val')
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from mfl.mfl_constants import TokenType, keywords, token_hashmap
from mfl.mfl_errors import ParseError

logger = logging.getLogger(__name__)


def _is_digit(ch: str) -> bool:
    # ASCII only: str.isdigit() also accepts superscripts and other numerals.
    return ch != "" and "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or "a" <= ch <= "z" or "A" <= ch <= "Z"


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token in the MFL language.

    Attributes:
        type (TokenType): The token's type.
        value (Any): The literal value: `int` for INT, `float` for REAL, `bool` for
            TRUE/FALSE, the name for ID, the lexeme for keywords and symbols, and
            `None` for EOF.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    type: TokenType
    value: Any = None
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type})"
        return f"Token({self.type}, {self.value!r})"


class Lexer:
    """Lexical analyzer for the MFL language.

    Tokens are produced lazily, one per `next_token()` call, and the most recent
    one stays available through `current_token()`.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self._current: Token | None = None

    def current_token(self) -> Token:
        """Returns the most recently fetched token without advancing."""
        if self._current is None:
            raise RuntimeError("No token has been read yet; call next_token() first")
        return self._current

    def current_line(self) -> int:
        """Returns the line of the current token, or of the stream when none was read."""
        if self._current is None:
            return self.stream.line
        return self._current.line

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def error(self, message: str, line: int) -> ParseError:
        logger.error("Lexical error on line %d: %s", line, message)
        return ParseError(message, line)

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest symbol is two characters
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            ParseError: If a malformed real literal or an unknown character is encountered.
        """
        self._current = self._scan()
        return self._current

    def _scan(self) -> Token:
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(TokenType.EOF, None, self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if _is_ident_start(ch):
            ident = ""
            while _is_ident_char(self.peek()):
                ident += self.advance()
            if ident in keywords:
                kind = token_hashmap[ident]
                if kind is TokenType.TRUE:
                    return Token(kind, True, line, col)
                if kind is TokenType.FALSE:
                    return Token(kind, False, line, col)
                return Token(kind, ident, line, col)
            return Token(TokenType.ID, ident, line, col)

        # 2. Integer or real
        if _is_digit(ch):
            num = ""
            while _is_digit(self.peek()):
                num += self.advance()
            if self.peek() != ".":
                return Token(TokenType.INT, int(num), line, col)
            num += self.advance()
            if not _is_digit(self.peek()):
                raise self.error(f"Malformed real literal '{num}'", line)
            while _is_digit(self.peek()):
                num += self.advance()
            if self.peek() == ".":
                raise self.error(f"Invalid real format '{num}.'", line)
            return Token(TokenType.REAL, float(num), line, col)

        # 3. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character
        raise self.error(f"Unexpected character {ch!r}", line)


class TokenStream:
    """Token source over a pre-built sequence of tokens.

    An `EOF` sentinel is appended when the sequence does not already end with one,
    and it is returned for every fetch past the end.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type is not TokenType.EOF:
            last_line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenType.EOF, None, last_line))
        self.position: int = -1

    def next_token(self) -> Token:
        if self.position < len(self.tokens) - 1:
            self.position += 1
        return self.tokens[self.position]

    def current_token(self) -> Token:
        if self.position < 0:
            raise RuntimeError("No token has been read yet; call next_token() first")
        return self.tokens[self.position]

    def current_line(self) -> int:
        return self.tokens[max(self.position, 0)].line


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely and returns its tokens, including the final EOF."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type is TokenType.EOF:
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "TokenStream", "tokenize"]
