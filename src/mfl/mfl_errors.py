"""
Error type shared by the MFL lexer and parser.

There is a single failure kind: a parse error carrying a human-readable message
and the source line it refers to. Lexical problems (unknown characters, malformed
numbers) are reported through the same channel, so callers only ever need to
catch `ParseError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mfl.mfl_lexer import Token


class ParseError(SyntaxError):
    """Raised on the first lexical or grammatical error in a source unit.

    Attributes:
        message (str): Description of what was expected or found.
        line (int): 1-based source line of the offending token.
        token (Token | None): The token at the point of failure, when known.
    """

    def __init__(self, message: str, line: int, token: Token | None = None) -> None:
        super().__init__(f"Line {line}: {message}")
        self.message = message
        self.line = line
        self.token = token

    def __str__(self) -> str:
        return f"Line {self.line}: {self.message}"

    def __reduce__(self) -> tuple[type[ParseError], tuple[str, int, Token | None]]:
        # BaseException would replay only the formatted message.
        return type(self), (self.message, self.line, self.token)


__all__ = ["ParseError"]
