"""
Defines the abstract syntax tree (AST) node model for the MFL language.

Classes:
    SyntaxNode:
        Base of the closed set of node variants. Carries the source line at which the
        node was recognized; the line is diagnostic metadata and is ignored by equality.

    ProgNode, ValNode, BinOpNode, RelOpNode, UnaryOpNode, TokenNode:
        The node variants emitted by the parser. All are frozen dataclasses, so a tree
        is immutable once built.

    SyntaxTree:
        Wrapper owning the root node of a parsed program.

    ASTDict:
        TypedDict shape of a serialized node, suitable for JSON output or debugging.

Rendering:
    `render_subtree(node, indent)` is the single presentational operation over the
    tree. It produces an indented textual hierarchy naming each node kind, its
    operator or value, and its children, two spaces per nesting level:

        Prog(
          BinOp[ASSIGN](
            Token(ID, 'x')
            Token(INT, 1)
          )
        )

    The format is a debugging aid, not a stable wire format.

Assignment:
    `val x := e` is represented as `BinOpNode(TokenNode(x), e, ASSIGN)` rather than
    a dedicated node. `ValNode` stays in the model for consumers that want the
    declaration shape, but the parser does not emit it.
"""

import sys
from dataclasses import dataclass, field
from typing import Any, TextIO, TypedDict

from mfl.mfl_constants import TokenType
from mfl.mfl_lexer import Token

INDENT_STEP = 2


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of a SyntaxNode used for serialization.

    Fields:
        kind (str): Node variant ("prog", "val", "binop", "relop", "unary", "token").
        line (int): Line number in the source code where the node was recognized.
        op (str): Operator name for binop/relop/unary nodes.
        name (str): Bound identifier for val nodes.
        token_type (str): Token type name for token nodes.
        value (Any): Literal value for token nodes.
        statements (list[ASTDict]): Program statements, in source order.
        left, right, operand, rhs (ASTDict): Child nodes.
    """

    kind: str
    line: int
    op: str
    name: str
    token_type: str
    value: Any
    statements: list["ASTDict"]
    left: "ASTDict"
    right: "ASTDict"
    operand: "ASTDict"
    rhs: "ASTDict"


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    line: int = field(default=0, kw_only=True, compare=False)

    def __post_init__(self) -> None:
        if type(self) is SyntaxNode:
            raise TypeError("SyntaxNode is abstract; build one of its variants")

    def __eq__(self, other: Any) -> bool:
        # Iterative so that long left-folded chains compare without deep recursion.
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            a, b = pending.pop()
            if type(a) is not type(b):
                return False
            key_a, kids_a = _shape(a)
            key_b, kids_b = _shape(b)
            if key_a != key_b or len(kids_a) != len(kids_b):
                return False
            pending.extend(zip(kids_a, kids_b))
        return True

    def __hash__(self) -> int:
        keys = []
        pending: list[SyntaxNode] = [self]
        while pending:
            node = pending.pop()
            key, kids = _shape(node)
            keys.append((type(node).__name__, key, len(kids)))
            pending.extend(kids)
        return hash(tuple(keys))

    def render(self, indent: int = 0) -> str:
        """Returns the indented rendering of this subtree."""
        return "\n".join(render_subtree(self, indent))

    def display_subtree(self, indent: int = 0, file: TextIO | None = None) -> None:
        """Writes the rendering of this subtree to `file` (stdout by default)."""
        print(self.render(indent), file=file if file is not None else sys.stdout)

    def to_dict(self) -> ASTDict:
        return node_to_dict(self)


@dataclass(frozen=True, eq=False)
class ProgNode(SyntaxNode):
    """A whole program: its statements in order of appearance."""

    statements: tuple[SyntaxNode, ...] = ()


@dataclass(frozen=True, eq=False)
class ValNode(SyntaxNode):
    """Declaration-style binding of `name` to `rhs`."""

    name: Token
    rhs: SyntaxNode


@dataclass(frozen=True, eq=False)
class BinOpNode(SyntaxNode):
    """Binary arithmetic, logical, or assignment operation."""

    left: SyntaxNode
    right: SyntaxNode
    op: TokenType


@dataclass(frozen=True, eq=False)
class RelOpNode(SyntaxNode):
    """Relational comparison (`<`, `<=`, `>`, `>=`, `=`, `!=`)."""

    left: SyntaxNode
    right: SyntaxNode
    op: TokenType


@dataclass(frozen=True, eq=False)
class UnaryOpNode(SyntaxNode):
    operand: SyntaxNode
    op: TokenType


@dataclass(frozen=True, eq=False)
class TokenNode(SyntaxNode):
    """Leaf wrapping a literal or identifier token."""

    token: Token


def _unknown(node: SyntaxNode) -> TypeError:
    return TypeError(f"Unknown syntax node type: {type(node).__name__}")


def _shape(node: SyntaxNode) -> tuple[tuple[Any, ...], tuple[SyntaxNode, ...]]:
    """Splits `node` into its non-node fields and its children, line excluded."""
    match node:
        case ProgNode(statements=statements):
            return (), statements
        case ValNode(name=name, rhs=rhs):
            return (name,), (rhs,)
        case BinOpNode(left=left, right=right, op=op):
            return (op,), (left, right)
        case RelOpNode(left=left, right=right, op=op):
            return (op,), (left, right)
        case UnaryOpNode(operand=operand, op=op):
            return (op,), (operand,)
        case TokenNode(token=token):
            return (token,), ()
    raise _unknown(node)


def render_subtree(node: SyntaxNode, indent: int = 0) -> list[str]:
    """Renders `node` and its descendants as indented lines starting at `indent`.

    Walks the tree with an explicit stack; closing parentheses are queued as
    plain strings behind the children they close.
    """
    lines: list[str] = []
    pending: list[tuple[SyntaxNode, int] | str] = [(node, indent)]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            lines.append(item)
            continue
        current, depth = item
        pad = " " * depth
        kids: tuple[SyntaxNode, ...]
        match current:
            case ProgNode(statements=statements):
                head, kids = "Prog(", statements
            case ValNode(name=name, rhs=rhs):
                head, kids = f"Val[{name.value}](", (rhs,)
            case BinOpNode(left=left, right=right, op=op):
                head, kids = f"BinOp[{op}](", (left, right)
            case RelOpNode(left=left, right=right, op=op):
                head, kids = f"RelOp[{op}](", (left, right)
            case UnaryOpNode(operand=operand, op=op):
                head, kids = f"UnaryOp[{op}](", (operand,)
            case TokenNode(token=token):
                lines.append(f"{pad}{token!r}")
                continue
            case _:
                raise _unknown(current)
        lines.append(f"{pad}{head}")
        pending.append(f"{pad})")
        pending.extend((kid, depth + INDENT_STEP) for kid in reversed(kids))
    return lines


def node_to_dict(node: SyntaxNode) -> ASTDict:
    """Converts `node` (and all descendants) into nested dictionaries."""
    root: ASTDict = {}
    pending: list[tuple[SyntaxNode, ASTDict]] = [(node, root)]
    while pending:
        current, out = pending.pop()
        match current:
            case ProgNode(statements=statements):
                out["kind"] = "prog"
                out["line"] = current.line
                out["statements"] = [{} for _ in statements]
                pending.extend(zip(statements, out["statements"]))
            case ValNode(name=name, rhs=rhs):
                out["kind"] = "val"
                out["line"] = current.line
                out["name"] = name.value
                out["rhs"] = {}
                pending.append((rhs, out["rhs"]))
            case BinOpNode(left=left, right=right, op=op):
                out["kind"] = "binop"
                out["line"] = current.line
                out["op"] = op.name
                out["left"], out["right"] = {}, {}
                pending += [(left, out["left"]), (right, out["right"])]
            case RelOpNode(left=left, right=right, op=op):
                out["kind"] = "relop"
                out["line"] = current.line
                out["op"] = op.name
                out["left"], out["right"] = {}, {}
                pending += [(left, out["left"]), (right, out["right"])]
            case UnaryOpNode(operand=operand, op=op):
                out["kind"] = "unary"
                out["line"] = current.line
                out["op"] = op.name
                out["operand"] = {}
                pending.append((operand, out["operand"]))
            case TokenNode(token=token):
                out["kind"] = "token"
                out["line"] = current.line
                out["token_type"] = token.type.name
                out["value"] = token.value
            case _:
                raise _unknown(current)
    return root


class SyntaxTree:
    """Owns the root node of a parsed program."""

    def __init__(self, root: SyntaxNode) -> None:
        self.root = root

    def __repr__(self) -> str:
        return f"SyntaxTree({self.root!r})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, SyntaxTree) and self.root == other.root

    def display(self, file: TextIO | None = None) -> None:
        self.root.display_subtree(0, file)

    def render(self) -> str:
        return self.root.render()

    def to_dict(self) -> ASTDict:
        return self.root.to_dict()


__all__ = [
    "ASTDict",
    "BinOpNode",
    "INDENT_STEP",
    "ProgNode",
    "RelOpNode",
    "SyntaxNode",
    "SyntaxTree",
    "TokenNode",
    "UnaryOpNode",
    "ValNode",
    "node_to_dict",
    "render_subtree",
]
