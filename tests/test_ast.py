import dataclasses
import io
import json

import hypothesis.strategies as st
import pytest
from hypothesis import given

from mfl.mfl_ast import (
    INDENT_STEP,
    BinOpNode,
    ProgNode,
    RelOpNode,
    SyntaxNode,
    SyntaxTree,
    TokenNode,
    UnaryOpNode,
    ValNode,
    render_subtree,
)
from mfl.mfl_constants import TokenType
from mfl.mfl_lexer import Token


def leaf(type_: TokenType, value: object, line: int = 1) -> TokenNode:
    return TokenNode(Token(type_, value, line), line=line)


X = leaf(TokenType.ID, "x")
ONE = leaf(TokenType.INT, 1)
TWO = leaf(TokenType.INT, 2)


def test_token_node_render() -> None:
    assert X.render() == "Token(ID, 'x')"
    assert ONE.render(4) == "    Token(INT, 1)"


def test_assignment_render() -> None:
    node = ProgNode(
        (BinOpNode(X, BinOpNode(ONE, TWO, TokenType.ADD), TokenType.ASSIGN),)
    )
    assert node.render() == "\n".join(
        [
            "Prog(",
            "  BinOp[ASSIGN](",
            "    Token(ID, 'x')",
            "    BinOp[ADD](",
            "      Token(INT, 1)",
            "      Token(INT, 2)",
            "    )",
            "  )",
            ")",
        ]
    )


def test_relop_and_unary_render() -> None:
    node = RelOpNode(UnaryOpNode(X, TokenType.NOT), ONE, TokenType.LT)
    assert render_subtree(node) == [
        "RelOp[LT](",
        "  UnaryOp[NOT](",
        "    Token(ID, 'x')",
        "  )",
        "  Token(INT, 1)",
        ")",
    ]


def test_val_node_render() -> None:
    node = ValNode(Token(TokenType.ID, "total"), BinOpNode(ONE, TWO, TokenType.MULT))
    assert render_subtree(node, 2) == [
        "  Val[total](",
        "    BinOp[MULT](",
        "      Token(INT, 1)",
        "      Token(INT, 2)",
        "    )",
        "  )",
    ]


def test_empty_prog_render() -> None:
    assert ProgNode().render() == "Prog(\n)"


def test_base_node_is_abstract() -> None:
    with pytest.raises(TypeError, match="abstract"):
        SyntaxNode()


@dataclasses.dataclass(frozen=True, eq=False)
class StrayNode(SyntaxNode):
    pass


def test_unknown_node_type_rejected() -> None:
    with pytest.raises(TypeError, match="Unknown syntax node type: StrayNode"):
        render_subtree(StrayNode())
    with pytest.raises(TypeError, match="Unknown syntax node type"):
        StrayNode().to_dict()
    with pytest.raises(TypeError, match="Unknown syntax node type"):
        ProgNode((StrayNode(),)).render()


def test_display_subtree_writes_to_file() -> None:
    buf = io.StringIO()
    BinOpNode(ONE, TWO, TokenType.SUB).display_subtree(0, buf)
    assert buf.getvalue() == "BinOp[SUB](\n  Token(INT, 1)\n  Token(INT, 2)\n)\n"


def test_display_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    SyntaxTree(ProgNode((ONE,))).display()
    assert capsys.readouterr().out == "Prog(\n  Token(INT, 1)\n)\n"


def test_nodes_are_immutable() -> None:
    node = BinOpNode(ONE, TWO, TokenType.ADD)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.op = TokenType.SUB  # type: ignore[misc]


def test_equality_ignores_line() -> None:
    assert BinOpNode(ONE, TWO, TokenType.ADD, line=1) == BinOpNode(
        ONE, TWO, TokenType.ADD, line=9
    )
    assert BinOpNode(ONE, TWO, TokenType.ADD) != RelOpNode(ONE, TWO, TokenType.ADD)
    assert BinOpNode(ONE, TWO, TokenType.ADD) != BinOpNode(TWO, ONE, TokenType.ADD)


def test_equal_nodes_hash_alike() -> None:
    a = BinOpNode(ONE, UnaryOpNode(X, TokenType.NOT), TokenType.AND, line=1)
    b = BinOpNode(ONE, UnaryOpNode(X, TokenType.NOT), TokenType.AND, line=5)
    assert hash(a) == hash(b)
    assert len({a, b, RelOpNode(ONE, X, TokenType.EQ)}) == 2
    v_node = ValNode(Token(TokenType.ID, "v"), ONE)
    assert v_node != ValNode(Token(TokenType.ID, "w"), ONE)
    assert ProgNode((ONE,)) != ProgNode((ONE, ONE))


def test_to_dict_structure() -> None:
    node = ProgNode(
        (
            BinOpNode(
                X,
                UnaryOpNode(leaf(TokenType.TRUE, True), TokenType.NOT),
                TokenType.ASSIGN,
                line=1,
            ),
            ValNode(Token(TokenType.ID, "y"), leaf(TokenType.REAL, 2.5, 2), line=2),
            RelOpNode(X, ONE, TokenType.GTE, line=3),
        ),
        line=1,
    )
    d = node.to_dict()
    assert d["kind"] == "prog"
    assert [s["kind"] for s in d["statements"]] == ["binop", "val", "relop"]
    assign = d["statements"][0]
    assert assign["op"] == "ASSIGN"
    assert assign["left"] == {"kind": "token", "line": 1, "token_type": "ID", "value": "x"}
    assert assign["right"]["kind"] == "unary"
    assert assign["right"]["operand"]["value"] is True
    val = d["statements"][1]
    assert val["name"] == "y"
    assert val["rhs"]["value"] == 2.5
    assert d["statements"][2]["line"] == 3
    json.dumps(d)


def test_syntax_tree_wraps_root() -> None:
    root = ProgNode((ONE,))
    tree = SyntaxTree(root)
    assert tree.root is root
    assert tree.render() == root.render()
    assert tree.to_dict() == root.to_dict()
    assert tree == SyntaxTree(ProgNode((ONE,)))
    assert tree != root
    assert repr(tree).startswith("SyntaxTree(ProgNode(")


@given(st.integers(min_value=1, max_value=12), st.integers(min_value=0, max_value=8))  # type: ignore[misc]
def test_nesting_indents_by_fixed_step(depth: int, indent: int) -> None:
    node: SyntaxNode = ONE
    for _ in range(depth):
        node = UnaryOpNode(node, TokenType.NOT)
    lines = render_subtree(node, indent)
    assert len(lines) == 2 * depth + 1
    leaf_line = lines[depth]
    assert leaf_line == " " * (indent + depth * INDENT_STEP) + "Token(INT, 1)"
    assert lines[0].startswith(" " * indent + "UnaryOp[NOT](")
    assert lines[-1] == " " * indent + ")"


@given(st.lists(st.integers(min_value=-1000, max_value=1000), max_size=10))  # type: ignore[misc]
def test_prog_renders_each_statement(values: list[int]) -> None:
    node = ProgNode(tuple(leaf(TokenType.INT, v) for v in values))
    lines = render_subtree(node)
    assert lines[1:-1] == [f"  Token(INT, {v})" for v in values]


def sum_chain(count: int) -> ProgNode:
    leaves = [leaf(TokenType.INT, i) for i in range(count)]
    node: SyntaxNode = leaves[0]
    for right in leaves[1:]:
        node = BinOpNode(node, right, TokenType.ADD)
    return ProgNode((node,))


def test_long_left_chain_renders() -> None:
    count = 5000
    lines = render_subtree(sum_chain(count))
    assert len(lines) == 2 * (count - 1) + count + 2
    assert lines[count] == " " * (count * INDENT_STEP) + "Token(INT, 0)"
    assert lines[count + 1] == " " * (count * INDENT_STEP) + "Token(INT, 1)"
    assert lines[-2] == "  )"


def test_long_left_chain_to_dict() -> None:
    count = 5000
    d = sum_chain(count).to_dict()
    node = d["statements"][0]
    depth = 0
    while node["kind"] == "binop":
        assert node["right"]["value"] == count - 1 - depth
        node = node["left"]
        depth += 1
    assert depth == count - 1
    assert node == {"kind": "token", "line": 1, "token_type": "INT", "value": 0}


def test_long_left_chain_equality() -> None:
    count = 5000
    assert sum_chain(count) == sum_chain(count)
    assert hash(sum_chain(count)) == hash(sum_chain(count))
    assert sum_chain(count) != sum_chain(count + 1)
