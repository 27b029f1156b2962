"""Helpers over the standard library ast node family."""

from __future__ import annotations

import ast


def node_type(node: ast.AST | None) -> str:
    """Get node type string."""
    if node is None:
        return ""
    return type(node).__name__


def op_type(op: ast.AST) -> str:
    """Get operator type string, e.g. "Add" for ast.Add()."""
    return type(op).__name__


def get_attr_path(node: ast.expr) -> tuple[str, ...] | None:
    """Dotted path of a Name/Attribute chain: a.b.c -> ("a", "b", "c").

    None when the chain does not start at a plain name.
    """
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    parts.reverse()
    return tuple(parts)


def is_string_constant(node: ast.AST | None) -> bool:
    return isinstance(node, ast.Constant) and isinstance(node.value, str)


def is_plain_call(node: ast.Call) -> bool:
    """No keywords and no star-arguments."""
    return not node.keywords and not any(isinstance(a, ast.Starred) for a in node.args)


def is_true_constant(node: ast.AST) -> bool:
    """True for the literal True and for integer literal 1, as in `while 1:`."""
    if not isinstance(node, ast.Constant):
        return False
    return node.value is True or (type(node.value) is int and node.value == 1)


def is_negative_literal(node: ast.AST | None) -> bool:
    """True for -N where N is a numeric literal."""
    return (
        isinstance(node, ast.UnaryOp)
        and isinstance(node.op, ast.USub)
        and isinstance(node.operand, ast.Constant)
        and isinstance(node.operand.value, (int, float))
    )


def is_main_guard(node: ast.stmt) -> bool:
    """Detect `if __name__ == "__main__":` with no else branch."""
    if not isinstance(node, ast.If) or node.orelse:
        return False
    test = node.test
    if not isinstance(test, ast.Compare) or len(test.ops) != 1:
        return False
    if not isinstance(test.ops[0], ast.Eq):
        return False
    left, right = test.left, test.comparators[0]
    return (
        isinstance(left, ast.Name)
        and left.id == "__name__"
        and isinstance(right, ast.Constant)
        and right.value == "__main__"
    )


def split_docstring(body: list[ast.stmt]) -> tuple[list[str], list[ast.stmt]]:
    """Separate a leading docstring from a body.

    Returns (comment lines, remaining statements). Blank lines are dropped.
    """
    if body and isinstance(body[0], ast.Expr) and is_string_constant(body[0].value):
        text = body[0].value.value
        lines = [line.strip() for line in text.split("\n") if line.strip()]
        return (lines, body[1:])
    return ([], body)


def source_text(node: ast.AST) -> str:
    """Python source for a node, kept verbatim in annotation comments."""
    return ast.unparse(node).replace("*/", "* /")
