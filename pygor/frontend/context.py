"""Context objects for frontend translation."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .. import ir
from .names import RenameTable

if TYPE_CHECKING:
    from .scope import Scope


# ============================================================
# ERRORS
# ============================================================


class TranslateError(Exception):
    """Translation failure with source position."""

    def __init__(self, msg: str, lineno: int = 0, col: int = 0):
        self.msg: str = msg
        self.lineno: int = lineno
        self.col: int = col
        super().__init__(msg + " at line " + str(lineno) + ", col " + str(col))


class UnsupportedConstruct(TranslateError):
    """AST shape with no translation rule. Raised only in panic mode."""


class HardUnsupported(TranslateError):
    """Construct with no safe syntactic fallback. Always raised."""


def position(node: ast.AST | None) -> tuple[int, int]:
    """Source (line, col) of a node, (0, 0) when unknown."""
    if node is None:
        return (0, 0)
    return (getattr(node, "lineno", 0), getattr(node, "col_offset", 0))


def hard_failure(msg: str, node: ast.AST | None) -> HardUnsupported:
    lineno, col = position(node)
    return HardUnsupported(msg, lineno, col)


# ============================================================
# OPTIONS
# ============================================================


@dataclass(frozen=True)
class TranslateOptions:
    """Per-run switches, set from the command line."""

    panic_unknown: bool = False  # raise UnsupportedConstruct instead of commenting
    verbose: bool = False  # trace scopes, statements and expressions
    line_numbers: bool = False  # emit "// line N" before each statement
    ignore_errors: bool = False  # permissive mode for hard failures


# ============================================================
# DISPATCH
# ============================================================


@dataclass
class TranslationDispatch:
    """Callbacks for recursive translation.

    The translator modules call each other through these instead of importing
    one another, so expressions can reach calls and comprehensions, and
    statements can reach declarations, without import cycles.
    """

    options: TranslateOptions
    renames: RenameTable
    # Recursive translation
    expr: Callable[[ast.expr, "Scope"], "ir.Expr"]
    stmts: Callable[[list[ast.stmt], "Scope"], list["ir.Stmt"]]
    call: Callable[[ast.Call, "Scope"], "ir.Expr"]
    comprehension: Callable[[ast.expr, "Scope"], "ir.Expr"]
    loop: Callable[[ast.expr, ast.expr, "Scope"], "tuple[ir.Stmt, list[ir.Stmt]]"]
    function: Callable[[ast.FunctionDef, "Scope", str], list["ir.Stmt"]]
    klass: Callable[[ast.ClassDef, "Scope"], None]
    type_expr: Callable[[ast.expr | None, "Scope"], "ir.Expr | None"]
    # Degradation of unknown shapes (comment or raise, by options)
    unknown_expr: Callable[[str, ast.AST], "ir.Expr"]
    unknown_stmt: Callable[[str, ast.AST], "ir.Stmt"]

    def ident(self, name: str) -> "ir.Ident":
        """Identifier fragment for a Python name, renamed."""
        return ir.Ident(self.renames.rename(name))
