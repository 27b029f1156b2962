"""Pytest configuration for the pygor test suite."""

import ast
import sys
from pathlib import Path
from typing import Callable

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from pygor import ir
from pygor.backend.go import render
from pygor.frontend import Frontend, Scope, TranslateOptions, compile


@pytest.fixture
def to_go() -> Callable[..., str]:
    """Translate Python source to rendered Go text."""

    def run(source: str, name: str = "demo", **options: bool) -> str:
        return render(compile(source, name, TranslateOptions(**options)))

    return run


@pytest.fixture
def to_file() -> Callable[..., ir.File]:
    """Translate Python source to a File of fragments."""

    def run(source: str, name: str = "demo", **options: bool) -> ir.File:
        return compile(source, name, TranslateOptions(**options))

    return run


@pytest.fixture
def frontend() -> Frontend:
    return Frontend()


@pytest.fixture
def expr(frontend: Frontend) -> Callable[..., ir.Expr]:
    """Translate one expression in a fresh root scope (or the given one)."""

    def run(source: str, scope: Scope | None = None) -> ir.Expr:
        node = ast.parse(source, mode="eval").body
        return frontend.dispatch.expr(node, scope if scope is not None else Scope())

    return run


@pytest.fixture
def stmts(frontend: Frontend) -> Callable[..., list[ir.Stmt]]:
    """Translate statements in a fresh root scope (or the given one)."""

    def run(source: str, scope: Scope | None = None) -> list[ir.Stmt]:
        nodes = ast.parse(source).body
        return frontend.dispatch.stmts(nodes, scope if scope is not None else Scope())

    return run
