"""Tests for the lexical scope stack."""

import logging

import pytest

from pygor import ir
from pygor.frontend.scope import Scope


def test_root_scope():
    root = Scope()
    assert root.is_root()
    assert root.level == 0
    assert root.exit_mode == "not-a-function"


def test_declare_or_assign_reports_new_names():
    root = Scope()
    assert root.declare_or_assign(["a", "b"]) == [True, True]
    assert root.declare_or_assign(["a", "c"]) == [False, True]


def test_ancestor_names_are_visible():
    root = Scope()
    root.declare("x")
    child = root.push().push()
    assert child.level == 2
    assert child.is_declared("x")
    assert child.declare_or_assign(["x"]) == [False]


def test_child_names_do_not_leak():
    root = Scope()
    child = root.push()
    child.declare("y")
    child.pop()
    assert not root.is_declared("y")
    assert root.declare_or_assign(["y"]) == [True]


def test_imports_are_shared():
    root = Scope()
    child = root.push()
    child.imports["np"] = "numpy"
    assert root.imports == {"np": "numpy"}


def test_pop_root_fails():
    with pytest.raises(ValueError):
        Scope().pop()


def test_pop_detaches_child():
    root = Scope()
    child = root.push()
    assert child.pop() is root
    assert child.parent is None


def test_exit_mode_is_monotone():
    scope = Scope()
    scope.enter_function()
    assert scope.exit_mode == "none"
    scope.mark_exit("yield")
    scope.mark_exit("return")
    assert scope.exit_mode == "yield"


def test_exit_mode_promotes_on_pop():
    func = Scope().push()
    func.enter_function()
    block = func.push()
    block.mark_exit("return")
    block.pop()
    assert func.exit_mode == "return"


def test_exit_mode_not_promoted_from_function_body():
    outer = Scope().push()
    outer.enter_function()
    inner = outer.push()
    inner.enter_function()
    inner.mark_exit("yield")
    inner.pop(promote_exit=False)
    assert outer.exit_mode == "none"


def test_take_resets_pending():
    scope = Scope()
    scope.add(ir.Comment("a"))
    assert scope.take() == [ir.Comment("a")]
    scope.add(ir.Comment("b"))
    assert scope.take() == [ir.Comment("b")]
    assert scope.body == [ir.Comment("a"), ir.Comment("b")]


def test_methods_flush_after_root_body():
    root = Scope()
    klass = root.push()
    method = ir.FuncDecl("m")
    klass.methods.append(method)
    root.add(ir.TypeDecl("C"))
    klass.pop()
    assert root.body == [ir.TypeDecl("C"), method]
    assert root.methods == []


def test_methods_bubble_through_nested_scopes():
    root = Scope()
    func = root.push()
    klass = func.push()
    klass.methods.append(ir.FuncDecl("m"))
    klass.pop()
    assert func.methods == [ir.FuncDecl("m")]
    assert root.body == []
    func.pop()
    assert root.body == [ir.FuncDecl("m")]


def test_verbose_traces_push_and_pop(caplog):
    caplog.set_level(logging.DEBUG, logger="pygor.frontend.scope")
    root = Scope(verbose=True)
    root.push().pop()
    messages = [r.getMessage() for r in caplog.records]
    assert "PUSH 1" in messages
    assert "POP 0" in messages


def test_quiet_scope_does_not_trace(caplog):
    caplog.set_level(logging.DEBUG, logger="pygor.frontend.scope")
    Scope().push().pop()
    assert caplog.records == []
