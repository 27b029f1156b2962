"""Tests for the translation entry point and its options."""

import ast
import logging

import pytest

from pygor import ir
from pygor.frontend import (
    Frontend,
    HardUnsupported,
    TranslateOptions,
    UnsupportedConstruct,
    translate,
)


def test_package_defaults_to_name(to_file):
    assert to_file("x = 1\n", "tool").package == "tool"


def test_main_guard_names_package_main(to_file):
    source = 'if __name__ == "__main__":\n    run()\n'
    file = to_file(source, "tool")
    assert file.package == "main"
    assert file.body == [
        ir.FuncDecl("main", body=[ir.ExprStmt(ir.Call(ir.Ident("run")))])
    ]


def test_guard_with_else_is_plain_if(to_file):
    source = 'if __name__ == "__main__":\n    run()\nelse:\n    pass\n'
    file = to_file(source, "tool")
    assert file.package == "tool"
    assert isinstance(file.body[0], ir.If)


def test_nested_guard_is_plain_if(to_file):
    source = 'def f():\n    if __name__ == "__main__":\n        run()\n'
    assert to_file(source, "tool").package == "tool"


def test_hard_failure_always_raises(to_file):
    with pytest.raises(HardUnsupported):
        to_file("y = x[::2]\n", panic_unknown=False)


def test_panic_raises_on_unknown_expression(to_file):
    with pytest.raises(UnsupportedConstruct) as info:
        to_file("s = {x for x in xs}\n", panic_unknown=True)
    assert info.value.lineno == 1
    assert info.value.col == 4
    assert str(info.value) == "unknown expression SetComp at line 1, col 4"


def test_panic_raises_on_unknown_statement(to_file):
    with pytest.raises(UnsupportedConstruct):
        to_file("del x\n", panic_unknown=True)


def test_ignore_replaces_failing_statement(to_go):
    source = "a = 1\ny = x[::2]\nb = 2\n"
    output = to_go(source, ignore_errors=True)
    assert "var a = 1 // int" in output
    assert "// ERROR: slice step not supported at line 2, col 4" in output
    assert "var b = 2 // int" in output


def test_ignore_drops_partial_output(to_file):
    source = "def f():\n    ok()\n    y = x[::2]\n"
    file = to_file(source, ignore_errors=True)
    assert file.body == [ir.Comment("ERROR: slice step not supported at line 3, col 8")]


def test_ignore_drops_buffered_methods(to_file):
    source = "class C:\n    def m(self):\n        return x[::2]\n"
    file = to_file(source, ignore_errors=True)
    assert len(file.body) == 1
    assert isinstance(file.body[0], ir.Comment)


def test_line_numbers(to_go):
    output = to_go("a = 1\n\nb = 2\n", line_numbers=True)
    assert "// line 1\n\nvar a = 1 // int" in output
    assert "// line 3" in output


def test_verbose_traces(caplog):
    caplog.set_level(logging.DEBUG, logger="pygor")
    tree = ast.parse("for x in xs:\n    f(x)\n")
    translate(tree, "demo", TranslateOptions(verbose=True))
    messages = [r.getMessage() for r in caplog.records]
    assert "stmt For at line 1" in messages
    assert "expr Call" in messages
    assert "PUSH 1" in messages


def test_frontend_is_reusable():
    frontend = Frontend()
    first = frontend.translate(ast.parse("x = 1\n"), "a")
    second = frontend.translate(ast.parse("x = 1\n"), "a")
    assert first == second


def test_methods_follow_type_declaration(to_file):
    source = "class C:\n    def m(self):\n        pass\nx = 1\n"
    body = to_file(source).body
    assert isinstance(body[0], ir.TypeDecl)
    assert isinstance(body[1], ir.FuncDecl)
    assert body[1].recv == ir.Param("self", ir.Pointer(ir.Ident("C")))
    assert isinstance(body[2], ir.VarDecl)


def test_function_results_from_exit_mode(to_file):
    body = to_file("def f():\n    if x:\n        return 1\n").body
    assert body[0].results == [ir.Param("", ir.ANY)]


def test_nested_function_exit_mode_is_separate(to_file):
    source = "def outer():\n    def inner():\n        return 1\n    inner()\n"
    outer = to_file(source).body[0]
    assert outer.results == []
    closure = outer.body[0]
    assert isinstance(closure, ir.Assign)
    assert closure.op == ":="
    assert closure.values[0].results == [ir.Param("", ir.ANY)]


def test_try_has_one_branch_per_handler(to_file):
    source = (
        "try:\n    f()\n"
        "except A:\n    a()\n"
        "except B:\n    b()\n"
        "except C:\n    c()\n"
    )
    guard = to_file(source).body[0]
    assert isinstance(guard, ir.If)
    assert guard.cond == ir.Binary("!=", ir.Ident("err"), ir.NilLit())
    switch = guard.body[1]
    assert isinstance(switch, ir.Switch)
    assert [case.exprs for case in switch.cases] == [
        [ir.Ident("A")],
        [ir.Ident("B")],
        [ir.Ident("C")],
    ]
