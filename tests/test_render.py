"""Tests for the Go renderer."""

import pytest

from pygor import ir
from pygor.backend.go import GoRenderer, RenderError, collect_imports, render
from pygor.backend.util import comment_text, escape_string, format_float


def render_expr(expr: ir.Expr) -> str:
    return GoRenderer()._emit_expr(expr)


def test_header_and_imports():
    file = ir.File(
        "demo",
        [
            ir.ExprStmt(ir.Call(ir.Qual("fmt", "Println"), [ir.Qual(ir.RUNTIME, "List")])),
            ir.ExprStmt(ir.Call(ir.Qual("path/filepath", "Join"))),
        ],
    )
    assert render(file) == (
        "// generated by pygor\n"
        "package demo\n"
        "\n"
        "import (\n"
        '\t"fmt"\n'
        '\t"path/filepath"\n'
        "\n"
        '\t. "github.com/raff/pygor/runtime"\n'
        ")\n"
        "\n"
        "fmt.Println(List)\n"
        "\n"
        "filepath.Join()\n"
    )


def test_no_imports():
    assert render(ir.File("demo")) == "// generated by pygor\npackage demo\n"


def test_collect_imports_sees_nested_fragments():
    body = [ir.FuncDecl("f", body=[ir.Return([ir.Qual("math", "Pi")])])]
    assert collect_imports(ir.File("demo", body)) == ["math"]


@pytest.mark.parametrize(
    "expr,expected",
    [
        (ir.Binary("*", ir.Binary("+", ir.Ident("a"), ir.Ident("b")), ir.Ident("c")), "(a + b) * c"),
        (ir.Binary("+", ir.Ident("a"), ir.Binary("*", ir.Ident("b"), ir.Ident("c"))), "a + b * c"),
        (ir.Binary("-", ir.Ident("a"), ir.Binary("-", ir.Ident("b"), ir.Ident("c"))), "a - (b - c)"),
        (ir.Binary("-", ir.Binary("-", ir.Ident("a"), ir.Ident("b")), ir.Ident("c")), "a - b - c"),
        (ir.Binary("==", ir.Binary("<", ir.Ident("a"), ir.Ident("b")), ir.BoolLit(True)), "(a < b) == true"),
        (ir.Unary("!", ir.Binary("&&", ir.Ident("a"), ir.Ident("b"))), "!(a && b)"),
        (ir.Selector(ir.Binary("+", ir.Ident("a"), ir.Ident("b")), "x"), "(a + b).x"),
    ],
)
def test_precedence(expr: ir.Expr, expected: str):
    assert render_expr(expr) == expected


def test_comments():
    assert render_expr(ir.Commented(ir.IntLit(2), "floor", before=True)) == "/*floor*/ 2"
    assert render_expr(ir.Commented(ir.Ident("x"), "a */ b")) == "x /*a * / b*/"


def test_stmt_expr_outside_statement_is_rejected():
    bad = ir.Call(ir.Ident("f"), [ir.StmtExpr(ir.Assign([ir.Ident("x")], [ir.IntLit(1)]))])
    with pytest.raises(RenderError) as info:
        GoRenderer().render_stmt(ir.ExprStmt(bad))
    assert info.value.msg == "Assign used as an expression"


def test_invalid_identifier_is_rejected():
    with pytest.raises(RenderError):
        GoRenderer().render_stmt(ir.ExprStmt(ir.Ident("a-b")))


def test_func_lit_indentation():
    lit = ir.FuncLit([], [ir.Param("", ir.ANY)], [ir.Return([ir.IntLit(1)])])
    stmt = ir.FuncDecl("f", body=[ir.Assign([ir.Ident("g")], [lit], ":=")])
    assert GoRenderer().render_stmt(stmt) == (
        "func f() {\n"
        "\tg := func() Any {\n"
        "\t\treturn 1\n"
        "\t}\n"
        "}"
    )


def test_signature_forms():
    stmt = ir.FuncDecl(
        "m",
        params=[
            ir.Param("a", ir.Ident("int"), default=ir.IntLit(1)),
            ir.Param("rest", ir.ANY, rest=True),
        ],
        results=[ir.Param("", ir.Ident("string"))],
        recv=ir.Param("self", ir.Pointer(ir.Ident("C"))),
    )
    assert GoRenderer().render_stmt(stmt) == (
        "func (self *C) m(a int /*=1*/, rest /*...*/ Any) string {\n}"
    )


def test_struct_with_fields():
    stmt = ir.TypeDecl(
        "C",
        [ir.FieldDecl(["n"], ir.Ident("int"), ir.IntLit(0))],
        ["doc line"],
    )
    assert GoRenderer().render_stmt(stmt) == (
        "type C struct {\n\t// doc line\n\tn int // = 0\n}"
    )


def test_for_range_forms():
    xs = ir.Ident("xs")
    renderer = GoRenderer()
    assert renderer.render_stmt(ir.ForRange(None, None, xs)) == "for range xs {\n}"
    assert renderer.render_stmt(ir.ForRange(ir.Ident("i"), None, xs)) == "for i := range xs {\n}"


def test_util_helpers():
    assert escape_string('a"\\\x01') == 'a\\"\\\\\\x01'
    assert format_float(1.0) == "1.0"
    assert format_float(1e20) == "1e+20"
    assert comment_text("a\nb") == "a b"
