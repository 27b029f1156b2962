"""Fragment-level tests for expression, call and comprehension translation."""

import ast

import pytest

from pygor import ir
from pygor.frontend import HardUnsupported, Scope
from pygor.frontend.expressions import guess_type, well_known

MATH_POW = ir.Qual("math", "Pow")
CONTAINS = ir.Qual(ir.RUNTIME, "Contains")


def test_literals(expr):
    assert expr("True") == ir.BoolLit(True)
    assert expr("1") == ir.IntLit(1)
    assert expr("1.5") == ir.FloatLit(1.5)
    assert expr("3j") == ir.ComplexLit(3j)
    assert expr("'s'") == ir.StringLit("s")
    assert expr("None") == ir.NilLit()


def test_chained_compare_structure(expr):
    x, y, z = ir.Ident("x"), ir.Ident("y"), ir.Ident("z")
    assert expr("x < y < z") == ir.Binary(
        "&&", ir.Paren(ir.Binary("<", x, y)), ir.Paren(ir.Binary("<", y, z))
    )


def test_three_way_chain(expr):
    result = expr("a == b != e <= f")
    assert isinstance(result, ir.Binary)
    assert result.op == "&&"
    assert isinstance(result.left, ir.Binary)
    assert result.left.op == "&&"
    assert result.right == ir.Paren(ir.Binary("<=", ir.Ident("e"), ir.Ident("f")))


def test_membership(expr):
    assert expr("x in xs") == ir.Call(CONTAINS, [ir.Ident("xs"), ir.Ident("x")])


def test_power(expr):
    assert expr("a ** b") == ir.Call(MATH_POW, [ir.Ident("a"), ir.Ident("b")])


def test_translation_is_pure(expr):
    scope = Scope()
    scope.declare("xs")
    source = "[f(x) for x in xs if x > 0]"
    assert expr(source, scope) == expr(source, scope)


def test_renamed_identifier(expr):
    assert expr("map") == ir.Ident("mapΠ")


def test_declared_name_is_not_remapped(expr):
    scope = Scope()
    scope.imports["argv"] = "sys.argv"
    assert expr("argv", scope) == ir.Qual("os", "Args")
    scope.declare("argv")
    assert expr("argv", scope) == ir.Ident("argv")


def test_well_known_longest_prefix():
    assert well_known(["os", "path", "join"]) == ir.Qual("path/filepath", "Join")
    assert well_known(["sys", "stdout", "write"]) == ir.Selector(
        ir.Qual("os", "Stdout"), "write"
    )
    assert well_known(["os", "path"]) is None


def test_slice_step_is_hard_failure(expr):
    with pytest.raises(HardUnsupported) as info:
        expr("x[::2]")
    assert info.value.msg == "slice step not supported"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(1, 2)", ir.TUPLE),
        ("[1]", ir.LIST),
        ("[x for x in y]", ir.LIST),
        ("{}", ir.DICT),
        ("'s'", ir.Ident("string")),
        ("f'{x}'", ir.Ident("string")),
        ("True", ir.Ident("bool")),
        ("1", ir.Ident("int")),
        ("1.0", ir.Ident("float64")),
        ("1j", ir.Ident("complex128")),
        ("f(x)", ir.ANY),
    ],
)
def test_guess_type(source: str, expected: ir.Expr):
    assert guess_type(ast.parse(source, mode="eval").body) == expected


def test_unknown_expression_comments_nil(expr):
    result = expr("{x for x in y}")
    assert isinstance(result, ir.Commented)
    assert result.expr == ir.NilLit()
    assert result.text.startswith("UNKNOWN-EXPR: SetComp")


def test_generator_and_list_share_loops(expr):
    scope = Scope()
    listcomp = expr("[x for x in xs if x]", scope)
    genexp = expr("(x for x in xs if x)", scope)
    list_loop = listcomp.func.body[1]
    gen_loop = genexp.func.body[1].call.func.body[0]
    assert isinstance(list_loop, ir.ForRange)
    assert isinstance(gen_loop, ir.ForRange)
    assert list_loop.iterable == gen_loop.iterable
    assert list_loop.body[0].cond == gen_loop.body[0].cond
    assert gen_loop.body[0].body == [ir.Send(ir.Ident("c"), ir.Ident("x"))]


def test_append_is_statement_form(expr):
    result = expr("xs.append(1)")
    assert isinstance(result, ir.StmtExpr)
    assert result.stmt == ir.Assign(
        [ir.Ident("xs")], [ir.Call(ir.Ident("append"), [ir.Ident("xs"), ir.IntLit(1)])]
    )


def test_isinstance_with_unsupported_type_is_generic(expr):
    result = expr("isinstance(x, (int, str))")
    assert isinstance(result, ir.Call)
    assert result.func == ir.Ident("isinstance")


def test_lazy_and_eager_forms_keep_user_names_apart(expr):
    genexp = expr("(c for c in cs)")
    listcomp = expr("[lc for lc in cs]")
    gen_loop = genexp.func.body[1].call.func.body[0]
    list_loop = listcomp.func.body[1]
    assert gen_loop.value == ir.Ident("cΠ")
    assert gen_loop.body == [ir.Send(ir.Ident("c"), ir.Ident("cΠ"))]
    assert list_loop.value == ir.Ident("lcΠ")
    assert list_loop.body == [
        ir.Assign(
            [ir.Ident("lc")],
            [ir.Call(ir.Ident("append"), [ir.Ident("lc"), ir.Ident("lcΠ")])],
        )
    ]
