"""Expression translation: Python expression nodes to Go expression fragments."""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING, Callable

from .. import ir
from .ast_compat import (
    get_attr_path,
    is_negative_literal,
    is_string_constant,
    node_type,
    op_type,
)
from .context import TranslationDispatch, hard_failure
from .names import GO_KEYWORDS, SUFFIX

if TYPE_CHECKING:
    from .scope import Scope

logger = logging.getLogger(__name__)


# ============================================================
# OPERATOR TABLES
# ============================================================


BINARY_OPS: dict[str, str] = {
    "Add": "+",
    "Sub": "-",
    "Mult": "*",
    "Div": "/",
    "FloorDiv": "/",
    "Mod": "%",
    "LShift": "<<",
    "RShift": ">>",
    "BitOr": "|",
    "BitXor": "^",
    "BitAnd": "&",
}

COMPARE_OPS: dict[str, str] = {
    "Eq": "==",
    "NotEq": "!=",
    "Lt": "<",
    "LtE": "<=",
    "Gt": ">",
    "GtE": ">=",
    # No identity concept: is / is not compare by value
    "Is": "==",
    "IsNot": "!=",
}

BOOL_OPS: dict[str, str] = {"And": "&&", "Or": "||"}

UNARY_OPS: dict[str, str] = {"Not": "!", "USub": "-", "UAdd": "+"}

FMT_SPRINTF = ir.Qual("fmt", "Sprintf")
MATH_POW = ir.Qual("math", "Pow")
CONTAINS = ir.Qual(ir.RUNTIME, "Contains")


# ============================================================
# WELL-KNOWN REMAPS
# ============================================================


# Dotted Python path -> Go reference. Longest matching prefix wins; any
# remaining path elements become selectors on the remapped value.
WELL_KNOWN: dict[str, ir.Expr] = {
    "sys.argv": ir.Qual("os", "Args"),
    "sys.stdin": ir.Qual("os", "Stdin"),
    "sys.stdout": ir.Qual("os", "Stdout"),
    "sys.stderr": ir.Qual("os", "Stderr"),
    "re.compile": ir.Qual("regexp", "MustCompile"),
    "re.match": ir.Qual("regexp", "MatchString"),
    "os.getenv": ir.Qual("os", "Getenv"),
    "os.path.join": ir.Qual("path/filepath", "Join"),
    "os.path.basename": ir.Qual("path/filepath", "Base"),
    "os.path.dirname": ir.Qual("path/filepath", "Dir"),
    "math.pi": ir.Qual("math", "Pi"),
    "math.e": ir.Qual("math", "E"),
    "math.sqrt": ir.Qual("math", "Sqrt"),
    "math.floor": ir.Qual("math", "Floor"),
    "math.ceil": ir.Qual("math", "Ceil"),
}


def well_known(path: list[str]) -> ir.Expr | None:
    """Remap a resolved dotted path through WELL_KNOWN, or None."""
    i = len(path)
    while i > 1:
        target = WELL_KNOWN.get(".".join(path[:i]))
        if target is not None:
            result: ir.Expr = target
            for name in path[i:]:
                result = ir.Selector(result, name)
            return result
        i -= 1
    return None


def field_name(attr: str) -> str:
    """Go spelling of a selected field or method name."""
    if attr in GO_KEYWORDS:
        return attr + SUFFIX
    return attr


def resolve_path(path: tuple[str, ...], scope: "Scope") -> tuple[list[str], bool]:
    """Expand the first element of a dotted path through the import-alias map.

    Returns (resolved path, whether the base is an imported module).
    Callers skip resolution for locally declared bases.
    """
    base = path[0]
    if base in scope.imports:
        return (scope.imports[base].split(".") + list(path[1:]), True)
    return (list(path), False)


# ============================================================
# EXPRESSION HANDLERS
# ============================================================


def translate_expr_Constant(
    node: ast.Constant, scope: "Scope", d: TranslationDispatch
) -> ir.Expr:
    value = node.value
    # bool before int: True is an int in Python
    if isinstance(value, bool):
        return ir.BoolLit(value)
    if value is None:
        return ir.NilLit()
    if isinstance(value, int):
        return ir.IntLit(value)
    if isinstance(value, float):
        if value == float("inf"):
            # 1e999 and friends
            return ir.Call(ir.Qual("math", "Inf"), [ir.IntLit(1)])
        return ir.FloatLit(value)
    if isinstance(value, complex):
        return ir.ComplexLit(value)
    if isinstance(value, str):
        return ir.StringLit(value)
    if isinstance(value, bytes):
        return ir.Call(ir.SliceType(ir.Ident("byte")), [ir.StringLit(value.decode("latin-1"))])
    return d.unknown_expr("Constant", node)


def translate_expr_Name(node: ast.Name, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    if not scope.is_declared(node.id) and node.id in scope.imports:
        remap = well_known(scope.imports[node.id].split("."))
        if remap is not None:
            return remap
    return d.ident(node.id)


def translate_expr_Attribute(
    node: ast.Attribute, scope: "Scope", d: TranslationDispatch
) -> ir.Expr:
    """Resolve a dotted reference.

    | Python       | Go              | via                  |
    |--------------|-----------------|----------------------|
    | sys.argv     | os.Args         | well-known remap     |
    | np.array     | numpy.array     | import-alias map     |
    | self.x.y     | self.x.y        | plain selector chain |
    """
    path = get_attr_path(node)
    if path is not None and not scope.is_declared(path[0]):
        resolved, imported = resolve_path(path, scope)
        remap = well_known(resolved)
        if remap is not None:
            return remap
        if imported:
            return ir.Qual("/".join(resolved[:-1]), resolved[-1])
    return ir.Selector(d.expr(node.value, scope), field_name(node.attr))


def _slice_bound(
    bound: ast.expr | None, obj: ir.Expr, scope: "Scope", d: TranslationDispatch
) -> ir.Expr | None:
    if bound is None:
        return None
    if is_negative_literal(bound):
        # x[:-k] -> x[:len(x)-k]
        return ir.Binary("-", ir.Call(ir.Ident("len"), [obj]), d.expr(bound.operand, scope))
    return d.expr(bound, scope)


def translate_expr_Subscript(
    node: ast.Subscript, scope: "Scope", d: TranslationDispatch
) -> ir.Expr:
    index = node.slice
    if isinstance(index, ast.Tuple) and any(isinstance(e, ast.Slice) for e in index.elts):
        raise hard_failure("extended slice not supported", node)
    obj = d.expr(node.value, scope)
    if isinstance(index, ast.Slice):
        if index.step is not None:
            raise hard_failure("slice step not supported", node)
        low = _slice_bound(index.lower, obj, scope, d)
        high = _slice_bound(index.upper, obj, scope, d)
        return ir.SliceExpr(obj, low, high)
    return ir.Index(obj, d.expr(index, scope))


def _format_args(node: ast.expr, scope: "Scope", d: TranslationDispatch) -> list[ir.Expr]:
    if isinstance(node, ast.Tuple):
        return [d.expr(e, scope) for e in node.elts]
    return [d.expr(node, scope)]


def translate_expr_BinOp(node: ast.BinOp, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    kind = op_type(node.op)
    if kind == "Mod" and is_string_constant(node.left):
        # "fmt" % args -> fmt.Sprintf("fmt", args...)
        args = [d.expr(node.left, scope)] + _format_args(node.right, scope, d)
        return ir.Call(FMT_SPRINTF, args)
    left = d.expr(node.left, scope)
    right = d.expr(node.right, scope)
    if kind == "Pow":
        return ir.Call(MATH_POW, [left, right])
    if kind == "FloorDiv":
        return ir.Binary("/", left, ir.Commented(right, "floor", before=True))
    op = BINARY_OPS.get(kind)
    if op is None:
        return d.unknown_expr(kind, node)
    return ir.Binary(op, left, right)


def translate_expr_BoolOp(node: ast.BoolOp, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    op = BOOL_OPS[op_type(node.op)]
    result = d.expr(node.values[0], scope)
    for value in node.values[1:]:
        result = ir.Binary(op, result, d.expr(value, scope))
    return result


def translate_expr_UnaryOp(node: ast.UnaryOp, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    kind = op_type(node.op)
    operand = d.expr(node.operand, scope)
    if kind == "Invert":
        # ~x == -(x + 1) in two's complement
        return ir.Unary("-", ir.Binary("+", operand, ir.IntLit(1)))
    return ir.Unary(UNARY_OPS[kind], operand)


def _compare_pair(
    left: ir.Expr, op: ast.cmpop, right: ir.Expr, node: ast.Compare, d: TranslationDispatch
) -> ir.Expr:
    kind = op_type(op)
    if kind == "In":
        return ir.Call(CONTAINS, [right, left])
    if kind == "NotIn":
        return ir.Unary("!", ir.Call(CONTAINS, [right, left]))
    go_op = COMPARE_OPS.get(kind)
    if go_op is None:
        return d.unknown_expr(kind, node)
    return ir.Binary(go_op, left, right)


def translate_expr_Compare(node: ast.Compare, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    """a < b < c -> (a < b) && (b < c)"""
    operands = [d.expr(node.left, scope)] + [d.expr(c, scope) for c in node.comparators]
    if len(node.ops) == 1:
        return _compare_pair(operands[0], node.ops[0], operands[1], node, d)
    result: ir.Expr | None = None
    for i, op in enumerate(node.ops):
        pair = ir.Paren(_compare_pair(operands[i], op, operands[i + 1], node, d))
        result = pair if result is None else ir.Binary("&&", result, pair)
    return result


def translate_expr_Call(node: ast.Call, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    return d.call(node, scope)


def lambda_params(args: ast.arguments) -> list[ir.Param]:
    params = [ir.Param(a.arg, ir.ANY) for a in args.posonlyargs + args.args]
    if args.vararg is not None:
        params.append(ir.Param(args.vararg.arg, ir.ANY, rest=True))
    params.extend(ir.Param(a.arg, ir.ANY) for a in args.kwonlyargs)
    if args.kwarg is not None:
        params.append(ir.Param(args.kwarg.arg, ir.ANY, rest=True))
    return params


def translate_expr_Lambda(node: ast.Lambda, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    inner = scope.push()
    for name in [a.arg for a in node.args.posonlyargs + node.args.args + node.args.kwonlyargs]:
        inner.declare(name)
    if node.args.vararg is not None:
        inner.declare(node.args.vararg.arg)
    if node.args.kwarg is not None:
        inner.declare(node.args.kwarg.arg)
    body = d.expr(node.body, inner)
    inner.pop(promote_exit=False)
    params = [ir.Param(d.renames.rename(p.name), p.typ, p.rest) for p in lambda_params(node.args)]
    func = ir.FuncLit(params, [ir.Param("", ir.ANY)], [ir.Return([body])])
    return ir.Call(func)


def translate_expr_IfExp(node: ast.IfExp, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    """a if cond else b -> func() Any { if cond { return a } else { return b } }()"""
    branch = ir.If(
        d.expr(node.test, scope),
        [ir.Return([d.expr(node.body, scope)])],
        [ir.Return([d.expr(node.orelse, scope)])],
    )
    return ir.Call(ir.FuncLit([], [ir.Param("", ir.ANY)], [branch]))


def translate_expr_Tuple(node: ast.Tuple, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    return ir.Composite(ir.TUPLE, [_element(e, scope, d) for e in node.elts])


def translate_expr_List(node: ast.List, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    return ir.Composite(ir.LIST, [_element(e, scope, d) for e in node.elts])


def _element(node: ast.expr, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    if isinstance(node, ast.Starred):
        return ir.Commented(d.expr(node.value, scope), "...")
    return d.expr(node, scope)


def translate_expr_Dict(node: ast.Dict, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    elts: list[ir.Expr] = []
    for key, value in zip(node.keys, node.values):
        if key is None:
            # {**other}
            elts.append(ir.Commented(d.expr(value, scope), "..."))
        else:
            elts.append(ir.KeyValue(d.expr(key, scope), d.expr(value, scope)))
    return ir.Composite(ir.DICT, elts)


_GO_VERBS = "bdoxXeEfFgGs"


def _format_verb(value: ast.FormattedValue) -> str:
    if value.conversion in (ord("r"), ord("a")):
        return "%q"
    spec = value.format_spec
    if isinstance(spec, ast.JoinedStr) and all(is_string_constant(v) for v in spec.values):
        text = "".join(v.value for v in spec.values)
        if text and text[-1] in _GO_VERBS and not any(c in text for c in "<>^=,_"):
            return "%" + text
    return "%v"


def translate_expr_JoinedStr(
    node: ast.JoinedStr, scope: "Scope", d: TranslationDispatch
) -> ir.Expr:
    """f"x={x!r}" -> fmt.Sprintf("x=%q", x)"""
    parts: list[str] = []
    args: list[ir.Expr] = []
    for value in node.values:
        if isinstance(value, ast.FormattedValue):
            parts.append(_format_verb(value))
            args.append(d.expr(value.value, scope))
        elif is_string_constant(value):
            parts.append(value.value.replace("%", "%%"))
    if not args:
        return ir.StringLit("".join(p.replace("%%", "%") for p in parts))
    return ir.Call(FMT_SPRINTF, [ir.StringLit("".join(parts))] + args)


def translate_expr_Comprehension(
    node: ast.expr, scope: "Scope", d: TranslationDispatch
) -> ir.Expr:
    return d.comprehension(node, scope)


EXPR_HANDLERS: dict[str, Callable[[ast.expr, "Scope", TranslationDispatch], ir.Expr]] = {
    "Constant": translate_expr_Constant,
    "Name": translate_expr_Name,
    "Attribute": translate_expr_Attribute,
    "Subscript": translate_expr_Subscript,
    "BinOp": translate_expr_BinOp,
    "BoolOp": translate_expr_BoolOp,
    "UnaryOp": translate_expr_UnaryOp,
    "Compare": translate_expr_Compare,
    "Call": translate_expr_Call,
    "Lambda": translate_expr_Lambda,
    "IfExp": translate_expr_IfExp,
    "Tuple": translate_expr_Tuple,
    "List": translate_expr_List,
    "Dict": translate_expr_Dict,
    "JoinedStr": translate_expr_JoinedStr,
    "ListComp": translate_expr_Comprehension,
    "DictComp": translate_expr_Comprehension,
    "GeneratorExp": translate_expr_Comprehension,
}


def translate_expr(node: ast.expr, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    """Translate one expression. Unhandled kinds degrade through d.unknown_expr."""
    kind = node_type(node)
    if d.options.verbose:
        logger.debug("expr %s", kind)
    handler = EXPR_HANDLERS.get(kind)
    if handler is None:
        return d.unknown_expr(kind, node)
    return handler(node, scope, d)


# ============================================================
# TYPES
# ============================================================


# Python annotation name -> Go type
TYPE_NAMES: dict[str, ir.Expr] = {
    "int": ir.Ident("int"),
    "float": ir.Ident("float64"),
    "str": ir.Ident("string"),
    "bool": ir.Ident("bool"),
    "complex": ir.Ident("complex128"),
    "bytes": ir.SliceType(ir.Ident("byte")),
    "object": ir.ANY,
    "Any": ir.ANY,
    "list": ir.LIST,
    "List": ir.LIST,
    "Sequence": ir.LIST,
    "dict": ir.DICT,
    "Dict": ir.DICT,
    "Mapping": ir.DICT,
    "tuple": ir.TUPLE,
    "Tuple": ir.TUPLE,
}


def translate_type(node: ast.expr | None, scope: "Scope", d: TranslationDispatch) -> ir.Expr | None:
    """Translate an annotation to a Go type.

    Returns None only for an explicit `None` annotation (no value).
    Anything unrecognized becomes the runtime Any placeholder.
    """
    if node is None:
        return ir.ANY
    if isinstance(node, ast.Constant):
        if node.value is None:
            return None
        if isinstance(node.value, str):
            # Forward reference: "ClassName"
            return TYPE_NAMES.get(node.value, d.ident(node.value))
        return ir.ANY
    if isinstance(node, ast.Name):
        return TYPE_NAMES.get(node.id, d.ident(node.id))
    if isinstance(node, ast.Attribute):
        # typing.List, t.Any
        return TYPE_NAMES.get(node.attr, ir.ANY)
    if isinstance(node, ast.Subscript):
        base = get_attr_path(node.value)
        name = base[-1] if base else ""
        if name == "Optional":
            inner = translate_type(node.slice, scope, d)
            return inner if inner is not None else ir.ANY
        return TYPE_NAMES.get(name, ir.ANY)
    return ir.ANY


def guess_type(node: ast.expr) -> ir.Expr:
    """Coarse Go type from the syntactic shape of a value, for documentation."""
    if isinstance(node, ast.Tuple):
        return ir.TUPLE
    if isinstance(node, (ast.List, ast.ListComp)):
        return ir.LIST
    if isinstance(node, (ast.Dict, ast.DictComp)):
        return ir.DICT
    if isinstance(node, ast.JoinedStr):
        return ir.Ident("string")
    if isinstance(node, ast.Constant):
        value = node.value
        if isinstance(value, bool):
            return ir.Ident("bool")
        if isinstance(value, str):
            return ir.Ident("string")
        if isinstance(value, int):
            return ir.Ident("int")
        if isinstance(value, float):
            return ir.Ident("float64")
        if isinstance(value, complex):
            return ir.Ident("complex128")
    return ir.ANY
