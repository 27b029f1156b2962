"""Call translation: special forms keyed by callee shape, generic fallback.

Lookup order for a call:

| Callee          | Table         | Key                    |
|-----------------|---------------|------------------------|
| module.func     | MODULE_FORMS  | (module, attr, argc)   |
| obj.method      | ATTR_FORMS    | (attr, argc)           |
| obj.method      | ATTR_CALLEES  | attr (callee only)     |
| name            | NAME_FORMS    | (name, argc)           |
| name            | NAME_CALLEES  | name (callee only)     |

A recognized name with an unexpected argument count is not an error: it
falls through to the generic translation.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Callable

from .. import ir
from .ast_compat import get_attr_path, is_plain_call, source_text
from .context import TranslationDispatch
from .expressions import resolve_path, well_known

if TYPE_CHECKING:
    from .scope import Scope

Form = Callable[[ir.Expr, list[ir.Expr]], ir.Expr]
"""Rewrite of (receiver, translated positional args) to a fragment."""


def _strings(name: str) -> Form:
    return lambda obj, args: ir.Call(ir.Qual("strings", name), [obj] + args)


def _runtime(name: str) -> Form:
    return lambda obj, args: ir.Call(ir.Qual(ir.RUNTIME, name), [obj] + args)


def _append(obj: ir.Expr, args: list[ir.Expr]) -> ir.Expr:
    # x.append(v) -> x = append(x, v)
    return ir.StmtExpr(ir.Assign([obj], [ir.Call(ir.Ident("append"), [obj, args[0]])]))


def _split_n(obj: ir.Expr, args: list[ir.Expr]) -> ir.Expr:
    # Python maxsplit counts splits, Go n counts pieces
    count = ir.Binary("+", args[1], ir.IntLit(1))
    return ir.Call(ir.Qual("strings", "SplitN"), [obj, args[0], count])


def _join(obj: ir.Expr, args: list[ir.Expr]) -> ir.Expr:
    return ir.Call(ir.Qual("strings", "Join"), [args[0], obj])


def _replace_all(obj: ir.Expr, args: list[ir.Expr]) -> ir.Expr:
    return ir.Call(ir.Qual("strings", "Replace"), [obj, args[0], args[1], ir.IntLit(-1)])


ATTR_FORMS: dict[tuple[str, int], Form] = {
    # `for k, v in d.items()` ranges over the map itself
    ("items", 0): lambda obj, args: obj,
    ("append", 1): _append,
    ("upper", 0): _strings("ToUpper"),
    ("lower", 0): _strings("ToLower"),
    ("startswith", 1): _strings("HasPrefix"),
    ("endswith", 1): _strings("HasSuffix"),
    ("strip", 0): _strings("TrimSpace"),
    ("strip", 1): _strings("Trim"),
    ("lstrip", 0): _runtime("TrimLeft"),
    ("lstrip", 1): _strings("TrimLeft"),
    ("rstrip", 0): _runtime("TrimRight"),
    ("rstrip", 1): _strings("TrimRight"),
    ("split", 0): _runtime("Splits"),
    ("split", 1): _strings("Split"),
    ("split", 2): _split_n,
    ("join", 1): _join,
    ("replace", 2): _replace_all,
    ("replace", 3): _strings("Replace"),
    ("count", 1): _strings("Count"),
    ("isspace", 0): _runtime("IsSpace"),
    ("isalpha", 0): _runtime("IsAlpha"),
    ("isdigit", 0): _runtime("IsDigit"),
    ("isnumeric", 0): _runtime("IsDigit"),
    ("isupper", 0): _runtime("IsUpper"),
    ("islower", 0): _runtime("IsLower"),
    ("reverse", 0): _runtime("Reverse"),
}

# File-like methods: only the method name changes
ATTR_CALLEES: dict[str, str] = {
    "read": "Read",
    "write": "Write",
    "close": "Close",
}


def _sleep(obj: ir.Expr, args: list[ir.Expr]) -> ir.Expr:
    # time.sleep(x) -> time.Sleep(time.Duration(x * float64(time.Second)))
    seconds = ir.Call(ir.Ident("float64"), [ir.Qual("time", "Second")])
    duration = ir.Call(ir.Qual("time", "Duration"), [ir.Binary("*", args[0], seconds)])
    return ir.Call(ir.Qual("time", "Sleep"), [duration])


MODULE_FORMS: dict[tuple[str, str, int], Form] = {
    ("sys", "exit", 0): lambda obj, args: ir.Call(ir.Qual("os", "Exit"), [ir.IntLit(-1)]),
    ("sys", "exit", 1): lambda obj, args: ir.Call(ir.Qual("os", "Exit"), args),
    ("time", "sleep", 1): _sleep,
    ("time", "time", 0): lambda obj, args: ir.Call(ir.Qual("time", "Now")),
}

NAME_CALLEES: dict[str, ir.Expr] = {
    "print": ir.Qual("fmt", "Println"),
    "open": ir.Qual("os", "Open"),
    "type": ir.Qual("reflect", "TypeOf"),
}


def _isinstance(
    node: ast.Call, scope: "Scope", d: TranslationDispatch
) -> ir.Expr | None:
    """isinstance(x, T) -> func() bool { _, ok := x.(T); return ok }()"""
    obj_node, type_node = node.args
    if isinstance(type_node, ast.Name):
        typ = d.type_expr(type_node, scope) or ir.ANY
    elif isinstance(type_node, ast.Attribute):
        typ = ir.Commented(ir.Ident(type_node.attr), source_text(type_node.value), before=True)
    else:
        return None
    check = ir.Assign(
        [ir.Ident("_"), ir.Ident("ok")],
        [ir.TypeAssert(d.expr(obj_node, scope), typ)],
        ":=",
    )
    body: list[ir.Stmt] = [
        ir.Comment(source_text(node)),
        check,
        ir.Return([ir.Ident("ok")]),
    ]
    return ir.Call(ir.FuncLit([], [ir.Param("", ir.Ident("bool"))], body))


NAME_FORMS: dict[
    tuple[str, int], Callable[[ast.Call, "Scope", TranslationDispatch], ir.Expr | None]
] = {
    ("isinstance", 2): _isinstance,
}


def generic_args(node: ast.Call, scope: "Scope", d: TranslationDispatch) -> list[ir.Expr]:
    """Positional args in order, then keywords as /*k=*/ v, then spreads as v /*...*/."""
    args: list[ir.Expr] = []
    spreads: list[ir.Expr] = []
    for arg in node.args:
        if isinstance(arg, ast.Starred):
            spreads.append(ir.Commented(d.expr(arg.value, scope), "..."))
        else:
            args.append(d.expr(arg, scope))
    for kw in node.keywords:
        if kw.arg is None:
            spreads.append(ir.Commented(d.expr(kw.value, scope), "..."))
        else:
            args.append(ir.Commented(d.expr(kw.value, scope), kw.arg + "=", before=True))
    return args + spreads


def _special_form(node: ast.Call, scope: "Scope", d: TranslationDispatch) -> ir.Expr | None:
    func = node.func
    argc = len(node.args)
    if isinstance(func, ast.Name):
        if scope.is_declared(func.id):
            return None
        name_form = NAME_FORMS.get((func.id, argc))
        if name_form is not None:
            return name_form(node, scope, d)
        return None
    if not isinstance(func, ast.Attribute):
        return None
    path = get_attr_path(func)
    if path is not None and not scope.is_declared(path[0]):
        resolved, imported = resolve_path(path, scope)
        form = MODULE_FORMS.get((".".join(resolved[:-1]), resolved[-1], argc))
        if form is not None:
            return form(ir.NilLit(), [d.expr(a, scope) for a in node.args])
        # Module functions are not methods: os.path.join(a) is not str.join
        if imported or well_known(resolved) is not None:
            return None
    attr_form = ATTR_FORMS.get((func.attr, argc))
    if attr_form is None:
        return None
    obj = d.expr(func.value, scope)
    return attr_form(obj, [d.expr(a, scope) for a in node.args])


def translate_call(node: ast.Call, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    """Translate a call site: special form if one matches, else a generic call."""
    # Only plain calls are eligible for special forms
    if is_plain_call(node):
        special = _special_form(node, scope, d)
        if special is not None:
            return special
    func = node.func
    callee: ir.Expr
    if isinstance(func, ast.Name) and func.id in NAME_CALLEES and not scope.is_declared(func.id):
        callee = NAME_CALLEES[func.id]
    elif isinstance(func, ast.Attribute) and func.attr in ATTR_CALLEES:
        callee = ir.Selector(d.expr(func.value, scope), ATTR_CALLEES[func.attr])
    else:
        callee = d.expr(func, scope)
    return ir.Call(callee, generic_args(node, scope, d))
