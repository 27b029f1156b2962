"""Function and class declarations."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from .. import ir
from .ast_compat import is_string_constant, source_text, split_docstring
from .context import TranslationDispatch, hard_failure
from .expressions import guess_type

if TYPE_CHECKING:
    from .scope import Scope


def _decorators(node: ast.FunctionDef | ast.ClassDef) -> list[ir.Stmt]:
    return [ir.Comment("@" + source_text(dec)) for dec in node.decorator_list]


def _param(
    arg: ast.arg,
    default: ast.expr | None,
    scope: "Scope",
    d: TranslationDispatch,
    rest: bool = False,
) -> ir.Param:
    scope.declare(arg.arg)
    typ = d.type_expr(arg.annotation, scope) or ir.ANY
    value = d.expr(default, scope) if default is not None else None
    return ir.Param(d.renames.rename(arg.arg), typ, rest=rest, default=value)


def translate_params(
    args: ast.arguments, scope: "Scope", d: TranslationDispatch, class_name: str
) -> tuple[list[ir.Param], ir.Param | None]:
    """Translate a parameter list; returns (params, receiver).

    Inside a class body the first positional parameter becomes the receiver.
    Defaults survive only as /*=value*/ annotations; *args and **kwargs each
    become a trailing rest parameter.
    """
    positional = args.posonlyargs + args.args
    # Defaults belong to the last len(defaults) positional parameters
    defaults: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults))
    defaults.extend(args.defaults)
    receiver: ir.Param | None = None
    params: list[ir.Param] = []
    for i, (arg, default) in enumerate(zip(positional, defaults)):
        if i == 0 and class_name:
            scope.declare(arg.arg)
            receiver = ir.Param(d.renames.rename(arg.arg), ir.Pointer(d.ident(class_name)))
            continue
        params.append(_param(arg, default, scope, d))
    if args.vararg is not None:
        params.append(_param(args.vararg, None, scope, d, rest=True))
    for arg, default in zip(args.kwonlyargs, args.kw_defaults):
        params.append(_param(arg, default, scope, d))
    if args.kwarg is not None:
        params.append(_param(args.kwarg, None, scope, d, rest=True))
    return (params, receiver)


def translate_function(
    node: ast.FunctionDef | ast.AsyncFunctionDef,
    scope: "Scope",
    d: TranslationDispatch,
    class_name: str = "",
) -> list[ir.Stmt]:
    """Translate a def into decorator comments plus a declaration.

    | Context                | Go                              |
    |------------------------|---------------------------------|
    | class body             | func (self *C) name(...) ...    |
    | module level           | func name(...) ...              |
    | nested in a function   | name := func(...) ... { ... }   |
    """
    out = _decorators(node)
    if isinstance(node, ast.AsyncFunctionDef):
        out.append(ir.Comment("async"))
    inner = scope.push()
    inner.enter_function()
    params, receiver = translate_params(node.args, inner, d, class_name)
    results: list[ir.Param] = []
    if node.returns is not None:
        typ = d.type_expr(node.returns, inner)
        if typ is not None:
            results = [ir.Param("", typ)]
    body = d.stmts(node.body, inner)
    if node.returns is None and inner.exit_mode in ("return", "yield"):
        results = [ir.Param("", ir.ANY)]
    inner.pop(promote_exit=False)
    name = d.renames.rename(node.name)
    if receiver is not None and node.name == "__str__":
        name = "String"
        results = [ir.Param("", ir.Ident("string"))]
    if not class_name:
        scope.declare(node.name)
    if receiver is not None or class_name or scope.is_root():
        out.append(ir.FuncDecl(name, params, results, body, receiver))
    else:
        out.append(ir.Assign([ir.Ident(name)], [ir.FuncLit(params, results, body)], ":="))
    return out


def _class_doc(node: ast.ClassDef) -> list[str]:
    doc: list[str] = []
    bases = [source_text(b) for b in node.bases]
    bases.extend(source_text(k) for k in node.keywords)
    if bases:
        doc.append("bases: " + ", ".join(bases))
    return doc


def _fields(
    node: ast.Assign | ast.AnnAssign, scope: "Scope", d: TranslationDispatch
) -> list[ir.FieldDecl]:
    if isinstance(node, ast.AnnAssign):
        if not isinstance(node.target, ast.Name):
            raise hard_failure("unexpected field target in class body", node)
        typ = d.type_expr(node.annotation, scope) or ir.ANY
        value = d.expr(node.value, scope) if node.value is not None else None
        return [ir.FieldDecl([d.renames.rename(node.target.id)], typ, value)]
    fields: list[ir.FieldDecl] = []
    value = d.expr(node.value, scope)
    typ = guess_type(node.value)
    for target in node.targets:
        if not isinstance(target, ast.Name):
            raise hard_failure("unexpected field target in class body", node)
        fields.append(ir.FieldDecl([d.renames.rename(target.id)], typ, value))
    return fields


def translate_class(node: ast.ClassDef, scope: "Scope", d: TranslationDispatch) -> None:
    """Emit a struct type; methods are buffered and land after it.

    Allowed in the body: pass, strings (doc comments), assignments (fields),
    and function definitions (methods). Anything else is a hard failure.
    """
    for stmt in _decorators(node):
        scope.add(stmt)
    doc = _class_doc(node)
    docstring, body = split_docstring(node.body)
    doc.extend(docstring)
    inner = scope.push()
    fields: list[ir.FieldDecl] = []
    for stmt in body:
        if isinstance(stmt, ast.Pass):
            continue
        if isinstance(stmt, ast.Expr) and is_string_constant(stmt.value):
            doc.extend(line.strip() for line in stmt.value.value.split("\n") if line.strip())
        elif isinstance(stmt, (ast.Assign, ast.AnnAssign)):
            fields.extend(_fields(stmt, inner, d))
        elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            inner.methods.extend(d.function(stmt, inner, node.name))
        else:
            raise hard_failure(
                "unexpected statement in class body: " + type(stmt).__name__, stmt
            )
    scope.declare(node.name)
    scope.add(ir.TypeDecl(d.renames.rename(node.name), fields, doc))
    # After the type, so buffered methods follow it
    inner.pop(promote_exit=False)
