"""Statement translation: Python statements to Go statement fragments.

Handlers append their output to the active scope with scope.add(); nested
blocks get their own child scope, pushed before and popped after the block.
"""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING, Callable

from .. import ir
from .ast_compat import (
    is_main_guard,
    is_plain_call,
    is_negative_literal,
    is_string_constant,
    is_true_constant,
    node_type,
    op_type,
    source_text,
)
from .context import TranslationDispatch, hard_failure
from .expressions import BINARY_OPS, MATH_POW, guess_type

if TYPE_CHECKING:
    from .scope import Scope

logger = logging.getLogger(__name__)

ERR = ir.Ident("err")
PY_EXCEPTION = ir.Qual(ir.RUNTIME, "PyException")
RAISED_EXCEPTION = ir.Qual(ir.RUNTIME, "RaisedException")
ASSERT = ir.Qual(ir.RUNTIME, "Assert")
LOOP_TEMP = ir.Ident("_t")


def _block(nodes: list[ast.stmt], scope: "Scope", d: TranslationDispatch) -> list[ir.Stmt]:
    """Translate a nested block in its own child scope."""
    child = scope.push()
    body = d.stmts(nodes, child)
    child.pop()
    return body


def _docstring(node: ast.Expr) -> ir.Stmt:
    lines = [line.strip() for line in node.value.value.split("\n") if line.strip()]
    return ir.Comment("\n".join(lines))


# ============================================================
# ASSIGNMENT
# ============================================================


def _unpack(
    target: ast.expr, value: ast.expr
) -> tuple[list[ast.expr], list[ast.expr]]:
    """Split a target/value pair into parallel lists.

    a, b = 1, 2   -> [a, b], [1, 2]
    a, b = f()    -> [a, b], [f()]
    """
    if isinstance(target, (ast.Tuple, ast.List)):
        if isinstance(value, (ast.Tuple, ast.List)) and len(value.elts) == len(target.elts):
            return (list(target.elts), list(value.elts))
        return (list(target.elts), [value])
    return ([target], [value])


def _assign_one(
    target: ast.expr, value: ast.expr, scope: "Scope", d: TranslationDispatch
) -> None:
    targets, values = _unpack(target, value)
    # Right-hand side first: it still sees the names as they were
    rhs = [d.expr(v, scope) for v in values]
    names = [t.id for t in targets if isinstance(t, ast.Name)]
    fresh = dict(zip(names, scope.declare_or_assign(names)))
    lhs = [d.expr(t, scope) for t in targets]
    all_new = len(names) == len(targets) and all(fresh.values())
    if all_new:
        hint = guess_type(values[0]) if len(values) == 1 else None
        scope.add(ir.VarDecl(lhs, rhs, hint=hint))
        return
    for name in names:
        if fresh[name]:
            scope.add(ir.VarDecl([d.ident(name)], typ=ir.ANY))
    scope.add(ir.Assign(lhs, rhs))


def translate_stmt_Assign(node: ast.Assign, scope: "Scope", d: TranslationDispatch) -> None:
    # a = b = v assigns each target in turn
    for target in node.targets:
        _assign_one(target, node.value, scope, d)


def translate_stmt_AnnAssign(
    node: ast.AnnAssign, scope: "Scope", d: TranslationDispatch
) -> None:
    typ = d.type_expr(node.annotation, scope) or ir.ANY
    value = [d.expr(node.value, scope)] if node.value is not None else []
    if isinstance(node.target, ast.Name):
        if scope.declare_or_assign([node.target.id])[0]:
            scope.add(ir.VarDecl([d.ident(node.target.id)], value, typ=typ))
            return
    if value:
        scope.add(ir.Assign([d.expr(node.target, scope)], value))


def translate_stmt_AugAssign(
    node: ast.AugAssign, scope: "Scope", d: TranslationDispatch
) -> None:
    kind = op_type(node.op)
    target = d.expr(node.target, scope)
    value = d.expr(node.value, scope)
    if kind == "Pow":
        scope.add(ir.Assign([target], [ir.Call(MATH_POW, [target, value])]))
        return
    if kind == "FloorDiv":
        scope.add(ir.Assign([target], [ir.Commented(value, "floor", before=True)], "/="))
        return
    op = BINARY_OPS.get(kind)
    if op is None:
        scope.add(d.unknown_stmt("AUGASSIGN", node))
        return
    scope.add(ir.Assign([target], [value], op + "="))


# ============================================================
# SIMPLE STATEMENTS
# ============================================================


def _values(node: ast.expr | None, scope: "Scope", d: TranslationDispatch) -> list[ir.Expr]:
    """Return/yield operands; a tuple becomes multiple values."""
    if node is None:
        return []
    if isinstance(node, ast.Tuple):
        return [d.expr(e, scope) for e in node.elts]
    return [d.expr(node, scope)]


def translate_stmt_Expr(node: ast.Expr, scope: "Scope", d: TranslationDispatch) -> None:
    value = node.value
    if is_string_constant(value):
        scope.add(_docstring(node))
        return
    if isinstance(value, (ast.Yield, ast.YieldFrom)):
        # Suspension is not modeled: yield returns its value
        values = _values(value.value, scope, d) or [ir.NilLit()]
        comment = "yield" if isinstance(value, ast.Yield) else "yield from"
        scope.add(ir.Return(values, comment=comment))
        scope.mark_exit("yield")
        return
    scope.add(ir.ExprStmt(d.expr(value, scope)))


def translate_stmt_Return(node: ast.Return, scope: "Scope", d: TranslationDispatch) -> None:
    scope.add(ir.Return(_values(node.value, scope, d)))
    scope.mark_exit("return")


def translate_stmt_Pass(node: ast.Pass, scope: "Scope", d: TranslationDispatch) -> None:
    scope.add(ir.Comment("pass"))


def translate_stmt_Break(node: ast.Break, scope: "Scope", d: TranslationDispatch) -> None:
    scope.add(ir.Break())


def translate_stmt_Continue(node: ast.Continue, scope: "Scope", d: TranslationDispatch) -> None:
    scope.add(ir.Continue())


def translate_stmt_Global(node: ast.Global, scope: "Scope", d: TranslationDispatch) -> None:
    scope.add(ir.Comment("global " + ", ".join(node.names)))


def translate_stmt_Nonlocal(
    node: ast.Nonlocal, scope: "Scope", d: TranslationDispatch
) -> None:
    scope.add(ir.Comment("nonlocal " + ", ".join(node.names)))


def translate_stmt_Assert(node: ast.Assert, scope: "Scope", d: TranslationDispatch) -> None:
    msg = d.expr(node.msg, scope) if node.msg is not None else ir.StringLit("")
    scope.add(ir.ExprStmt(ir.Call(ASSERT, [d.expr(node.test, scope), msg])))


def translate_stmt_Raise(node: ast.Raise, scope: "Scope", d: TranslationDispatch) -> None:
    if node.exc is None:
        # Bare raise re-raises the error being handled
        scope.add(ir.Return([ERR], comment="re-raise"))
        return
    comment = "cause: " + source_text(node.cause) if node.cause is not None else None
    wrapped = ir.Call(RAISED_EXCEPTION, [d.expr(node.exc, scope)])
    scope.add(ir.Return([wrapped], comment=comment))


def translate_stmt_Delete(node: ast.Delete, scope: "Scope", d: TranslationDispatch) -> None:
    for target in node.targets:
        if isinstance(target, ast.Subscript):
            if isinstance(target.slice, (ast.Slice, ast.Tuple)):
                raise hard_failure("unsupported delete target", target)
            call = ir.Call(
                ir.Ident("delete"),
                [d.expr(target.value, scope), d.expr(target.slice, scope)],
            )
            scope.add(ir.ExprStmt(call))
        else:
            scope.add(d.unknown_stmt("DELETE", target))


def translate_stmt_Import(node: ast.Import, scope: "Scope", d: TranslationDispatch) -> None:
    for alias in node.names:
        if alias.asname is not None:
            scope.imports[alias.asname] = alias.name
            scope.add(ir.Comment("import " + alias.asname + ' "' + alias.name + '"'))
        else:
            # import a.b binds a
            base = alias.name.split(".")[0]
            scope.imports[base] = base
            scope.add(ir.Comment('import "' + alias.name + '"'))


def translate_stmt_ImportFrom(
    node: ast.ImportFrom, scope: "Scope", d: TranslationDispatch
) -> None:
    module = "." * node.level + (node.module or "")
    for alias in node.names:
        if alias.name == "*":
            scope.add(ir.Comment('import . "' + module + '"'))
            continue
        bound = alias.asname if alias.asname is not None else alias.name
        # Relative imports resolve as if absolute
        scope.imports[bound] = node.module + "." + alias.name if node.module else alias.name
        if alias.asname is not None:
            text = "import " + alias.asname + ' "' + module + '" // ' + alias.name
        else:
            text = 'import "' + module + '" // ' + alias.name
        scope.add(ir.Comment(text))


# ============================================================
# CONTROL FLOW
# ============================================================


def translate_stmt_If(node: ast.If, scope: "Scope", d: TranslationDispatch) -> None:
    if scope.is_root() and is_main_guard(node):
        scope.add(ir.FuncDecl("main", body=_block(node.body, scope, d)))
        scope.main = True
        return
    cond = d.expr(node.test, scope)
    body = _block(node.body, scope, d)
    orelse = _block(node.orelse, scope, d) if node.orelse else []
    scope.add(ir.If(cond, body, orelse))


def _range_loop(
    call: ast.Call, target: ast.expr, scope: "Scope", d: TranslationDispatch
) -> ir.Stmt:
    """range(stop) / range(start, stop) / range(start, stop, step)"""
    args = call.args
    if len(args) < 1 or len(args) > 3:
        raise hard_failure("range expects 1 to 3 arguments", call)
    start: ir.Expr = ir.IntLit(0)
    step: ir.Expr = ir.IntLit(1)
    if len(args) == 1:
        stop = d.expr(args[0], scope)
    else:
        start = d.expr(args[0], scope)
        stop = d.expr(args[1], scope)
        if len(args) == 3:
            step = d.expr(args[2], scope)
    var = d.expr(target, scope)
    cmp = ">" if len(args) == 3 and is_negative_literal(args[2]) else "<"
    return ir.ForClassic(
        ir.Assign([var], [start], ":="),
        ir.Binary(cmp, var, stop),
        ir.Assign([var], [step], "+="),
    )


def _is_builtin_call(node: ast.expr, name: str, scope: "Scope") -> bool:
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == name
        and not scope.is_declared(name)
        and is_plain_call(node)
    )


def translate_loop(
    target: ast.expr, iterable: ast.expr, scope: "Scope", d: TranslationDispatch
) -> tuple[ir.Stmt, list[ir.Stmt]]:
    """Loop header for `for target in iterable`, with an empty body.

    Target names are declared in scope, which should be the loop's body
    scope. Returns (loop, statements that must open the body).

    | Python                      | Go                                  |
    |-----------------------------|-------------------------------------|
    | for i in range(a, b)        | for i := a; i < b; i++              |
    | for i, v in enumerate(xs)   | for i, v := range xs                |
    | for x in xs                 | for _, x := range xs                |
    | for k, v in d.items()       | for k, v := range d                 |
    | for a, b, c in xs           | for _, _t := range xs               |
    |                             |     a, b, c := _t[0], _t[1], _t[2]  |
    """
    elts = list(target.elts) if isinstance(target, (ast.Tuple, ast.List)) else [target]
    for elt in elts:
        if isinstance(elt, ast.Name):
            scope.declare(elt.id)
    if _is_builtin_call(iterable, "range", scope) and len(elts) == 1:
        return (_range_loop(iterable, target, scope, d), [])
    if (
        _is_builtin_call(iterable, "enumerate", scope)
        and len(iterable.args) == 1
        and len(elts) == 2
    ):
        index, value = (d.expr(e, scope) for e in elts)
        return (ir.ForRange(index, value, d.expr(iterable.args[0], scope)), [])
    source = d.expr(iterable, scope)
    if len(elts) == 1:
        return (ir.ForRange(None, d.expr(elts[0], scope), source), [])
    if len(elts) == 2:
        key, value = (d.expr(e, scope) for e in elts)
        return (ir.ForRange(key, value, source), [])
    names = ", ".join(source_text(e) for e in elts)
    loop = ir.ForRange(None, ir.Commented(LOOP_TEMP, " " + names + " "), source)
    unpack = ir.Assign(
        [d.expr(e, scope) for e in elts],
        [ir.Index(LOOP_TEMP, ir.IntLit(i)) for i in range(len(elts))],
        ":=",
    )
    return (loop, [unpack])


def _loop_else(orelse: list[ast.stmt], scope: "Scope", d: TranslationDispatch) -> None:
    if orelse:
        # Runs after the loop whether or not it ended by break
        body = _block(orelse, scope, d)
        scope.add(ir.Block([ir.Comment("loop else")] + body))


def translate_stmt_For(node: ast.For, scope: "Scope", d: TranslationDispatch) -> None:
    child = scope.push()
    loop, unpack = d.loop(node.target, node.iter, child)
    body = d.stmts(node.body, child)
    child.pop()
    loop.body = unpack + body
    scope.add(loop)
    _loop_else(node.orelse, scope, d)


def translate_stmt_While(node: ast.While, scope: "Scope", d: TranslationDispatch) -> None:
    cond = None if is_true_constant(node.test) else d.expr(node.test, scope)
    scope.add(ir.While(cond, _block(node.body, scope, d)))
    _loop_else(node.orelse, scope, d)


def _handler_types(handler: ast.ExceptHandler, scope: "Scope", d: TranslationDispatch) -> list[ir.Expr]:
    if handler.type is None:
        return []
    if isinstance(handler.type, ast.Tuple):
        return [d.expr(e, scope) for e in handler.type.elts]
    return [d.expr(handler.type, scope)]


def _handler(handler: ast.ExceptHandler, scope: "Scope", d: TranslationDispatch) -> ir.Case:
    child = scope.push()
    body: list[ir.Stmt] = []
    if handler.name is not None:
        child.declare(handler.name)
        body.append(ir.Assign([d.ident(handler.name)], [ERR], ":="))
    body.extend(d.stmts(handler.body, child))
    child.pop()
    return ir.Case(_handler_types(handler, scope, d), body)


def translate_stmt_Try(node: ast.Try, scope: "Scope", d: TranslationDispatch) -> None:
    """try/except/else/finally

        if err := func() PyException {
            // try
            ...
            return nil
        }(); err != nil {
            // except
            switch err.(type) {
            case ValueError:
                ...
            }
        } else {
            ...
        }
        {
            // finally
            ...
        }

    The finally block runs after the if; an early return inside the guarded
    body skips it.
    """
    guarded = [ir.Comment("try")] + _block(node.body, scope, d) + [ir.Return([ir.NilLit()])]
    call = ir.Call(ir.FuncLit([], [ir.Param("", PY_EXCEPTION)], guarded))
    init = ir.Assign([ERR], [call], ":=")
    if node.handlers:
        cases = [_handler(h, scope, d) for h in node.handlers]
        handled: list[ir.Stmt] = [
            ir.Comment("except"),
            ir.Switch(ir.TypeAssert(ERR, ir.Ident("type")), cases),
        ]
    else:
        handled = [ir.Comment("no except clause")]
    orelse = _block(node.orelse, scope, d) if node.orelse else []
    scope.add(ir.If(ir.Binary("!=", ERR, ir.NilLit()), handled, orelse, init=init))
    if node.finalbody:
        scope.add(ir.Block([ir.Comment("finally")] + _block(node.finalbody, scope, d)))


def translate_stmt_With(node: ast.With, scope: "Scope", d: TranslationDispatch) -> None:
    """Nested block binding each context value; release is left to the reader."""
    child = scope.push()
    body: list[ir.Stmt] = [ir.Comment("with")]
    for item in node.items:
        value = d.expr(item.context_expr, child)
        var = item.optional_vars
        if isinstance(var, ast.Name):
            child.declare(var.id)
            body.append(ir.Assign([d.ident(var.id)], [value], ":="))
            body.append(ir.Comment("defer: release " + var.id))
        elif var is not None:
            body.append(ir.Assign([d.expr(var, child)], [value]))
            body.append(ir.Comment("defer: release " + source_text(var)))
        else:
            body.append(ir.ExprStmt(value))
            body.append(ir.Comment("defer: release " + source_text(item.context_expr)))
    body.extend(d.stmts(node.body, child))
    child.pop()
    scope.add(ir.Block(body))


# ============================================================
# DECLARATIONS
# ============================================================


def translate_stmt_FunctionDef(
    node: ast.FunctionDef, scope: "Scope", d: TranslationDispatch
) -> None:
    for stmt in d.function(node, scope, ""):
        scope.add(stmt)


def translate_stmt_ClassDef(node: ast.ClassDef, scope: "Scope", d: TranslationDispatch) -> None:
    d.klass(node, scope)


STMT_HANDLERS: dict[str, Callable[[ast.stmt, "Scope", TranslationDispatch], None]] = {
    "Assign": translate_stmt_Assign,
    "AnnAssign": translate_stmt_AnnAssign,
    "AugAssign": translate_stmt_AugAssign,
    "Expr": translate_stmt_Expr,
    "Return": translate_stmt_Return,
    "Pass": translate_stmt_Pass,
    "Break": translate_stmt_Break,
    "Continue": translate_stmt_Continue,
    "Global": translate_stmt_Global,
    "Nonlocal": translate_stmt_Nonlocal,
    "Assert": translate_stmt_Assert,
    "Raise": translate_stmt_Raise,
    "Delete": translate_stmt_Delete,
    "Import": translate_stmt_Import,
    "ImportFrom": translate_stmt_ImportFrom,
    "If": translate_stmt_If,
    "For": translate_stmt_For,
    "While": translate_stmt_While,
    "Try": translate_stmt_Try,
    "With": translate_stmt_With,
    "FunctionDef": translate_stmt_FunctionDef,
    "AsyncFunctionDef": translate_stmt_FunctionDef,
    "ClassDef": translate_stmt_ClassDef,
}


def translate_stmt(node: ast.stmt, scope: "Scope", d: TranslationDispatch) -> None:
    kind = node_type(node)
    if d.options.verbose:
        logger.debug("stmt %s at line %d", kind, getattr(node, "lineno", 0))
    if d.options.line_numbers:
        scope.add(ir.Comment("line " + str(node.lineno)))
    handler = STMT_HANDLERS.get(kind)
    if handler is None:
        scope.add(d.unknown_stmt(kind, node))
        return
    handler(node, scope, d)


def translate_stmts(nodes: list[ast.stmt], scope: "Scope", d: TranslationDispatch) -> list[ir.Stmt]:
    """Translate a statement list into scope; return what it added."""
    for node in nodes:
        translate_stmt(node, scope, d)
    if d.options.verbose:
        logger.debug("exit mode %s at level %d", scope.exit_mode, scope.level)
    return scope.take()
