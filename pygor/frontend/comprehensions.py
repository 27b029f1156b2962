"""Comprehension desugaring.

Eager forms become an immediately-invoked function that fills and returns an
accumulator:

    [f(x) for x in xs if p(x)]

    func() List {
        lc := List{}
        for _, x := range xs {
            if p(x) {
                lc = append(lc, f(x))
            }
        }
        return lc
    }()

A generator expression instead starts a producer goroutine that sends each
element on a channel and closes it when done; the caller gets the channel
back immediately.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Callable

from .. import ir
from .context import TranslationDispatch

if TYPE_CHECKING:
    from .scope import Scope

LIST_ACC = ir.Ident("lc")
DICT_ACC = ir.Ident("mm")
CHANNEL = ir.Ident("c")


def _with_body(loop: ir.Stmt, body: list[ir.Stmt]) -> ir.Stmt:
    """Attach body to a loop fragment built with an empty body."""
    if isinstance(loop, (ir.ForRange, ir.ForClassic, ir.While)):
        loop.body = body
    return loop


def _nest(
    generators: list[ast.comprehension],
    scope: "Scope",
    d: TranslationDispatch,
    innermost: Callable[[], list[ir.Stmt]],
) -> list[ir.Stmt]:
    """Build nested loops for the generator clauses, outermost first.

    Loop headers are translated in source order so that each clause's
    targets are declared before later clauses and the element use them.
    innermost() is called last and returns the statements at the core.
    """
    headers: list[tuple[ir.Stmt, list[ir.Stmt], list[ir.Expr]]] = []
    for gen in generators:
        loop, unpack = d.loop(gen.target, gen.iter, scope)
        conds = [d.expr(cond, scope) for cond in gen.ifs]
        headers.append((loop, unpack, conds))
    body = innermost()
    for loop, unpack, conds in reversed(headers):
        for cond in reversed(conds):
            body = [ir.If(cond, body)]
        body = [_with_body(loop, unpack + body)]
    return body


def translate_listcomp(node: ast.ListComp, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    inner = scope.push()
    loops = _nest(
        node.generators,
        inner,
        d,
        lambda: [
            ir.Assign(
                [LIST_ACC],
                [ir.Call(ir.Ident("append"), [LIST_ACC, d.expr(node.elt, inner)])],
            )
        ],
    )
    inner.pop(promote_exit=False)
    body: list[ir.Stmt] = [ir.Assign([LIST_ACC], [ir.Composite(ir.LIST)], ":=")]
    body.extend(loops)
    body.append(ir.Return([LIST_ACC]))
    return ir.Call(ir.FuncLit([], [ir.Param("", ir.LIST)], body))


def translate_dictcomp(node: ast.DictComp, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    inner = scope.push()
    loops = _nest(
        node.generators,
        inner,
        d,
        lambda: [
            ir.Assign(
                [ir.Index(DICT_ACC, d.expr(node.key, inner))],
                [d.expr(node.value, inner)],
            )
        ],
    )
    inner.pop(promote_exit=False)
    body: list[ir.Stmt] = [ir.Assign([DICT_ACC], [ir.Composite(ir.DICT)], ":=")]
    body.extend(loops)
    body.append(ir.Return([DICT_ACC]))
    return ir.Call(ir.FuncLit([], [ir.Param("", ir.DICT)], body))


def translate_genexp(
    node: ast.GeneratorExp, scope: "Scope", d: TranslationDispatch
) -> ir.Expr:
    inner = scope.push()
    loops = _nest(
        node.generators,
        inner,
        d,
        lambda: [ir.Send(CHANNEL, d.expr(node.elt, inner))],
    )
    inner.pop(promote_exit=False)
    chan_type = ir.ChanType(ir.ANY)
    producer = ir.FuncLit([], [], loops + [ir.ExprStmt(ir.Call(ir.Ident("close"), [CHANNEL]))])
    body: list[ir.Stmt] = [
        ir.Assign([CHANNEL], [ir.Call(ir.Ident("make"), [chan_type])], ":="),
        ir.GoStmt(ir.Call(producer)),
        ir.Return([CHANNEL]),
    ]
    return ir.Call(ir.FuncLit([], [ir.Param("", chan_type)], body))


def translate_comprehension(node: ast.expr, scope: "Scope", d: TranslationDispatch) -> ir.Expr:
    if isinstance(node, ast.ListComp):
        return translate_listcomp(node, scope, d)
    if isinstance(node, ast.DictComp):
        return translate_dictcomp(node, scope, d)
    if isinstance(node, ast.GeneratorExp):
        return translate_genexp(node, scope, d)
    return d.unknown_expr(type(node).__name__, node)
