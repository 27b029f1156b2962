"""Pygor IR - Go code fragments.

This module defines the composable values the frontend produces and the
backend renders. Fragments describe Go syntax, not Python semantics: every
lowering decision has already been made when a fragment is built.

Architecture:
    Source -> ast.parse -> Frontend -> [IR] -> GoRenderer -> Go text

Fragments are plain dataclasses. Two translations of the same node under the
same scope state produce fragments that compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Import path of the support package that backs Python builtins in Go.
# Rendered as a dot import, so references to it appear unqualified.
RUNTIME = "github.com/raff/pygor/runtime"


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expr:
    """Base for all expression fragments. Abstract."""


@dataclass
class Ident(Expr):
    """Bare identifier, already renamed.

    | Python | Go    |
    |--------|-------|
    | x      | x     |
    | str    | string|
    """

    name: str


@dataclass
class Qual(Expr):
    """Package-qualified reference: pkg.Name

    The package name is the last element of path. References into RUNTIME
    render without a qualifier.
    """

    path: str
    name: str


@dataclass
class Selector(Expr):
    """Field or method selection: obj.name"""

    obj: Expr
    name: str


@dataclass
class IntLit(Expr):
    value: int


@dataclass
class FloatLit(Expr):
    value: float


@dataclass
class ComplexLit(Expr):
    """Complex literal, rendered as complex(real, imag)."""

    value: complex


@dataclass
class StringLit(Expr):
    value: str


@dataclass
class BoolLit(Expr):
    value: bool


@dataclass
class NilLit(Expr):
    pass


@dataclass
class Unary(Expr):
    """Prefix operator: op operand

    Invariants:
    - op is one of: !, +, -, *, &, <-
    """

    op: str
    operand: Expr


@dataclass
class Binary(Expr):
    """Infix operator: left op right

    The renderer adds parentheses from Go operator precedence; the tree
    shape is authoritative.
    """

    op: str
    left: Expr
    right: Expr


@dataclass
class Paren(Expr):
    """Explicit parentheses the renderer must keep."""

    expr: Expr


@dataclass
class Call(Expr):
    func: Expr
    args: list[Expr] = field(default_factory=list)


@dataclass
class Index(Expr):
    obj: Expr
    index: Expr


@dataclass
class SliceExpr(Expr):
    """Two-bound slice: obj[low:high]. Missing bounds are None."""

    obj: Expr
    low: Expr | None = None
    high: Expr | None = None


@dataclass
class KeyValue(Expr):
    """key: value element inside a Composite."""

    key: Expr
    value: Expr


@dataclass
class Composite(Expr):
    """Composite literal: Type{elts...}"""

    typ: Expr
    elts: list[Expr] = field(default_factory=list)


@dataclass
class TypeAssert(Expr):
    """Type assertion: expr.(typ). typ Ident("type") gives a type switch guard."""

    expr: Expr
    typ: Expr


@dataclass
class ChanType(Expr):
    elem: Expr


@dataclass
class SliceType(Expr):
    elem: Expr


@dataclass
class Pointer(Expr):
    """Pointer type: *elem"""

    elem: Expr


@dataclass
class Commented(Expr):
    """Expression carrying an inline /* text */ annotation.

    before=True renders `/*text*/ expr`, otherwise `expr /*text*/`.
    """

    expr: Expr
    text: str
    before: bool = False


@dataclass
class FuncLit(Expr):
    """Anonymous function. Wrap in Call(func=...) for an immediate invocation."""

    params: list[Param] = field(default_factory=list)
    results: list[Param] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)


@dataclass
class StmtExpr(Expr):
    """Statement produced in expression position by a special form.

    Only valid as the expression of an ExprStmt, where it renders as the
    wrapped statement. Anywhere else the renderer rejects it.
    """

    stmt: Stmt


# ============================================================
# DECLARATION PARTS
# ============================================================


@dataclass
class Param:
    """Function parameter or result.

    - name "" renders the type alone (unnamed result)
    - rest=True marks a variadic Python parameter: `name /*...*/ typ`
    - default renders as a trailing `/*=value*/` annotation
    """

    name: str
    typ: Expr
    rest: bool = False
    default: Expr | None = None


@dataclass
class FieldDecl:
    """Struct field. value is the Python class-level initializer, kept as a comment."""

    names: list[str]
    typ: Expr
    value: Expr | None = None


@dataclass
class Case:
    """Switch branch. Empty exprs means `default:`."""

    exprs: list[Expr]
    body: list[Stmt] = field(default_factory=list)


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class Stmt:
    """Base for all statement fragments. Abstract."""


@dataclass
class Comment(Stmt):
    """Line comment. Multi-line text renders one // line per line."""

    text: str


@dataclass
class ExprStmt(Stmt):
    expr: Expr


@dataclass
class Assign(Stmt):
    """Assignment: targets op values

    Invariants:
    - op is "=", ":=" or an operator-equals form ("+=", "<<=", ...)
    """

    targets: list[Expr]
    values: list[Expr]
    op: str = "="


@dataclass
class VarDecl(Stmt):
    """Variable declaration: var names [typ] [= values]

    typ is a declared Go type. hint is a coarse type guessed from the value's
    shape, rendered as a trailing comment for the reader.
    """

    names: list[Expr]
    values: list[Expr] = field(default_factory=list)
    typ: Expr | None = None
    hint: Expr | None = None


@dataclass
class Return(Stmt):
    values: list[Expr] = field(default_factory=list)
    comment: str | None = None


@dataclass
class If(Stmt):
    """if [init;] cond { body } else { orelse }

    An orelse holding a single If renders as an else-if chain.
    """

    cond: Expr
    body: list[Stmt] = field(default_factory=list)
    orelse: list[Stmt] = field(default_factory=list)
    init: Stmt | None = None


@dataclass
class ForClassic(Stmt):
    """for init; cond; post { body }"""

    init: Stmt
    cond: Expr
    post: Stmt
    body: list[Stmt] = field(default_factory=list)


@dataclass
class ForRange(Stmt):
    """for key, value := range iterable { body }. None targets render as _."""

    key: Expr | None
    value: Expr | None
    iterable: Expr
    body: list[Stmt] = field(default_factory=list)


@dataclass
class While(Stmt):
    """for cond { body }. cond None is the unconditional loop."""

    cond: Expr | None
    body: list[Stmt] = field(default_factory=list)


@dataclass
class Switch(Stmt):
    tag: Expr
    cases: list[Case] = field(default_factory=list)


@dataclass
class Block(Stmt):
    """Bare braced block."""

    body: list[Stmt] = field(default_factory=list)


@dataclass
class Break(Stmt):
    pass


@dataclass
class Continue(Stmt):
    pass


@dataclass
class GoStmt(Stmt):
    """go call"""

    call: Expr


@dataclass
class Send(Stmt):
    """chan <- value"""

    chan: Expr
    value: Expr


@dataclass
class FuncDecl(Stmt):
    """Package-level function or method.

    | recv   | Go                                     |
    |--------|----------------------------------------|
    | None   | func name(params) results { ... }      |
    | Param  | func (r *T) name(params) results { ... } |
    """

    name: str
    params: list[Param] = field(default_factory=list)
    results: list[Param] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)
    recv: Param | None = None


@dataclass
class TypeDecl(Stmt):
    """type name struct { doc; fields }"""

    name: str
    fields: list[FieldDecl] = field(default_factory=list)
    doc: list[str] = field(default_factory=list)


# ============================================================
# FILE
# ============================================================


@dataclass
class File:
    """One translated source file: the value handed to the renderer."""

    package: str
    body: list[Stmt] = field(default_factory=list)


# Runtime names used across the frontend.
ANY = Qual(RUNTIME, "Any")
LIST = Qual(RUNTIME, "List")
TUPLE = Qual(RUNTIME, "Tuple")
DICT = Qual(RUNTIME, "Dict")
