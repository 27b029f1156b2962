"""Go backend: renders pygor fragments as Go source text.

The renderer makes no translation decisions. It lays out the fragments it is
given, discovers imports from the package-qualified names they contain,
and adds the parentheses Go operator precedence requires.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass

from ..ir import (
    RUNTIME,
    Assign,
    Binary,
    Block,
    BoolLit,
    Break,
    Call,
    ChanType,
    Comment,
    Commented,
    ComplexLit,
    Composite,
    Continue,
    Expr,
    ExprStmt,
    FieldDecl,
    File,
    FloatLit,
    ForClassic,
    ForRange,
    FuncDecl,
    FuncLit,
    GoStmt,
    Ident,
    If,
    Index,
    IntLit,
    KeyValue,
    NilLit,
    Param,
    Paren,
    Pointer,
    Qual,
    Return,
    Selector,
    Send,
    SliceExpr,
    SliceType,
    Stmt,
    StmtExpr,
    StringLit,
    Switch,
    TypeAssert,
    TypeDecl,
    Unary,
    VarDecl,
    While,
)
from .util import Emitter, comment_text, escape_string, format_float

HEADER = "// generated by pygor"

# Go operator precedence (higher number = tighter binding).
# From go.dev/ref/spec#Operator_precedence
# Note: Go groups bitwise ops with arithmetic, not with comparisons like C.
_PRECEDENCE: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "+": 4,
    "-": 4,
    "|": 4,
    "^": 4,
    "*": 5,
    "/": 5,
    "%": 5,
    "<<": 5,
    ">>": 5,
    "&": 5,
}


def _prec(op: str) -> int:
    return _PRECEDENCE.get(op, 6)


def _is_comparison(op: str) -> bool:
    return op in ("==", "!=", "<", "<=", ">", ">=")


class RenderError(Exception):
    """A fragment that cannot be rendered where it was placed."""

    def __init__(self, msg: str) -> None:
        self.msg: str = msg
        super().__init__(msg)


def package_name(path: str) -> str:
    """Package identifier for an import path: "path/filepath" -> "filepath"."""
    return path.rsplit("/", 1)[-1]


def fragment_walk(node: object) -> list[object]:
    """Walk fragments like ast.walk(), returns list of all fragment nodes."""
    result: list[object] = []
    stack: list[object] = [node]
    while stack:
        current = stack.pop()
        result.append(current)
        for f in fields(current):
            value = getattr(current, f.name)
            if is_dataclass(value):
                stack.append(value)
            elif isinstance(value, list):
                stack.extend(item for item in value if is_dataclass(item))
    return result


def collect_imports(node: object) -> list[str]:
    """Import paths referenced by Qual fragments, sorted; the runtime goes last."""
    paths = {n.path for n in fragment_walk(node) if isinstance(n, Qual)}
    result = sorted(p for p in paths if p != RUNTIME)
    if RUNTIME in paths:
        result.append(RUNTIME)
    return result


class GoRenderer(Emitter):
    """Render pygor fragments as Go source."""

    def __init__(self) -> None:
        super().__init__("\t")

    # ============================================================
    # FILE
    # ============================================================

    def render(self, file: File) -> str:
        """Render a whole file: header, package, imports, declarations."""
        parts = [self.render_header(file)]
        for stmt in file.body:
            parts.append(self.render_stmt(stmt))
        return "\n\n".join(parts) + "\n"

    def render_header(self, file: File) -> str:
        lines = [HEADER, "package " + self._ident(file.package)]
        imports = collect_imports(file)
        if imports:
            lines.append("")
            lines.append("import (")
            for path in imports:
                if path == RUNTIME:
                    if len(imports) > 1:
                        lines.append("")
                    lines.append('\t. "' + path + '"')
                else:
                    lines.append('\t"' + path + '"')
            lines.append(")")
        return "\n".join(lines)

    def render_stmt(self, stmt: Stmt) -> str:
        """Render one top-level statement. Raises RenderError."""
        self.lines = []
        self.indent = 0
        self._emit_stmt(stmt)
        return self.output()

    # ============================================================
    # OUTPUT HELPERS
    # ============================================================

    def _line(self, text: str) -> None:
        """Emit a line with current indentation.

        Continuation lines of multi-line text (function literals) already
        carry their own indentation.
        """
        self.line(text)

    def _body(self, body: list[Stmt]) -> None:
        self.indent += 1
        for stmt in body:
            self._emit_stmt(stmt)
        self.indent -= 1

    def _ident(self, name: str) -> str:
        if name != "_" and not name.isidentifier():
            raise RenderError("invalid identifier " + repr(name))
        return name

    # ============================================================
    # STATEMENTS
    # ============================================================

    def _emit_stmt(self, stmt: Stmt) -> None:
        """Emit a statement."""
        if isinstance(stmt, Comment):
            self._emit_stmt_Comment(stmt)
        elif isinstance(stmt, ExprStmt):
            self._emit_stmt_ExprStmt(stmt)
        elif isinstance(stmt, (Assign, VarDecl, GoStmt, Send)):
            self._line(self._simple_stmt(stmt))
        elif isinstance(stmt, Return):
            self._emit_stmt_Return(stmt)
        elif isinstance(stmt, If):
            self._emit_stmt_If(stmt, "")
        elif isinstance(stmt, ForClassic):
            self._emit_stmt_ForClassic(stmt)
        elif isinstance(stmt, ForRange):
            self._emit_stmt_ForRange(stmt)
        elif isinstance(stmt, While):
            self._emit_stmt_While(stmt)
        elif isinstance(stmt, Switch):
            self._emit_stmt_Switch(stmt)
        elif isinstance(stmt, Block):
            self._line("{")
            self._body(stmt.body)
            self._line("}")
        elif isinstance(stmt, Break):
            self._line("break")
        elif isinstance(stmt, Continue):
            self._line("continue")
        elif isinstance(stmt, FuncDecl):
            self._emit_stmt_FuncDecl(stmt)
        elif isinstance(stmt, TypeDecl):
            self._emit_stmt_TypeDecl(stmt)
        else:
            raise RenderError("cannot render statement " + type(stmt).__name__)

    def _emit_stmt_Comment(self, stmt: Comment) -> None:
        for line in stmt.text.split("\n"):
            self._line(("// " + line).rstrip())

    def _emit_stmt_ExprStmt(self, stmt: ExprStmt) -> None:
        if isinstance(stmt.expr, StmtExpr):
            self._emit_stmt(stmt.expr.stmt)
        else:
            self._line(self._emit_expr(stmt.expr))

    def _simple_stmt(self, stmt: Stmt) -> str:
        """Single-line statement text, also used in for and if headers."""
        if isinstance(stmt, Assign):
            targets = ", ".join(self._emit_expr(t) for t in stmt.targets)
            if stmt.op == "+=" and stmt.values == [IntLit(1)]:
                return targets + "++"
            if stmt.op == "-=" and stmt.values == [IntLit(1)]:
                return targets + "--"
            values = ", ".join(self._emit_expr(v) for v in stmt.values)
            return targets + " " + stmt.op + " " + values
        if isinstance(stmt, VarDecl):
            text = "var " + ", ".join(self._emit_expr(n) for n in stmt.names)
            if stmt.typ is not None:
                text += " " + self._emit_expr(stmt.typ)
            if stmt.values:
                text += " = " + ", ".join(self._emit_expr(v) for v in stmt.values)
            if stmt.typ is None and stmt.hint is not None:
                text += " // " + self._emit_expr(stmt.hint)
            return text
        if isinstance(stmt, GoStmt):
            return "go " + self._emit_expr(stmt.call)
        if isinstance(stmt, Send):
            return self._emit_expr(stmt.chan) + " <- " + self._emit_expr(stmt.value)
        raise RenderError("cannot render " + type(stmt).__name__ + " in a header")

    def _emit_stmt_Return(self, stmt: Return) -> None:
        text = "return"
        if stmt.values:
            text += " " + ", ".join(self._emit_expr(v) for v in stmt.values)
        if stmt.comment:
            text += " // " + stmt.comment
        self._line(text)

    def _header_expr(self, expr: Expr) -> str:
        """Expression between a keyword and `{`: composite literals need parens."""
        text = self._emit_expr(expr)
        if isinstance(expr, Composite):
            return "(" + text + ")"
        return text

    def _emit_stmt_If(self, stmt: If, lead: str) -> None:
        head = "if "
        if stmt.init is not None:
            head += self._simple_stmt(stmt.init) + "; "
        self._line(lead + head + self._header_expr(stmt.cond) + " {")
        self._body(stmt.body)
        if not stmt.orelse:
            self._line("}")
        elif len(stmt.orelse) == 1 and isinstance(stmt.orelse[0], If):
            self._emit_stmt_If(stmt.orelse[0], "} else ")
        else:
            self._line("} else {")
            self._body(stmt.orelse)
            self._line("}")

    def _emit_stmt_ForClassic(self, stmt: ForClassic) -> None:
        init = self._simple_stmt(stmt.init)
        cond = self._emit_expr(stmt.cond)
        post = self._simple_stmt(stmt.post)
        self._line("for " + init + "; " + cond + "; " + post + " {")
        self._body(stmt.body)
        self._line("}")

    def _emit_stmt_ForRange(self, stmt: ForRange) -> None:
        iterable = self._header_expr(stmt.iterable)
        if stmt.key is None and stmt.value is None:
            self._line("for range " + iterable + " {")
        elif stmt.value is None:
            self._line("for " + self._emit_expr(stmt.key) + " := range " + iterable + " {")
        else:
            key = self._emit_expr(stmt.key) if stmt.key is not None else "_"
            value = self._emit_expr(stmt.value)
            self._line("for " + key + ", " + value + " := range " + iterable + " {")
        self._body(stmt.body)
        self._line("}")

    def _emit_stmt_While(self, stmt: While) -> None:
        if stmt.cond is None:
            self._line("for {")
        else:
            self._line("for " + self._header_expr(stmt.cond) + " {")
        self._body(stmt.body)
        self._line("}")

    def _emit_stmt_Switch(self, stmt: Switch) -> None:
        self._line("switch " + self._header_expr(stmt.tag) + " {")
        for case in stmt.cases:
            if case.exprs:
                self._line("case " + ", ".join(self._emit_expr(e) for e in case.exprs) + ":")
            else:
                self._line("default:")
            self._body(case.body)
        self._line("}")

    def _emit_stmt_FuncDecl(self, stmt: FuncDecl) -> None:
        head = "func "
        if stmt.recv is not None:
            head += "(" + self._param(stmt.recv) + ") "
        head += self._ident(stmt.name) + self._signature(stmt.params, stmt.results)
        self._line(head + " {")
        self._body(stmt.body)
        self._line("}")

    def _emit_stmt_TypeDecl(self, stmt: TypeDecl) -> None:
        name = self._ident(stmt.name)
        if not stmt.fields and not stmt.doc:
            self._line("type " + name + " struct{}")
            return
        self._line("type " + name + " struct {")
        self.indent += 1
        for doc in stmt.doc:
            self._line(("// " + doc).rstrip())
        for field in stmt.fields:
            self._line(self._field(field))
        self.indent -= 1
        self._line("}")

    def _field(self, field: FieldDecl) -> str:
        text = ", ".join(self._ident(n) for n in field.names) + " " + self._emit_expr(field.typ)
        if field.value is not None:
            text += " // = " + " ".join(self._emit_expr(field.value).split())
        return text

    # ============================================================
    # SIGNATURES
    # ============================================================

    def _param(self, param: Param) -> str:
        typ = self._emit_expr(param.typ)
        if not param.name:
            return typ
        text = self._ident(param.name)
        if param.rest:
            text += " /*...*/"
        text += " " + typ
        if param.default is not None:
            text += " /*=" + comment_text(self._emit_expr(param.default)) + "*/"
        return text

    def _signature(self, params: list[Param], results: list[Param]) -> str:
        text = "(" + ", ".join(self._param(p) for p in params) + ")"
        if len(results) == 1 and not results[0].name:
            text += " " + self._param(results[0])
        elif results:
            text += " (" + ", ".join(self._param(r) for r in results) + ")"
        return text

    # ============================================================
    # EXPRESSIONS
    # ============================================================

    def _maybe_paren(self, expr: Expr, parent_op: str, is_left: bool) -> str:
        """Emit expr, adding parens if its precedence requires it."""
        s = self._emit_expr(expr)
        if isinstance(expr, Binary):
            # Go doesn't allow chained comparisons
            if _is_comparison(parent_op) and _is_comparison(expr.op):
                return "(" + s + ")"
            child_prec = _prec(expr.op)
            parent_prec = _prec(parent_op)
            if not is_left:
                if child_prec <= parent_prec:
                    return "(" + s + ")"
            else:
                if child_prec < parent_prec:
                    return "(" + s + ")"
        return s

    def _operand(self, expr: Expr) -> str:
        """Emit expr as the operand of a selector, index or unary operator."""
        s = self._emit_expr(expr)
        if isinstance(expr, (Binary, Unary)):
            return "(" + s + ")"
        return s

    def _emit_expr(self, expr: Expr) -> str:
        """Emit an expression and return Go code string."""
        if isinstance(expr, Ident):
            return self._ident(expr.name)
        if isinstance(expr, Qual):
            if expr.path == RUNTIME:
                return self._ident(expr.name)
            return package_name(expr.path) + "." + self._ident(expr.name)
        if isinstance(expr, Selector):
            return self._operand(expr.obj) + "." + self._ident(expr.name)
        if isinstance(expr, IntLit):
            return str(expr.value)
        if isinstance(expr, FloatLit):
            return format_float(expr.value)
        if isinstance(expr, ComplexLit):
            return (
                "complex(" + format_float(expr.value.real) + ", "
                + format_float(expr.value.imag) + ")"
            )
        if isinstance(expr, StringLit):
            return '"' + escape_string(expr.value) + '"'
        if isinstance(expr, BoolLit):
            return "true" if expr.value else "false"
        if isinstance(expr, NilLit):
            return "nil"
        if isinstance(expr, Unary):
            return expr.op + self._operand(expr.operand)
        if isinstance(expr, Binary):
            left = self._maybe_paren(expr.left, expr.op, is_left=True)
            right = self._maybe_paren(expr.right, expr.op, is_left=False)
            return left + " " + expr.op + " " + right
        if isinstance(expr, Paren):
            return "(" + self._emit_expr(expr.expr) + ")"
        if isinstance(expr, Call):
            args = ", ".join(self._emit_expr(a) for a in expr.args)
            return self._operand(expr.func) + "(" + args + ")"
        if isinstance(expr, Index):
            return self._operand(expr.obj) + "[" + self._emit_expr(expr.index) + "]"
        if isinstance(expr, SliceExpr):
            low = self._emit_expr(expr.low) if expr.low is not None else ""
            high = self._emit_expr(expr.high) if expr.high is not None else ""
            return self._operand(expr.obj) + "[" + low + ":" + high + "]"
        if isinstance(expr, KeyValue):
            return self._emit_expr(expr.key) + ": " + self._emit_expr(expr.value)
        if isinstance(expr, Composite):
            elts = ", ".join(self._emit_expr(e) for e in expr.elts)
            return self._emit_expr(expr.typ) + "{" + elts + "}"
        if isinstance(expr, TypeAssert):
            return self._operand(expr.expr) + ".(" + self._emit_expr(expr.typ) + ")"
        if isinstance(expr, ChanType):
            return "chan " + self._emit_expr(expr.elem)
        if isinstance(expr, SliceType):
            return "[]" + self._emit_expr(expr.elem)
        if isinstance(expr, Pointer):
            return "*" + self._emit_expr(expr.elem)
        if isinstance(expr, Commented):
            text = "/*" + comment_text(expr.text) + "*/"
            if expr.before:
                return text + " " + self._emit_expr(expr.expr)
            return self._emit_expr(expr.expr) + " " + text
        if isinstance(expr, FuncLit):
            return self._emit_func_lit(expr)
        if isinstance(expr, StmtExpr):
            raise RenderError(type(expr.stmt).__name__ + " used as an expression")
        raise RenderError("cannot render expression " + type(expr).__name__)

    def _emit_func_lit(self, expr: FuncLit) -> str:
        """Function literal; body lines carry absolute indentation."""
        sub = GoRenderer()
        sub.indent = self.indent + 1
        for stmt in expr.body:
            sub._emit_stmt(stmt)
        head = "func" + self._signature(expr.params, expr.results) + " {"
        return "\n".join([head] + sub.lines + ["\t" * self.indent + "}"])


def render(file: File) -> str:
    """Render a File to Go source text."""
    return GoRenderer().render(file)
