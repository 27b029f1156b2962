"""Frontend: Python AST -> Go fragments.

Wires the translator modules together through a TranslationDispatch and
runs them over one module's top-level statements.
"""

from __future__ import annotations

import ast
import logging

from .. import ir
from . import calls
from . import comprehensions
from . import declarations
from . import expressions
from . import statements
from .ast_compat import source_text
from .context import (
    TranslateError,
    TranslateOptions,
    TranslationDispatch,
    UnsupportedConstruct,
    position,
)
from .names import GO_RENAMES, RenameTable
from .scope import Scope

logger = logging.getLogger(__name__)


class Frontend:
    """Translates one module AST per call to translate()."""

    def __init__(
        self, options: TranslateOptions | None = None, renames: RenameTable = GO_RENAMES
    ) -> None:
        self.options: TranslateOptions = options if options is not None else TranslateOptions()
        self.renames: RenameTable = renames
        self.dispatch: TranslationDispatch = self._make_dispatch()

    def _make_dispatch(self) -> TranslationDispatch:
        d: TranslationDispatch
        d = TranslationDispatch(
            options=self.options,
            renames=self.renames,
            expr=lambda node, scope: expressions.translate_expr(node, scope, d),
            stmts=lambda nodes, scope: statements.translate_stmts(nodes, scope, d),
            call=lambda node, scope: calls.translate_call(node, scope, d),
            comprehension=lambda node, scope: comprehensions.translate_comprehension(
                node, scope, d
            ),
            loop=lambda target, iterable, scope: statements.translate_loop(
                target, iterable, scope, d
            ),
            function=lambda node, scope, class_name: declarations.translate_function(
                node, scope, d, class_name
            ),
            klass=lambda node, scope: declarations.translate_class(node, scope, d),
            type_expr=lambda node, scope: expressions.translate_type(node, scope, d),
            unknown_expr=self._unknown_expr,
            unknown_stmt=self._unknown_stmt,
        )
        return d

    def _unknown_message(self, prefix: str, kind: str, node: ast.AST) -> str:
        lineno, col = position(node)
        # First source line only: compound statements span several
        text = source_text(node).split("\n")[0]
        return (
            prefix + kind + " " + text
            + " at line " + str(lineno) + ", col " + str(col)
        )

    def _unknown_expr(self, kind: str, node: ast.AST) -> ir.Expr:
        if self.options.panic_unknown:
            lineno, col = position(node)
            raise UnsupportedConstruct("unknown expression " + kind, lineno, col)
        return ir.Commented(ir.NilLit(), self._unknown_message("UNKNOWN-EXPR: ", kind, node))

    def _unknown_stmt(self, kind: str, node: ast.AST) -> ir.Stmt:
        if self.options.panic_unknown:
            lineno, col = position(node)
            raise UnsupportedConstruct("unknown statement " + kind, lineno, col)
        return ir.Comment(self._unknown_message("UNKNOWN-STMT: ", kind, node))

    def translate(self, tree: ast.Module, name: str) -> ir.File:
        """Translate a parsed module. name is the package name unless a main guard is found.

        With ignore_errors, a top-level statement that fails is replaced by an
        ERROR comment and translation goes on with the next one.
        """
        root = Scope(verbose=self.options.verbose)
        for node in tree.body:
            mark = len(root.body)
            try:
                statements.translate_stmts([node], root, self.dispatch)
            except TranslateError as e:
                if not self.options.ignore_errors:
                    raise
                logger.debug("recovered: %s", e)
                del root.body[mark:]
                root.methods = []
                root.take()
                root.add(ir.Comment("ERROR: " + str(e)))
        root.take()
        package = "main" if root.main else name
        return ir.File(package, list(root.body))


def translate(
    tree: ast.Module, name: str, options: TranslateOptions | None = None
) -> ir.File:
    """Translate a parsed module with a fresh Frontend."""
    return Frontend(options).translate(tree, name)
