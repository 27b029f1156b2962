"""Frontend package - converts a Python AST to Go fragments."""

import ast

from .. import ir
from .context import (
    HardUnsupported,
    TranslateError,
    TranslateOptions,
    UnsupportedConstruct,
)
from .frontend import Frontend, translate
from .names import GO_RENAMES, RenameTable
from .scope import Scope


def compile(source: str, name: str, options: TranslateOptions | None = None) -> ir.File:
    """Frontend pipeline: source -> File. SyntaxError propagates from the parser."""
    tree = ast.parse(source, filename=name, mode="exec")
    return translate(tree, name, options)


__all__ = [
    "Frontend",
    "GO_RENAMES",
    "HardUnsupported",
    "RenameTable",
    "Scope",
    "TranslateError",
    "TranslateOptions",
    "UnsupportedConstruct",
    "compile",
    "translate",
]
