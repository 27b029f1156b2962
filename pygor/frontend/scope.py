"""Lexical scope stack for translation.

One Scope per nested Go block. A child holds a link to its parent and folds
its state back into it on pop; the parent keeps no reference to the child.
"""

from __future__ import annotations

import logging
from typing import Literal

from .. import ir

logger = logging.getLogger(__name__)

ExitMode = Literal["not-a-function", "none", "return", "yield"]
"""How the enclosing function body terminates.

| Mode           | Meaning                                   |
|----------------|-------------------------------------------|
| not-a-function | scope is not inside a function body       |
| none           | function body, no return or yield seen    |
| return         | at least one return statement seen        |
| yield          | at least one yield / yield from seen      |

Modes only move forward (left to right in the table).
"""

_EXIT_RANK: dict[str, int] = {
    "not-a-function": 0,
    "none": 1,
    "return": 2,
    "yield": 3,
}


class Scope:
    """One lexical nesting level.

    Invariants:
    - a name is new iff it is absent here and in every ancestor
    - imports is the same dict object for every scope of one file
    - pending holds statements not yet taken by the enclosing construct;
      body holds everything ever added (the file body, for the root)
    """

    def __init__(
        self,
        imports: dict[str, str] | None = None,
        parent: Scope | None = None,
        verbose: bool = False,
    ) -> None:
        self.parent: Scope | None = parent
        self.level: int = parent.level + 1 if parent is not None else 0
        self.names: set[str] = set()
        self.imports: dict[str, str] = imports if imports is not None else {}
        self.pending: list[ir.Stmt] = []
        self.body: list[ir.Stmt] = []
        self.methods: list[ir.Stmt] = []
        self.exit_mode: ExitMode = (
            parent.exit_mode if parent is not None else "not-a-function"
        )
        self.main: bool = False
        self.verbose: bool = verbose

    def is_root(self) -> bool:
        return self.parent is None

    def push(self) -> Scope:
        """Open a child scope sharing this scope's import map."""
        child = Scope(self.imports, parent=self, verbose=self.verbose)
        if self.verbose:
            logger.debug("PUSH %d", child.level)
        return child

    def pop(self, promote_exit: bool = True) -> Scope:
        """Close this scope and return the parent.

        Buffered methods move to the parent; at the outermost level they are
        flushed after everything already in the body. The exit mode moves to
        the parent unless promote_exit is False (function and class bodies).
        """
        parent = self.parent
        if parent is None:
            raise ValueError("cannot pop the root scope")
        if promote_exit:
            parent.mark_exit(self.exit_mode)
        if self.methods:
            parent.methods.extend(self.methods)
            self.methods = []
        if parent.is_root() and parent.methods:
            parent.body.extend(parent.methods)
            parent.methods = []
        self.parent = None
        if self.verbose:
            logger.debug("POP %d", parent.level)
        return parent

    def add(self, stmt: ir.Stmt) -> None:
        self.pending.append(stmt)
        self.body.append(stmt)

    def take(self) -> list[ir.Stmt]:
        """Return the statements added since the last take."""
        taken, self.pending = self.pending, []
        return taken

    def is_declared(self, name: str) -> bool:
        scope: Scope | None = self
        while scope is not None:
            if name in scope.names:
                return True
            scope = scope.parent
        return False

    def declare(self, name: str) -> None:
        """Record name as declared in this scope (parameters, loop targets)."""
        self.names.add(name)

    def declare_or_assign(self, names: list[str]) -> list[bool]:
        """Declare each unseen name here. Returns, per name, whether it was new."""
        result: list[bool] = []
        for name in names:
            if self.is_declared(name):
                result.append(False)
            else:
                self.names.add(name)
                result.append(True)
        return result

    def enter_function(self) -> None:
        """Start a function body: no exit seen yet, whatever encloses it."""
        self.exit_mode = "none"

    def mark_exit(self, mode: ExitMode) -> None:
        """Advance the exit mode; never moves backwards."""
        if _EXIT_RANK[mode] > _EXIT_RANK[self.exit_mode]:
            self.exit_mode = mode
