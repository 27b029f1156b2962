"""Identifier renaming.

Python names that collide with Go keywords, Go builtin types or the names
pygor itself emits are mapped to disambiguated spellings. The table is
built once at import time and never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Go keywords that are legal Python identifiers
GO_KEYWORDS: frozenset[str] = frozenset(
    {
        "case",
        "chan",
        "const",
        "default",
        "defer",
        "fallthrough",
        "func",
        "go",
        "goto",
        "interface",
        "map",
        "package",
        "range",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)

# Suffix appended to names that would shadow something in the output
SUFFIX = "Π"


def _build_renames() -> Mapping[str, str]:
    renames: dict[str, str] = {
        # Python builtin types to their Go spelling
        "str": "string",
        "float": "float64",
        "complex": "complex128",
        # Python containers to runtime containers
        "dict": "Dict",
        "list": "List",
        "tuple": "Tuple",
    }
    # Names the runtime or the output already uses, generated locals included
    for name in ("Any", "Dict", "List", "Tuple", "fmt", "lc", "mm", "c", "_t", "err", "ok"):
        renames[name] = name + SUFFIX
    for name in GO_KEYWORDS:
        renames[name] = name + SUFFIX
    return MappingProxyType(renames)


@dataclass(frozen=True)
class RenameTable:
    """Static identifier-collision resolver.

    Read-only after construction; safe to share between files and threads.
    """

    renames: Mapping[str, str] = field(default_factory=_build_renames)

    def rename(self, name: str) -> str:
        """Return the Go spelling for a Python identifier."""
        return self.renames.get(name, name)

    def __contains__(self, name: object) -> bool:
        return name in self.renames


GO_RENAMES = RenameTable()
