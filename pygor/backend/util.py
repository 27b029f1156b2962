"""Shared utilities for the Go emitter."""

from __future__ import annotations


def escape_string(value: str) -> str:
    """Escape a string for use in a Go interpreted string literal (without quotes)."""
    out: list[str] = []
    for c in value:
        if c == "\\":
            out.append("\\\\")
        elif c == '"':
            out.append('\\"')
        elif c == "\n":
            out.append("\\n")
        elif c == "\t":
            out.append("\\t")
        elif c == "\r":
            out.append("\\r")
        elif c == "\f":
            out.append("\\f")
        elif c == "\v":
            out.append("\\v")
        elif ord(c) < 0x20 or ord(c) == 0x7F:
            out.append("\\x%02x" % ord(c))
        else:
            out.append(c)
    return "".join(out)


def format_float(value: float) -> str:
    """Go float literal; always carries a decimal point or exponent."""
    text = repr(value)
    if "." not in text and "e" not in text:
        text += ".0"
    return text


def comment_text(text: str) -> str:
    """Single-line body for an inline /* */ comment."""
    return " ".join(text.split("\n")).replace("*/", "* /")


class Emitter:
    """Base class for code emitters with indentation tracking."""

    def __init__(self, indent_str: str = "\t") -> None:
        self.indent: int = 0
        self.lines: list[str] = []
        self._indent_str = indent_str

    def line(self, text: str = "") -> None:
        """Emit a line with current indentation."""
        if text:
            self.lines.append(self._indent_str * self.indent + text)
        else:
            self.lines.append("")

    def output(self) -> str:
        """Return the accumulated output as a string."""
        return "\n".join(self.lines)
