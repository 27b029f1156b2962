"""Command-line entry point: translate Python files to Go on stdout."""

from __future__ import annotations

import ast
import logging
import os
import sys

from .backend.go import GoRenderer, RenderError
from .frontend.context import TranslateError, TranslateOptions
from .frontend.frontend import Frontend

logger = logging.getLogger(__name__)

USAGE: str = """\
pygor [OPTIONS] FILE...

Options:
  -d LEVEL      Parser trace level 0-4 (1: file names, 2+: parsed tree)
  --panic       Fail on unknown constructs instead of commenting them
  --verbose     Trace scopes, statements and expressions on stderr
  --lines       Add source line-number comments
  --ignore      Comment out failing statements and keep going
  --help        Show this help message
"""


def read_source(input_file: str) -> tuple[str, int]:
    """Read source from file. Returns (source, exit_code) where exit_code 0 means OK."""
    try:
        with open(input_file, "rb") as f:
            raw = f.read()
    except OSError:
        print("error: cannot open '" + input_file + "'", file=sys.stderr)
        return ("", 1)
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("error: invalid utf-8 in '" + input_file + "'", file=sys.stderr)
        return ("", 1)
    return (source, 0)


def package_for(path: str) -> str:
    """Go package name from a file name: "my-tool.py" -> "my_tool"."""
    base = os.path.basename(path)
    if base.endswith(".py"):
        base = base[:-3]
    name = "".join(c if c.isalnum() or c == "_" else "_" for c in base)
    if not name or name[0].isdigit():
        name = "_" + name
    return name


def translate_file(
    path: str, options: TranslateOptions, debug_level: int
) -> int:
    """Translate one file to stdout. Returns an exit status."""
    source, err = read_source(path)
    if err != 0:
        return err
    if debug_level > 0:
        logger.info("%s -----------------", path)
    try:
        tree = ast.parse(source, filename=path, mode="exec")
    except SyntaxError as e:
        print(
            "error: " + path + ":" + str(e.lineno) + ": " + str(e.msg),
            file=sys.stderr,
        )
        return 1
    if debug_level > 1:
        logger.info("%s", ast.dump(tree, indent=2))
    try:
        file = Frontend(options).translate(tree, package_for(path))
    except TranslateError as e:
        print("error: " + path + ": " + str(e), file=sys.stderr)
        return 1
    renderer = GoRenderer()
    try:
        print(renderer.render_header(file))
    except RenderError as e:
        print("error: " + path + ": " + e.msg, file=sys.stderr)
        return 1
    for stmt in file.body:
        try:
            text = renderer.render_stmt(stmt)
        except RenderError as e:
            if options.ignore_errors:
                print("ERROR:", e.msg)
                return 0
            print("error: " + path + ": " + e.msg, file=sys.stderr)
            return 1
        print()
        print(text)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, translate each file. Returns the process exit status."""
    args = sys.argv[1:] if argv is None else argv
    debug_level = 0
    panic_unknown = False
    verbose = False
    line_numbers = False
    ignore_errors = False
    paths: list[str] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("-h", "--help"):
            print(USAGE, end="")
            return 0
        elif arg == "-d":
            if i + 1 >= len(args):
                print("error: -d requires a level", file=sys.stderr)
                return 2
            i += 1
            try:
                debug_level = int(args[i])
            except ValueError:
                print("error: invalid debug level '" + args[i] + "'", file=sys.stderr)
                return 2
            if debug_level < 0 or debug_level > 4:
                print("error: debug level must be 0-4", file=sys.stderr)
                return 2
        elif arg == "--panic":
            panic_unknown = True
        elif arg == "--verbose":
            verbose = True
        elif arg == "--lines":
            line_numbers = True
        elif arg == "--ignore":
            ignore_errors = True
        elif arg.startswith("-") and arg != "-":
            print("error: unknown option '" + arg + "'", file=sys.stderr)
            print(USAGE, end="", file=sys.stderr)
            return 2
        else:
            paths.append(arg)
        i += 1
    if not paths:
        print("error: need files to translate", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return 2
    level = logging.DEBUG if verbose else logging.INFO if debug_level > 0 else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s: %(message)s", stream=sys.stderr)
    options = TranslateOptions(
        panic_unknown=panic_unknown,
        verbose=verbose,
        line_numbers=line_numbers,
        ignore_errors=ignore_errors,
    )
    for path in paths:
        status = translate_file(path, options, debug_level)
        if status != 0:
            return status
    return 0


if __name__ == "__main__":
    sys.exit(main())
