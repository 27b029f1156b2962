"""Tests for the command-line driver."""

from pathlib import Path

import pytest

from pygor.pygor import USAGE, main, package_for


@pytest.fixture
def source_file(tmp_path: Path):
    def write(text: str, name: str = "demo.py") -> str:
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return write


def test_help(capsys):
    assert main(["--help"]) == 0
    assert capsys.readouterr().out == USAGE


def test_no_files(capsys):
    assert main([]) == 2
    assert "error: need files to translate" in capsys.readouterr().err


def test_unknown_option(capsys):
    assert main(["--bogus", "x.py"]) == 2
    assert "error: unknown option '--bogus'" in capsys.readouterr().err


@pytest.mark.parametrize("level", ["x", "9"])
def test_bad_debug_level(capsys, level: str):
    assert main(["-d", level, "x.py"]) == 2
    assert capsys.readouterr().err.startswith("error:")


def test_missing_file(capsys, tmp_path: Path):
    missing = str(tmp_path / "nope.py")
    assert main([missing]) == 1
    assert "error: cannot open" in capsys.readouterr().err


def test_translates_to_stdout(capsys, source_file):
    path = source_file("print('hi')\n", "my-tool.py")
    assert main([path]) == 0
    out = capsys.readouterr().out
    assert out.startswith("// generated by pygor\npackage my_tool\n")
    assert '\nfmt.Println("hi")\n' in out


def test_main_guard_package(capsys, source_file):
    path = source_file('if __name__ == "__main__":\n    pass\n')
    assert main([path]) == 0
    assert "package main\n" in capsys.readouterr().out


def test_syntax_error(capsys, source_file):
    path = source_file("def (:\n")
    assert main([path]) == 1
    assert "error: " + path + ":1:" in capsys.readouterr().err


def test_hard_failure_stops(capsys, source_file):
    path = source_file("y = x[::2]\n")
    assert main([path]) == 1
    assert "slice step not supported" in capsys.readouterr().err


def test_ignore_continues(capsys, source_file):
    path = source_file("y = x[::2]\nz = 1\n")
    assert main(["--ignore", path]) == 0
    out = capsys.readouterr().out
    assert "// ERROR: slice step not supported at line 1, col 4" in out
    assert "var z = 1 // int" in out


def test_panic_flag(capsys, source_file):
    path = source_file("del x\n")
    assert main(["--panic", path]) == 1
    assert "unknown statement DELETE" in capsys.readouterr().err


def test_lines_flag(capsys, source_file):
    path = source_file("x = 1\n")
    assert main(["--lines", path]) == 0
    assert "// line 1" in capsys.readouterr().out


def test_files_are_translated_in_order(capsys, source_file):
    first = source_file("a = 1\n", "first.py")
    second = source_file("b = 2\n", "second.py")
    assert main([first, second]) == 0
    out = capsys.readouterr().out
    assert out.index("package first") < out.index("package second")


@pytest.mark.parametrize(
    "path,expected",
    [
        ("tool.py", "tool"),
        ("dir/my-tool.py", "my_tool"),
        ("2fast.py", "_2fast"),
    ],
)
def test_package_for(path: str, expected: str):
    assert package_for(path) == expected


def test_render_error_stops(capsys, source_file):
    path = source_file("y = xs.append(1)\n")
    assert main([path]) == 1
    assert "Assign used as an expression" in capsys.readouterr().err


def test_render_error_ignored_moves_to_next_file(capsys, source_file):
    bad = source_file("y = xs.append(1)\nz = 2\n", "bad.py")
    good = source_file("w = 3\n", "good.py")
    assert main(["--ignore", bad, good]) == 0
    out = capsys.readouterr().out
    assert "ERROR: Assign used as an expression" in out
    assert "var z = 2" not in out
    assert "var w = 3 // int" in out
