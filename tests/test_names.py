"""Tests for identifier renaming."""

import pytest

from pygor.frontend.names import GO_KEYWORDS, GO_RENAMES, SUFFIX, RenameTable


@pytest.mark.parametrize(
    "name,expected",
    [
        ("str", "string"),
        ("float", "float64"),
        ("complex", "complex128"),
        ("dict", "Dict"),
        ("list", "List"),
        ("tuple", "Tuple"),
        ("List", "ListΠ"),
        ("Any", "AnyΠ"),
        ("fmt", "fmtΠ"),
        ("type", "typeΠ"),
        ("range", "rangeΠ"),
        ("c", "cΠ"),
        ("lc", "lcΠ"),
        ("mm", "mmΠ"),
        ("_t", "_tΠ"),
        ("err", "errΠ"),
        ("ok", "okΠ"),
    ],
)
def test_mapped_names(name: str, expected: str):
    assert GO_RENAMES.rename(name) == expected


@pytest.mark.parametrize("name", ["x", "self", "print", "string", "Π"])
def test_unmapped_names_unchanged(name: str):
    assert name not in GO_RENAMES
    assert GO_RENAMES.rename(name) == name


def test_every_keyword_is_suffixed():
    for keyword in GO_KEYWORDS:
        assert GO_RENAMES.rename(keyword) == keyword + SUFFIX


def test_table_is_read_only():
    with pytest.raises(TypeError):
        GO_RENAMES.renames["x"] = "y"


def test_custom_table():
    table = RenameTable({"self": "s"})
    assert table.rename("self") == "s"
    assert table.rename("str") == "str"
