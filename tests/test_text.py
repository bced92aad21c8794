import pytest

from cutsheet.text import contains_total, fold, has_ascii_letter, is_blank, split_cells, split_lines


@pytest.mark.parametrize(
    "value, expected",
    [
        ("TÓTAL", "total"),
        ("Línea", "linea"),
        ("Ñandú", "nandu"),
        ("abc", "abc"),
        ("", ""),
    ],
)
def test_fold(value, expected):
    assert fold(value) == expected


def test_contains_total():
    assert contains_total("Subtotal")
    assert contains_total("  TÒTAL  ")
    assert not contains_total("Tota l")
    assert not contains_total("")


def test_has_ascii_letter():
    assert has_ascii_letter("3a")
    assert not has_ascii_letter("123")
    assert not has_ascii_letter("ñ")


def test_is_blank():
    assert is_blank("")
    assert is_blank(" \t ")
    assert not is_blank(" ; ")


def test_split_lines_keeps_empty_lines():
    assert split_lines("a\r\n\nb\n") == ["a", "", "b", ""]


def test_split_lines_lone_cr_is_not_a_break():
    assert split_lines("a\rb") == ["a\rb"]


def test_split_cells_trims():
    assert split_cells(" a ; b;;c ", ";") == ["a", "b", "", "c"]


def test_split_cells_keeps_inner_bom():
    # str.strip() does not treat U+FEFF as whitespace
    assert split_cells("\ufeffa;b ", ";") == ["\ufeffa", "b"]
