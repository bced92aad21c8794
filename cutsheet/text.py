from __future__ import annotations

import re
import unicodedata

from .rules import TOTAL_MARKER

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_ASCII_LETTER = re.compile("[a-zA-Z]")
_LINE_BREAK = re.compile(r"\r\n|\n")


def fold(value: str) -> str:
    """Lowercase, decompose (NFD) and drop combining accents: 'TÓTAL' -> 'total'."""
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", value.lower()))


def contains_total(value: str) -> bool:
    return TOTAL_MARKER in fold(value)


def has_ascii_letter(value: str) -> bool:
    # Header sniffing only looks at ASCII letters; "Ñú" alone does not qualify.
    return bool(_ASCII_LETTER.search(value))


def is_blank(line: str) -> bool:
    return not line.strip()


def split_lines(text: str) -> list[str]:
    """Split on CRLF or LF, keeping empty lines. A lone CR is not a terminator."""
    return _LINE_BREAK.split(text)


def split_cells(line: str, delimiter: str) -> list[str]:
    return [cell.strip() for cell in line.split(delimiter)]
