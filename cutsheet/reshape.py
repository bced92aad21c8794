"""
Cut sheet reshaping: wide (one column per operator) -> long (one row per operator).

Pipeline:
- delimiter detection (one global decision)
- header row detection (first row with a letter beyond the reserved columns)
- operator column inference
- row reshaping with date/line carry-forward across blank (merged) cells
- serialization to the fixed comma-separated output
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union

from .errors import HeaderNotFound, NoOperatorColumns
from .rules import (
    DATE_COLUMN,
    FALLBACK_DELIMITER,
    FIRST_OPERATOR_COLUMN,
    LINE_COLUMN,
    MIN_DATA_CELLS,
    MIN_HEADER_CELLS,
    OUTPUT_DELIMITER,
    OUTPUT_HEADER,
    OUTPUT_LINE_TERMINATOR,
    PREFERRED_DELIMITER,
    TOTAL_MARKER,
)
from .text import contains_total, has_ascii_letter, is_blank, split_cells, split_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderFound:
    index: int
    cells: Tuple[str, ...]


@dataclass(frozen=True)
class HeaderMissing:
    lines_scanned: int = 0


HeaderScan = Union[HeaderFound, HeaderMissing]


@dataclass(frozen=True)
class OperatorColumn:
    name: str
    index: int


@dataclass(frozen=True)
class OutputRecord:
    date: str
    line: str
    operator: str
    quantity: str

    def as_csv(self) -> str:
        # Cells are emitted verbatim, no quoting.
        return OUTPUT_DELIMITER.join((self.date, self.line, self.operator, self.quantity))


@dataclass
class RowStats:
    rows_seen: int = 0
    skipped_short: int = 0
    skipped_total: int = 0
    skipped_no_key: int = 0


@dataclass(frozen=True)
class ReshapeResult:
    delimiter: str
    header_index: int
    operators: Tuple[OperatorColumn, ...]
    records: Tuple[OutputRecord, ...]
    stats: RowStats = field(default_factory=RowStats)

    def to_csv(self) -> str:
        return serialize(self.records)


def detect_delimiter(raw_text: str) -> str:
    return PREFERRED_DELIMITER if PREFERRED_DELIMITER in raw_text else FALLBACK_DELIMITER


def find_header(lines: List[str], delimiter: str) -> HeaderScan:
    """
    Return the first line that looks like an operator header.

    A header has at least MIN_HEADER_CELLS cells and at least one cell from
    FIRST_OPERATOR_COLUMN onward containing an ASCII letter.
    """
    for i, line in enumerate(lines):
        if is_blank(line):
            continue

        cells = split_cells(line, delimiter)
        if len(cells) < MIN_HEADER_CELLS:
            continue

        if any(cell and has_ascii_letter(cell) for cell in cells[FIRST_OPERATOR_COLUMN:]):
            return HeaderFound(index=i, cells=tuple(cells))

    return HeaderMissing(lines_scanned=len(lines))


def infer_operators(header_cells: Iterable[str]) -> List[OperatorColumn]:
    operators: List[OperatorColumn] = []
    for index, cell in enumerate(header_cells):
        if index < FIRST_OPERATOR_COLUMN:
            continue
        name = cell.strip()
        if not name or TOTAL_MARKER in name.lower():
            continue
        operators.append(OperatorColumn(name=name, index=index))
    return operators


def reshape_rows(
    lines: List[str],
    start: int,
    delimiter: str,
    operators: List[OperatorColumn],
) -> Tuple[List[OutputRecord], RowStats]:
    """
    Emit one record per (data row, operator), rows outer and operators inner.

    Date and line carry forward independently from the last row that had them.
    """
    records: List[OutputRecord] = []
    stats = RowStats()
    last_date = ""
    last_line = ""

    for i in range(start, len(lines)):
        line = lines[i]
        if is_blank(line):
            continue

        stats.rows_seen += 1
        cells = split_cells(line, delimiter)
        if len(cells) < MIN_DATA_CELLS:
            stats.skipped_short += 1
            continue

        date_cell = cells[DATE_COLUMN]
        line_cell = cells[LINE_COLUMN]

        if contains_total(line_cell) or contains_total(date_cell):
            logger.debug("line %d: skipping total row (date=%r, line=%r)", i + 1, date_cell, line_cell)
            stats.skipped_total += 1
            continue

        current_date = date_cell or last_date
        if not current_date:
            stats.skipped_no_key += 1
            continue
        last_date = current_date

        current_line = line_cell or last_line
        if not current_line:
            stats.skipped_no_key += 1
            continue
        last_line = current_line

        for operator in operators:
            quantity = cells[operator.index] if operator.index < len(cells) else ""
            records.append(OutputRecord(current_date, current_line, operator.name, quantity))

    return records, stats


def serialize(records: Iterable[OutputRecord]) -> str:
    out = [OUTPUT_DELIMITER.join(OUTPUT_HEADER)]
    out.extend(record.as_csv() for record in records)
    return OUTPUT_LINE_TERMINATOR.join(out)


def reshape_table(raw_text: str) -> ReshapeResult:
    """
    Run the whole pipeline and keep the intermediate decisions.

    Raises HeaderNotFound or NoOperatorColumns; no partial output is produced.
    """
    delimiter = detect_delimiter(raw_text)
    lines = split_lines(raw_text)
    logger.debug("delimiter=%r lines=%d", delimiter, len(lines))

    scan = find_header(lines, delimiter)
    if isinstance(scan, HeaderMissing):
        raise HeaderNotFound(lines_scanned=scan.lines_scanned)

    operators = infer_operators(scan.cells)
    if not operators:
        raise NoOperatorColumns(scan.index, list(scan.cells))
    logger.debug(
        "header at line %d, operators=%s",
        scan.index + 1,
        [f"{op.name}@{op.index}" for op in operators],
    )

    records, stats = reshape_rows(lines, scan.index + 1, delimiter, operators)
    logger.info(
        "reshaped %d rows into %d records (%d operators; skipped short=%d total=%d no_key=%d)",
        stats.rows_seen,
        len(records),
        len(operators),
        stats.skipped_short,
        stats.skipped_total,
        stats.skipped_no_key,
    )

    return ReshapeResult(
        delimiter=delimiter,
        header_index=scan.index,
        operators=tuple(operators),
        records=tuple(records),
        stats=stats,
    )


def reshape(raw_text: str) -> str:
    return reshape_table(raw_text).to_csv()
