"""
Roster CSV Codec

This module turns raw delimited text into a validated Dataset and serializes
ranked results back to delimited text.

Input format (header required):
    ID,Name,Math,Science,English
    S1,John Doe,85,78,92
    S2,"Smith, Jane",90,88,84

Output format:
    ID,Name,Math,Science,English,Total,Average,Grade,Status,Rank

Quoted fields may contain commas, line breaks and doubled quotes (""). Bad or
out-of-range marks never abort a decode: they are coerced and reported as
RecoverableFieldWarning values.

Usage:
    from resultgen.ingestion.codec import decode, encode
    dataset = decode(text)
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Sequence

from resultgen.config import (
    DERIVED_COLUMNS,
    ID_COLUMN,
    MAX_MARK,
    MIN_MARK,
    NAME_COLUMN,
)
from resultgen.models import Dataset, Ranked, Record, RecoverableFieldWarning
from resultgen.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

# Optional sign followed by digits only ("1_000" and "85.5" are rejected)
MARK_RE = re.compile(r"^[+-]?\d+$")

_NEEDS_QUOTES = (",", '"', "\n", "\r")


class FormatError(ValueError):
    """Raised when the input cannot be decoded at all (empty input, bad header)."""
    pass


# --- Row Grammar ---
def _finish_cell(buffer: list[str], quoted: bool) -> str:
    value = "".join(buffer)
    # Unquoted cells are trimmed; quoted content is kept verbatim
    return value if quoted else value.strip()


def split_rows(text: str) -> Iterator[tuple[int, list[str]]]:
    """
    Split delimited text into rows of cells.

    A double quote toggles quoting; inside quotes, commas and line breaks are
    literal and "" stands for one quote character. Rows end at an unquoted
    \\n, \\r\\n or \\r.

    Args:
        text: Raw delimited text

    Yields:
        Tuples of (line_number, cells) where line_number is the 1-based line
        on which the row starts
    """
    cells: list[str] = []
    buffer: list[str] = []
    quoted = False
    in_quotes = False
    line = 1
    row_start = 1
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and text[i + 1] == '"':
                    buffer.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                if ch == "\n" or (ch == "\r" and not (i + 1 < n and text[i + 1] == "\n")):
                    line += 1
                buffer.append(ch)
        elif ch == '"':
            in_quotes = True
            quoted = True
        elif ch == ",":
            cells.append(_finish_cell(buffer, quoted))
            buffer = []
            quoted = False
        elif ch == "\n" or ch == "\r":
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            cells.append(_finish_cell(buffer, quoted))
            yield row_start, cells
            cells = []
            buffer = []
            quoted = False
            line += 1
            row_start = line
        else:
            buffer.append(ch)
        i += 1

    if cells or buffer or quoted:
        cells.append(_finish_cell(buffer, quoted))
        yield row_start, cells


def _is_blank(cells: Sequence[str]) -> bool:
    return len(cells) == 1 and cells[0] == ""


def join_row(cells: Iterable[object]) -> str:
    """Join cells into one delimited row, quoting only where required."""
    out = []
    for cell in cells:
        value = "" if cell is None else str(cell)
        if any(token in value for token in _NEEDS_QUOTES):
            value = '"' + value.replace('"', '""') + '"'
        out.append(value)
    return ",".join(out)


def format_average(average: float) -> str:
    """Two fixed decimals with a point separator, independent of locale."""
    return f"{average:.2f}"


# --- Header ---
def _parse_header(header: list[str]) -> tuple[str, ...]:
    """Validate the header row and return the subject schema."""
    if len(header) < 3:
        raise FormatError(
            f"Header must have at least {ID_COLUMN},{NAME_COLUMN} and one subject column, "
            f"found {len(header)} column(s)"
        )

    if header[0].strip().lower() != ID_COLUMN.lower() or header[1].strip().lower() != NAME_COLUMN.lower():
        raise FormatError(
            f"First two columns must be {ID_COLUMN},{NAME_COLUMN}, "
            f"found '{header[0]}','{header[1]}'"
        )

    subjects = [column.strip() for column in header[2:]]

    # A previously encoded result file carries the derived columns at the end
    derived = [column.lower() for column in DERIVED_COLUMNS]
    tail = [column.lower() for column in subjects[-len(derived):]]
    if len(subjects) > len(derived) and tail == derived:
        logger.info("Result-format header detected; ignoring derived columns")
        subjects = subjects[:-len(derived)]

    seen = set()
    duplicates = []
    for subject in subjects:
        if subject in seen:
            duplicates.append(subject)
        seen.add(subject)
    if duplicates:
        raise FormatError(f"Duplicate subject columns: {', '.join(duplicates)}")

    return tuple(subjects)


# --- Cells ---
def _parse_mark(
    raw: str,
    line: int,
    record_id: str,
    subject: str,
    warnings: list[RecoverableFieldWarning],
) -> int:
    value = raw.strip()
    if not value:
        return 0

    if not MARK_RE.match(value):
        warnings.append(RecoverableFieldWarning(
            line=line,
            record_id=record_id,
            column=subject,
            raw_value=raw,
            coerced_value=0,
            reason=f"Invalid mark '{value}' for record {record_id}, subject {subject}. Treating as 0.",
        ))
        return 0

    mark = int(value)
    if mark < MIN_MARK or mark > MAX_MARK:
        clamped = max(MIN_MARK, min(MAX_MARK, mark))
        warnings.append(RecoverableFieldWarning(
            line=line,
            record_id=record_id,
            column=subject,
            raw_value=raw,
            coerced_value=clamped,
            reason=(
                f"Out-of-range mark {mark} for record {record_id}, subject {subject}. "
                f"Clamping to {MIN_MARK}-{MAX_MARK}."
            ),
        ))
        return clamped

    return mark


# --- Public API ---
def decode_with_warnings(text: str) -> tuple[Dataset, list[RecoverableFieldWarning]]:
    """
    Parse roster text into a Dataset, collecting recoverable warnings.

    The first non-empty row is the header. Blank rows and rows with fewer than
    two cells are skipped. Missing marks default to 0, unparseable marks become
    0 and out-of-range marks are clamped, each with one warning. Rows with an
    empty identifier are skipped with a warning.

    Args:
        text: Raw delimited text

    Returns:
        Tuple of (dataset, warnings)

    Raises:
        FormatError: If the input is empty or the header is invalid
    """
    if text is None or not text.strip():
        raise FormatError("Input is empty")

    rows = split_rows(text)
    header = None
    for _, cells in rows:
        if not _is_blank(cells):
            header = cells
            break

    if header is None:
        raise FormatError("Input is empty")

    subjects = _parse_header(header)
    warnings: list[RecoverableFieldWarning] = []
    records = []

    for line, cells in rows:
        if _is_blank(cells):
            continue
        if len(cells) < 2:
            logger.debug(f"Skipping line {line}: expected at least 2 cells, found {len(cells)}")
            continue

        # Trimmed even when quoted, so encode output decodes back unchanged
        record_id = cells[0].strip()
        name = cells[1].strip()
        if not record_id:
            warnings.append(RecoverableFieldWarning(
                line=line,
                record_id="",
                column=ID_COLUMN,
                raw_value=record_id,
                coerced_value=None,
                reason=f"Missing {ID_COLUMN} for row '{name}'. Row skipped.",
            ))
            continue

        marks = {}
        for column, subject in enumerate(subjects, start=2):
            raw = cells[column] if column < len(cells) else ""
            marks[subject] = _parse_mark(raw, line, record_id, subject, warnings)

        records.append(Record(record_id=record_id, name=name, marks=marks))

    for warning in warnings:
        logger.warning(f"[WARN] {warning}")

    logger.info(f"Decoded {len(records)} records across {len(subjects)} subjects")
    return Dataset(subjects=subjects, records=tuple(records)), warnings


def decode(text: str) -> Dataset:
    """
    Parse roster text into a Dataset.

    Recoverable warnings are logged; use decode_with_warnings to receive them.

    Raises:
        FormatError: If the input is empty or the header is invalid
    """
    dataset, _ = decode_with_warnings(text)
    return dataset


def encode(ranked: Sequence[Ranked], subjects: Sequence[str]) -> str:
    """
    Serialize ranked results to delimited text in the order given.

    Args:
        ranked: Ranked entries to write
        subjects: Subject schema (defines mark column order)

    Returns:
        Header row plus one row per entry, each terminated by a newline
    """
    lines = [join_row([ID_COLUMN, NAME_COLUMN, *subjects, *DERIVED_COLUMNS])]

    for entry in ranked:
        record = entry.record
        lines.append(join_row([
            record.record_id,
            record.name,
            *(record.mark(subject) for subject in subjects),
            entry.total,
            format_average(entry.average),
            entry.grade,
            entry.status,
            entry.rank,
        ]))

    return "\n".join(lines) + "\n"
