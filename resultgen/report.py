"""
Report Assembly

Combines ranked results into the representations consumed by the
presentation and persistence layers:
- render_table: fixed-column console table
- summarize / format_summary: pass/fail counts, topper and total statistics
- to_dataframe: pandas DataFrame with the output columns
- grade_distribution: record count per grade

Nothing here re-derives scores or ranks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from resultgen.config import (
    DERIVED_COLUMNS,
    FAIL_GRADE,
    GRADE_BANDS,
    ID_COLUMN,
    NAME_COLUMN,
)
from resultgen.ingestion.codec import format_average
from resultgen.models import Ranked


@dataclass(frozen=True)
class Summary:
    """Aggregate view of one ranked result set."""

    total_records: int
    passed: int
    failed: int
    top: Optional[Ranked] = None
    statistics: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "statistics", MappingProxyType(dict(self.statistics)))


def _row_values(entry: Ranked, subjects: Sequence[str]) -> list[str]:
    record = entry.record
    return [
        record.record_id,
        record.name,
        *(str(record.mark(subject)) for subject in subjects),
        str(entry.total),
        format_average(entry.average),
        entry.grade,
        entry.status,
        str(entry.rank),
    ]


def render_table(ranked: Sequence[Ranked], subjects: Sequence[str]) -> str:
    """
    Render ranked results as a fixed-width text table.

    Each column is as wide as its longest value (header included). Widths are
    for display only and never affect encoded output.

    Args:
        ranked: Entries in display order
        subjects: Subject schema

    Returns:
        Table text (header, separator, one line per entry)
    """
    if not ranked:
        return "No results to display."

    header = [ID_COLUMN, NAME_COLUMN, *subjects, *DERIVED_COLUMNS]
    rows = [_row_values(entry, subjects) for entry in ranked]
    widths = [
        max(len(header[i]), *(len(row[i]) for row in rows))
        for i in range(len(header))
    ]

    def fmt(cells):
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    header_line = fmt(header)
    lines = [header_line, "-" * len(header_line)]
    lines.extend(fmt(row) for row in rows)
    return "\n".join(lines)


def summarize(ranked: Sequence[Ranked]) -> Summary:
    """
    Compute pass/fail counts, the top record and total statistics.

    The top record is the one with the highest total, then the highest
    average. Further ties go to the first such entry in `ranked`; this is not
    a ranking guarantee.
    """
    passed = sum(1 for entry in ranked if entry.passed)
    failed = len(ranked) - passed

    if not ranked:
        return Summary(total_records=0, passed=0, failed=0)

    # max() keeps the first maximal element
    top = max(ranked, key=lambda entry: (entry.total, entry.average))

    totals = np.array([entry.total for entry in ranked], dtype=float)
    statistics = {
        'mean': round(float(np.mean(totals)), 2),
        'median': round(float(np.median(totals)), 2),
        'std': round(float(np.std(totals, ddof=1)), 2) if len(totals) > 1 else 0.0,
        'min': int(totals.min()),
        'max': int(totals.max()),
    }

    return Summary(
        total_records=len(ranked),
        passed=passed,
        failed=failed,
        top=top,
        statistics=statistics,
    )


def format_summary(summary: Summary, noun: str = "students") -> str:
    """Human-readable summary block for console output."""
    lines = [
        "Summary:",
        f"  Total {noun}: {summary.total_records}",
        f"  Passed: {summary.passed}",
        f"  Failed: {summary.failed}",
    ]
    if summary.top is not None:
        top = summary.top
        lines.append(
            f"  Topper: {top.record.name} ({top.record.record_id}) - "
            f"Total: {top.total}, Average: {format_average(top.average)}"
        )
    return "\n".join(lines)


def grade_distribution(ranked: Sequence[Ranked]) -> dict[str, int]:
    """Count entries per grade, best band first and the fail grade last."""
    counts = {label: 0 for _, label in GRADE_BANDS}
    counts[FAIL_GRADE] = 0
    for entry in ranked:
        counts[entry.grade] = counts.get(entry.grade, 0) + 1
    return counts


def to_dataframe(ranked: Sequence[Ranked], subjects: Sequence[str]) -> pd.DataFrame:
    """
    Build a DataFrame with the output columns, one row per entry in order.

    Average is kept numeric (rounded to 2 decimals) for spreadsheet export.
    """
    columns = [ID_COLUMN, NAME_COLUMN, *subjects, *DERIVED_COLUMNS]
    rows = []
    for entry in ranked:
        record = entry.record
        rows.append([
            record.record_id,
            record.name,
            *(record.mark(subject) for subject in subjects),
            entry.total,
            round(entry.average, 2),
            entry.grade,
            entry.status,
            entry.rank,
        ])
    return pd.DataFrame(rows, columns=columns)
