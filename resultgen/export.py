"""
Result Export

Serializers for ranked results. These hold no scoring logic; they write what
the pipeline produced:
- CSV via the codec's encode
- JSON archive document (subjects, count, timestamp, per-record results)
- XLSX workbook via pandas + openpyxl

Usage:
    from resultgen.export import write_results_csv, save_json, save_excel
"""

from __future__ import annotations

import io
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from resultgen.config import (
    DEFAULT_EXCEL_NAME,
    DEFAULT_JSON_NAME,
    EXCEL_SHEET_NAME,
    OUTPUT_FOLDER,
)
from resultgen.ingestion.codec import encode
from resultgen.models import Ranked
from resultgen.report import to_dataframe
from resultgen.utils import atomic_write_bytes, atomic_write_text, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def write_results_csv(ranked: Sequence[Ranked], subjects: Sequence[str], path: Path) -> Path:
    """
    Write ranked results as CSV.

    Args:
        ranked: Entries in output order
        subjects: Subject schema
        path: Destination file

    Returns:
        Absolute path of the written file
    """
    path = Path(path)
    atomic_write_text(encode(ranked, subjects), path)
    logger.info(f"Wrote {len(ranked)} rows to {path}")
    return path.resolve()


def build_json_document(
    ranked: Sequence[Ranked],
    subjects: Sequence[str],
    saved_at: Optional[datetime] = None,
) -> dict:
    """Build the JSON archive structure for a result set."""
    saved_at = saved_at or datetime.now()
    results = []
    for entry in ranked:
        record = entry.record
        results.append({
            'id': record.record_id,
            'name': record.name,
            'marks': {subject: record.mark(subject) for subject in subjects},
            'total': entry.total,
            'average': round(entry.average, 2),
            'grade': entry.grade,
            'status': entry.status,
            'rank': entry.rank,
        })

    return {
        'subjects': list(subjects),
        'totalStudents': len(ranked),
        'savedAt': saved_at.strftime('%Y-%m-%d %H:%M:%S'),
        'results': results,
    }


def to_json(ranked: Sequence[Ranked], subjects: Sequence[str], saved_at: Optional[datetime] = None) -> str:
    """Serialize a result set to an indented JSON string."""
    return json.dumps(build_json_document(ranked, subjects, saved_at), indent=2, ensure_ascii=False)


def save_json(ranked: Sequence[Ranked], subjects: Sequence[str], path: Optional[Path] = None) -> Path:
    """
    Save results as a JSON document.

    Args:
        ranked: Entries in output order
        subjects: Subject schema
        path: Destination file (default: OUTPUT_FOLDER / DEFAULT_JSON_NAME)

    Returns:
        Absolute path of the written file
    """
    path = Path(path) if path is not None else OUTPUT_FOLDER / DEFAULT_JSON_NAME
    atomic_write_text(to_json(ranked, subjects), path)
    logger.info(f"Saved JSON results to {path}")
    return path.resolve()


def to_excel_bytes(ranked: Sequence[Ranked], subjects: Sequence[str]) -> bytes:
    """Render results as an XLSX workbook with auto-sized columns."""
    df = to_dataframe(ranked, subjects)
    buffer = io.BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=EXCEL_SHEET_NAME, index=False)
        sheet = writer.sheets[EXCEL_SHEET_NAME]
        for column_cells in sheet.columns:
            width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
            sheet.column_dimensions[column_cells[0].column_letter].width = width + 2

    return buffer.getvalue()


def save_excel(
    ranked: Sequence[Ranked],
    subjects: Sequence[str],
    file_name: Optional[str] = None,
    folder: Optional[Path] = None,
) -> Path:
    """
    Save results as an XLSX workbook.

    Args:
        ranked: Entries in output order
        subjects: Subject schema
        file_name: Workbook name; ".xlsx" is appended when missing
            (default: DEFAULT_EXCEL_NAME)
        folder: Target folder (default: OUTPUT_FOLDER)

    Returns:
        Absolute path of the written file
    """
    if file_name is None or not file_name.strip():
        file_name = DEFAULT_EXCEL_NAME
    file_name = file_name.strip()
    if not file_name.lower().endswith(".xlsx"):
        file_name += ".xlsx"

    path = (folder or OUTPUT_FOLDER) / file_name
    atomic_write_bytes(to_excel_bytes(ranked, subjects), path)
    logger.info(f"Saved Excel results to {path}")
    return path.resolve()
