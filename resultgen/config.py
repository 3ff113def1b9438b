"""
Central configuration for the Result Generator.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_FOLDER = PROJECT_ROOT / "data"

# --- Output Files ---
DEFAULT_OUTPUT_CSV = "results.csv"
DEFAULT_JSON_NAME = "results.json"
DEFAULT_EXCEL_NAME = "result.xlsx"
EXCEL_SHEET_NAME = "Student Results"

# --- Marks & Grading ---
MIN_MARK = 0
MAX_MARK = 100
PASS_MARK = 40  # Every subject must reach this mark to pass

# Average-based grade bands, checked top-down. Only evaluated on passed records.
GRADE_BANDS = (
    (90, "A+"),
    (80, "A"),
    (70, "B+"),
    (60, "B"),
    (50, "C"),
    (40, "D"),
)
FAIL_GRADE = "F"

# --- Tabular Format ---
ID_COLUMN = "ID"
NAME_COLUMN = "Name"
DERIVED_COLUMNS = ("Total", "Average", "Grade", "Status", "Rank")
STATUS_PASS = "PASS"
STATUS_FAIL = "FAIL"

# --- Worker Pool ---
MIN_WORKERS = 2  # Floor for the default pool size

# --- Input Validation ---
MAX_INPUT_SIZE = 5_000_000  # Maximum input text size in bytes (~5MB)
MAX_SUBJECTS = 1000
MAX_STUDENTS = 100_000
