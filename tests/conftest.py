"""
Shared pytest fixtures for the result generator tests.

SAMPLE_CSV expectations (pass mark 40, five subjects):
    S1 John Doe    402  80.40  A   PASS  rank 3
    S2 Jane Smith  430  86.00  A   PASS  rank 1
    S3 Lee, Ann    322  64.40  F   FAIL  rank 4  (Math 35 < 40)
    S4 Ravi Kumar  430  86.00  A   PASS  rank 1  (ties S2, stays after it)
"""

from __future__ import annotations

import pytest

from resultgen.models import Dataset, Record, Score

SAMPLE_CSV = (
    "ID,Name,Math,Science,English,History,Geography\n"
    "S1,John Doe,85,78,92,66,81\n"
    "S2,Jane Smith,90,88,84,91,77\n"
    'S3,"Lee, Ann",35,70,65,80,72\n'
    "S4,Ravi Kumar,90,88,84,91,77\n"
)


def make_score(record_id: str, total: int, average: float | None = None, passed: bool = True) -> Score:
    """Build a Score directly, bypassing the engine."""
    return Score(
        record=Record(record_id=record_id, name=f"Student {record_id}", marks={}),
        total=total,
        average=float(total) if average is None else average,
        passed=passed,
        grade="A" if passed else "F",
    )


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def large_dataset() -> Dataset:
    """60 records with varied marks, including ties and failures."""
    subjects = ("Math", "Science", "English")
    records = []
    for i in range(60):
        marks = {
            "Math": (i * 7) % 101,
            "Science": (i * 13 + 5) % 101,
            "English": 100 - (i * 3) % 101,
        }
        records.append(Record(record_id=f"S{i:03d}", name=f"Student {i}", marks=marks))
    return Dataset(subjects=subjects, records=tuple(records))
