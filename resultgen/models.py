"""
Domain models for the Result Generator.

All models are frozen: a Dataset is built once by the codec and only read
afterwards, scoring produces new Score values, and ranking wraps each Score
in a new Ranked value instead of mutating it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from resultgen.config import STATUS_FAIL, STATUS_PASS


@dataclass(frozen=True)
class Record:
    """One roster entry: identifier, display name and subject -> mark."""

    record_id: str
    name: str
    marks: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "marks", MappingProxyType(dict(self.marks)))

    def mark(self, subject: str) -> int:
        """Mark for a subject; absent marks count as 0."""
        return self.marks.get(subject, 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return (
            self.record_id == other.record_id
            and self.name == other.name
            and dict(self.marks) == dict(other.marks)
        )

    def __hash__(self) -> int:
        return hash((self.record_id, self.name, tuple(sorted(self.marks.items()))))


@dataclass(frozen=True)
class Dataset:
    """Ordered subject schema plus records in input order."""

    subjects: tuple[str, ...]
    records: tuple[Record, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "subjects", tuple(self.subjects))
        object.__setattr__(self, "records", tuple(self.records))

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class Score:
    """Derived result for one Record."""

    record: Record
    total: int
    average: float
    passed: bool
    grade: str

    @property
    def status(self) -> str:
        return STATUS_PASS if self.passed else STATUS_FAIL


@dataclass(frozen=True)
class Ranked:
    """A Score with its position in the ranking. Ties share a rank."""

    score: Score
    rank: int

    @property
    def record(self) -> Record:
        return self.score.record

    @property
    def total(self) -> int:
        return self.score.total

    @property
    def average(self) -> float:
        return self.score.average

    @property
    def passed(self) -> bool:
        return self.score.passed

    @property
    def grade(self) -> str:
        return self.score.grade

    @property
    def status(self) -> str:
        return self.score.status


@dataclass(frozen=True)
class RecoverableFieldWarning:
    """
    A malformed or out-of-range cell that was coerced during decode.

    Attributes:
        line: 1-based line number where the row starts
        record_id: Identifier of the affected row (may be empty)
        column: Header name of the affected cell
        raw_value: Cell text as found in the input
        coerced_value: Value stored instead (None when the row was skipped)
        reason: Human-readable description
    """

    line: int
    record_id: str
    column: str
    raw_value: str
    coerced_value: Optional[int]
    reason: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.reason}"
