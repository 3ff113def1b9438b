"""
Interactive Roster Entry

Console prompts for building a dataset by hand when no input file is given.
Every prompt re-asks until it gets a valid answer, so the resulting Dataset
needs no further validation.

All helpers take an `input_fn` so they can be driven from tests.
"""

from __future__ import annotations

from typing import Callable

from resultgen.config import MAX_MARK, MAX_STUDENTS, MAX_SUBJECTS, MIN_MARK
from resultgen.models import Dataset, Record
from resultgen.utils import default_worker_count

InputFn = Callable[[str], str]


def prompt_non_empty(prompt: str, input_fn: InputFn = input) -> str:
    while True:
        value = input_fn(prompt).strip()
        if value:
            return value
        print("  Value cannot be empty. Try again.")


def prompt_optional(prompt: str, default: str, input_fn: InputFn = input) -> str:
    value = input_fn(prompt).strip()
    return value or default


def prompt_int(prompt: str, minimum: int, maximum: int, input_fn: InputFn = input, default: int | None = None) -> int:
    """
    Ask for an integer in [minimum, maximum].

    An empty answer returns `default` when one is given.
    """
    while True:
        value = input_fn(prompt).strip()
        if not value and default is not None:
            return default
        try:
            number = int(value)
        except ValueError:
            print("  Invalid number. Try again.")
            continue
        if minimum <= number <= maximum:
            return number
        print(f"  Enter a value between {minimum} and {maximum}.")


def prompt_yes_no(prompt: str, default_yes: bool = True, input_fn: InputFn = input) -> bool:
    while True:
        value = input_fn(prompt).strip().lower()
        if not value:
            return default_yes
        if value in ("y", "yes"):
            return True
        if value in ("n", "no"):
            return False
        print("  Please answer with y/yes or n/no.")


def prompt_threads(input_fn: InputFn = input) -> int:
    default = default_worker_count()
    return prompt_int(
        f"Enter number of worker threads (>0) [default {default}]: ",
        1,
        10_000,
        input_fn=input_fn,
        default=default,
    )


def prompt_dataset(input_fn: InputFn = input) -> Dataset:
    """
    Ask for subjects, then each student's ID, name and marks.

    Returns:
        Dataset built from the answers, in entry order
    """
    subject_count = prompt_int("Enter number of subjects (>0): ", 1, MAX_SUBJECTS, input_fn=input_fn)
    subjects: list[str] = []
    while len(subjects) < subject_count:
        subject = prompt_non_empty(f"  Subject {len(subjects) + 1} name: ", input_fn=input_fn)
        if subject in subjects:
            print(f"  Subject '{subject}' already entered. Try again.")
            continue
        subjects.append(subject)

    student_count = prompt_int("Enter number of students (>0): ", 1, MAX_STUDENTS, input_fn=input_fn)
    records = []
    for i in range(student_count):
        print(f"Student {i + 1}:")
        record_id = prompt_non_empty("  ID: ", input_fn=input_fn)
        name = prompt_non_empty("  Name: ", input_fn=input_fn)
        marks = {
            subject: prompt_int(f"    {subject} mark ({MIN_MARK}-{MAX_MARK}): ", MIN_MARK, MAX_MARK, input_fn=input_fn)
            for subject in subjects
        }
        records.append(Record(record_id=record_id, name=name, marks=marks))

    return Dataset(subjects=tuple(subjects), records=tuple(records))
