"""
Scoring Engine

This module computes a Score for every record of a Dataset using a bounded
thread pool. Each record is scored by a pure function of
(record, subjects, pass threshold), so workers share nothing but the
read-only Dataset.

The pool is owned by a single compute_all call: it is created on entry and
shut down on every exit path. Results are returned in input order regardless
of completion order.

Usage:
    from resultgen.scoring.engine import compute_all
    scores = compute_all(dataset, pass_threshold=40, concurrency_limit=4)
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Callable, Optional, Sequence

from resultgen.config import FAIL_GRADE, GRADE_BANDS, MAX_MARK, MIN_MARK, PASS_MARK
from resultgen.models import Dataset, Record, Score
from resultgen.utils import default_worker_count, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

Scorer = Callable[[Record, Sequence[str], int], Score]


class ComputationError(RuntimeError):
    """Raised when any record fails to score; no partial results are returned."""
    pass


def determine_grade(average: float, passed: bool) -> str:
    """
    Map an average to a grade band.

    A record that did not pass always gets FAIL_GRADE. For a passed record the
    lowest reachable band is bounded by the pass threshold, since every mark
    (and therefore the average) is at least the threshold.
    """
    if not passed:
        return FAIL_GRADE
    for threshold, label in GRADE_BANDS:
        if average >= threshold:
            return label
    return FAIL_GRADE


def score_record(record: Record, subjects: Sequence[str], pass_threshold: int) -> Score:
    """
    Score a single record against the subject schema.

    Args:
        record: Record to score
        subjects: Subject schema; absent marks count as 0
        pass_threshold: Minimum mark required in every subject

    Returns:
        Score with total, average, pass flag and grade
    """
    total = 0
    passed = True
    for subject in subjects:
        mark = record.mark(subject)
        total += mark
        if mark < pass_threshold:
            passed = False

    average = total / len(subjects) if subjects else 0.0
    return Score(
        record=record,
        total=total,
        average=average,
        passed=passed,
        grade=determine_grade(average, passed),
    )


def _partition(count: int, parts: int) -> list[range]:
    """Split range(count) into at most `parts` contiguous, near-equal slices."""
    parts = max(1, min(parts, count))
    size, extra = divmod(count, parts)
    slices = []
    start = 0
    for i in range(parts):
        stop = start + size + (1 if i < extra else 0)
        slices.append(range(start, stop))
        start = stop
    return slices


def _score_slice(
    records: Sequence[Record],
    indices: range,
    subjects: Sequence[str],
    pass_threshold: int,
    scorer: Scorer,
) -> list[Score]:
    scores = []
    for index in indices:
        record = records[index]
        try:
            scores.append(scorer(record, subjects, pass_threshold))
        except Exception as e:
            raise ComputationError(
                f"Scoring failed for record '{record.record_id}' (row {index + 1}): {e}"
            ) from e
    return scores


def _validate_settings(pass_threshold: int, concurrency_limit: Optional[int]) -> int:
    if not MIN_MARK <= pass_threshold <= MAX_MARK:
        raise ValueError(
            f"Invalid pass threshold: {pass_threshold}. "
            f"Must be between {MIN_MARK} and {MAX_MARK}"
        )
    if concurrency_limit is None:
        return default_worker_count()
    if concurrency_limit < 1:
        raise ValueError(f"Invalid concurrency limit: {concurrency_limit}. Must be at least 1")
    return concurrency_limit


def compute_all(
    dataset: Dataset,
    pass_threshold: int = PASS_MARK,
    concurrency_limit: Optional[int] = None,
    scorer: Scorer = score_record,
) -> list[Score]:
    """
    Score every record of a dataset in parallel.

    Args:
        dataset: Dataset to score (read-only)
        pass_threshold: Minimum mark required in every subject
        concurrency_limit: Maximum worker threads (default: available processors, at least 2)
        scorer: Per-record scoring function

    Returns:
        List of Score objects in the same order as dataset.records

    Raises:
        ValueError: If pass_threshold or concurrency_limit is invalid
        ComputationError: If any record fails to score
    """
    workers = _validate_settings(pass_threshold, concurrency_limit)
    records = dataset.records
    subjects = dataset.subjects

    if not records:
        logger.info("No records to score")
        return []

    slices = _partition(len(records), workers)
    logger.info(
        f"Scoring {len(records)} records with {len(slices)} worker(s) "
        f"(limit {workers}, pass mark {pass_threshold})"
    )

    executor = ThreadPoolExecutor(max_workers=len(slices), thread_name_prefix="resultgen-score")
    try:
        futures: list[Future] = [
            executor.submit(_score_slice, records, indices, subjects, pass_threshold, scorer)
            for indices in slices
        ]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)

        for future in futures:
            if future in done and future.exception() is not None:
                error = future.exception()
                logger.error(f"Scoring aborted: {error}")
                if isinstance(error, ComputationError):
                    raise error
                raise ComputationError(f"Scoring worker failed: {error}") from error

        # Slices are contiguous, so concatenating them in submission order
        # restores input order
        scores: list[Score] = []
        for future in futures:
            scores.extend(future.result())
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    logger.info(f"Scored {len(scores)} records")
    return scores
