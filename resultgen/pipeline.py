"""
Result Pipeline

Single entry point for turning roster text into ranked results:
    decode -> compute_all -> rank -> summarize

Used by the CLI, the interactive mode and the dashboard. Front-ends hand in
raw text plus a pass threshold / concurrency configuration and only render
what comes back.

Usage:
    from resultgen.pipeline import run_pipeline
    result = run_pipeline(text, pass_threshold=40, concurrency_limit=4)
"""

from __future__ import annotations

from typing import Optional

from resultgen.config import MAX_INPUT_SIZE, PASS_MARK
from resultgen.ingestion.codec import FormatError, decode_with_warnings
from resultgen.models import Dataset
from resultgen.report import summarize
from resultgen.scoring.engine import ComputationError, compute_all
from resultgen.scoring.ranking import rank
from resultgen.utils import default_worker_count, setup_logging, validate_input_size

# --- Module Logger ---
logger = setup_logging(__name__)


def score_dataset(
    dataset: Dataset,
    pass_threshold: int = PASS_MARK,
    concurrency_limit: Optional[int] = None,
) -> dict:
    """
    Score, rank and summarize an already decoded dataset.

    Args:
        dataset: Dataset to process
        pass_threshold: Minimum mark required in every subject
        concurrency_limit: Worker thread limit (default: available processors)

    Returns:
        Dictionary with:
            - dataset: the input Dataset
            - subjects: subject schema
            - ranked: list of Ranked entries in ranked order
            - summary: Summary of the ranked set
            - pass_threshold: threshold used
            - workers: worker limit used

    Raises:
        ComputationError: If scoring fails
        ValueError: If the configuration is invalid
    """
    workers = concurrency_limit if concurrency_limit is not None else default_worker_count()

    try:
        scores = compute_all(dataset, pass_threshold, workers)
    except ComputationError:
        logger.error("Stage 'scoring' failed")
        raise

    ranked = rank(scores)
    summary = summarize(ranked)
    logger.info(f"Ranked {len(ranked)} records: {summary.passed} passed, {summary.failed} failed")

    return {
        'dataset': dataset,
        'subjects': dataset.subjects,
        'ranked': ranked,
        'summary': summary,
        'pass_threshold': pass_threshold,
        'workers': workers,
    }


def run_pipeline(
    text: str,
    pass_threshold: int = PASS_MARK,
    concurrency_limit: Optional[int] = None,
    max_input_size: int = MAX_INPUT_SIZE,
) -> dict:
    """
    Decode roster text and produce ranked results.

    Args:
        text: Raw roster CSV text
        pass_threshold: Minimum mark required in every subject
        concurrency_limit: Worker thread limit (default: available processors)
        max_input_size: Maximum accepted input size in bytes

    Returns:
        The score_dataset dictionary plus:
            - warnings: list of RecoverableFieldWarning from decoding

    Raises:
        FormatError: If the input cannot be decoded
        ComputationError: If scoring fails
        ValueError: If the input is too large or the configuration is invalid
    """
    validate_input_size(text, max_input_size)

    logger.info("Decoding roster text...")
    try:
        dataset, warnings = decode_with_warnings(text)
    except FormatError:
        logger.error("Stage 'decode' failed")
        raise

    if warnings:
        logger.info(f"  {len(warnings)} recoverable warning(s) during decode")

    result = score_dataset(dataset, pass_threshold, concurrency_limit)
    result['warnings'] = warnings
    return result
