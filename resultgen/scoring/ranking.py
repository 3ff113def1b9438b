"""
Ranking Policy

Orders scores by total (descending) and assigns competition ranks: equal
totals share a rank and the next distinct total takes its 1-based position,
so totals [90, 90, 80] rank as [1, 1, 3].

Equal totals keep their input order (stable sort). Average and identifier
are never used as secondary keys.
"""

from __future__ import annotations

from typing import Iterable

from resultgen.models import Ranked, Score


def rank(scores: Iterable[Score]) -> list[Ranked]:
    """
    Rank scores by total, ties sharing a rank.

    Args:
        scores: Scores in input order

    Returns:
        New list of Ranked entries in ranked order
    """
    # sorted() is stable, and stays stable with reverse=True
    ordered = sorted(scores, key=lambda s: s.total, reverse=True)

    ranked = []
    current_rank = 0
    previous_total = None
    for position, score in enumerate(ordered, start=1):
        if score.total != previous_total:
            current_rank = position
            previous_total = score.total
        ranked.append(Ranked(score=score, rank=current_rank))

    return ranked
