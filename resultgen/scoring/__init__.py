"""
Scoring & Ranking

Modules:
- engine: Concurrent per-record scoring
- ranking: Competition ranking with shared ranks for ties
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "compute_all":
        from resultgen.scoring.engine import compute_all
        return compute_all
    if name == "ComputationError":
        from resultgen.scoring.engine import ComputationError
        return ComputationError
    if name == "rank":
        from resultgen.scoring.ranking import rank
        return rank
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
