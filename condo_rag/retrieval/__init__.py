"""Query-time retrieval."""

from .engine import RetrievalEngine, RetrievalOutcome, rank_matches
from .filters import FilterReason, FilterSummary, ResultFilter, RetrievalConfig, is_valid_score

__all__ = [
    "RetrievalEngine",
    "RetrievalOutcome",
    "rank_matches",
    "FilterReason",
    "FilterSummary",
    "ResultFilter",
    "RetrievalConfig",
    "is_valid_score",
]
