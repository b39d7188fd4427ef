"""
Retrieval Filters

Filters nearest-neighbour matches on:
- Score threshold (strict: a score equal to the threshold is rejected)
- Negative keywords (any hit rejects)
- Positive keywords (when configured, at least one hit is required)

NO LLMs used in this module.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..providers.base import VectorMatch


class FilterReason(str, Enum):
    """Reasons for filtering a match."""
    INVALID_SCORE = "invalid_score"
    MISSING_TEXT = "missing_text"
    BELOW_THRESHOLD = "below_threshold"
    NEGATIVE_KEYWORD = "negative_keyword"
    MISSING_POSITIVE_KEYWORD = "missing_positive_keyword"
    ACCEPTED = "accepted"


@dataclass
class RetrievalConfig:
    """
    Configuration for retrieval.

    Attributes:
        top_k: Nearest neighbours requested from the index
        final_count: Results returned after filtering
        min_score: Exclusive score threshold
        negative_keywords: Matches containing any of these are dropped
        positive_keywords: If non-empty, matches must contain one of these
        query_suffix: Text appended to the query before embedding
        timeout_seconds: Per-call timeout for embed and query (None disables)
        candidate_multiplier: Minimum top_k as a multiple of final_count
    """
    top_k: int = 15
    final_count: int = 5
    min_score: float = 0.3
    negative_keywords: List[str] = field(default_factory=list)
    positive_keywords: List[str] = field(default_factory=list)
    query_suffix: str = ""
    timeout_seconds: Optional[float] = 30.0
    candidate_multiplier: int = 3

    def __post_init__(self):
        if not 0.0 <= self.min_score <= 1.0:
            raise ValueError(f"min_score must be in [0, 1], got {self.min_score}")
        if self.top_k < 1 or self.final_count < 1:
            raise ValueError("top_k and final_count must be >= 1")
        if self.candidate_multiplier < 1:
            raise ValueError(f"candidate_multiplier must be >= 1, got {self.candidate_multiplier}")

    def candidates_for(self, final_count: int) -> int:
        """Neighbours to request so that top_k > final_count."""
        return max(self.top_k, final_count * self.candidate_multiplier, final_count + 1)


@dataclass
class FilterSummary:
    """Summary of filtering one candidate list."""
    total: int = 0
    accepted: int = 0
    reasons: List[Tuple[str, FilterReason]] = field(default_factory=list)
    best_score: Optional[float] = None

    @property
    def rejected(self) -> int:
        return self.total - self.accepted

    def count(self, reason: FilterReason) -> int:
        return sum(1 for _, r in self.reasons if r == reason)


def is_valid_score(score: Optional[float]) -> bool:
    return (
        isinstance(score, (int, float))
        and not isinstance(score, bool)
        and math.isfinite(score)
        and 0.0 <= score <= 1.0
    )


class ResultFilter:
    """Applies threshold and keyword rules to matches."""

    def __init__(self, config: Optional[RetrievalConfig] = None):
        self.config = config or RetrievalConfig()
        self._negative = [k.lower() for k in self.config.negative_keywords if k]
        self._positive = [k.lower() for k in self.config.positive_keywords if k]

    def passes_threshold(self, score: float) -> bool:
        return score > self.config.min_score

    def check(self, match: VectorMatch) -> FilterReason:
        """Return ACCEPTED or the first rule the match fails."""
        if not is_valid_score(match.score):
            return FilterReason.INVALID_SCORE

        text = match.metadata.get("text")
        if not isinstance(text, str) or not text.strip():
            return FilterReason.MISSING_TEXT

        if not self.passes_threshold(match.score):
            return FilterReason.BELOW_THRESHOLD

        lowered = text.lower()
        if any(k in lowered for k in self._negative):
            return FilterReason.NEGATIVE_KEYWORD

        if self._positive and not any(k in lowered for k in self._positive):
            return FilterReason.MISSING_POSITIVE_KEYWORD

        return FilterReason.ACCEPTED

    def apply(self, matches: List[VectorMatch]) -> Tuple[List[VectorMatch], FilterSummary]:
        """Filter matches, keeping provider order."""
        summary = FilterSummary(total=len(matches))
        kept = []
        for match in matches:
            if is_valid_score(match.score):
                if summary.best_score is None or match.score > summary.best_score:
                    summary.best_score = float(match.score)
            reason = self.check(match)
            summary.reasons.append((match.id, reason))
            if reason == FilterReason.ACCEPTED:
                kept.append(match)
        summary.accepted = len(kept)
        return kept, summary
