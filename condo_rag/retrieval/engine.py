"""
Retrieval Engine

embed query -> request top_k neighbours -> filter -> stable sort by score
-> truncate to final_count.

Zero survivors return EmptyContext, never an empty list, so callers fall
back instead of generating from nothing. Provider failures surface as one
ProviderError with no partial results.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, List, Optional, Union

from ..observability.logging import log_empty_context, log_retrieval
from ..providers.base import EmbeddingProvider, ProviderError, VectorIndex, VectorMatch
from ..schemas.search import Citation, EmptyContext, SearchResult
from .filters import ResultFilter, RetrievalConfig

logger = logging.getLogger(__name__)


RetrievalOutcome = Union[List[SearchResult], EmptyContext]


def rank_matches(matches: List[VectorMatch]) -> List[VectorMatch]:
    """Sort by descending score; ties keep provider order."""
    return sorted(matches, key=lambda m: -m.score)


class RetrievalEngine:
    """Query-time retrieval over the vector index."""

    def __init__(
        self,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        config: Optional[RetrievalConfig] = None
    ):
        self.embedder = embedder
        self.index = index
        self.config = config or RetrievalConfig()
        self.result_filter = ResultFilter(self.config)
        self._executor: Optional[ThreadPoolExecutor] = None

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def retrieve(self, query: str, final_count: Optional[int] = None) -> RetrievalOutcome:
        """
        Retrieve ranked, filtered results.

        Args:
            query: User query text
            final_count: Maximum results to return (default from config)

        Returns:
            Results ordered by descending score, or EmptyContext

        Raises:
            ValueError: If the query is blank or final_count < 1
            ProviderError: If embedding or index query fails or times out
        """
        if not isinstance(query, str) or not query.strip():
            raise ValueError("query must be a non-empty string")

        if final_count is None:
            final_count = self.config.final_count
        if final_count < 1:
            raise ValueError(f"final_count must be >= 1, got {final_count}")

        top_k = self.config.candidates_for(final_count)
        start = time.perf_counter()

        query_text = query.strip()
        if self.config.query_suffix:
            query_text = f"{query_text} {self.config.query_suffix}"

        vector = self._call("embed", lambda: self.embedder.embed_query(query_text))
        matches = self._call("query", lambda: self.index.query(vector, top_k))

        kept, summary = self.result_filter.apply(list(matches))
        ranked = rank_matches(kept)[:final_count]
        duration_ms = (time.perf_counter() - start) * 1000

        if summary.rejected:
            logger.debug(f"Filtered {summary.rejected}/{summary.total} matches for query: {query[:50]}")

        if not ranked:
            log_empty_context(query, summary.total, summary.best_score)
            return EmptyContext(
                query=query,
                candidates_seen=summary.total,
                best_score=summary.best_score,
            )

        results = [
            SearchResult(
                text=match.metadata["text"],
                score=float(match.score),
                citation=Citation.from_metadata(match.metadata),
                chunk_id=match.id,
                metadata=dict(match.metadata),
            )
            for match in ranked
        ]

        log_retrieval(query, summary.total, [m.id for m in ranked], top_k, duration_ms)
        return results

    def _call(self, operation: str, fn: Callable[[], Any]) -> Any:
        """Run one provider call under the configured timeout."""
        timeout = self.config.timeout_seconds
        provider = type(self.embedder if operation == "embed" else self.index).__name__

        try:
            if timeout is None:
                return fn()
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="condo-rag-query")
            return self._executor.submit(fn).result(timeout=timeout)
        except FutureTimeoutError as e:
            raise ProviderError(f"timed out after {timeout}s", provider, operation) from e
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e), provider, operation) from e
