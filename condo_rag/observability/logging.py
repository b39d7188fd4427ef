"""
Observability - Structured Logging

Structured JSON events for segmentation misses, ingestion batches and
retrieval outcomes.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


class StructuredLogger:
    """Structured logger for RAG operations."""

    @staticmethod
    def log_structured(
        event_type: str,
        data: Dict[str, Any],
        level: int = logging.INFO
    ) -> None:
        """Log structured event.

        Args:
            event_type: Type of event (ingestion_batch, retrieval, etc.)
            data: Event data dictionary
            level: Logging level
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            **data
        }

        logger.log(level, json.dumps(log_entry, default=str))


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_segmentation_miss(level: str, reason: str, excerpt: str, offset: int) -> None:
    """Log a skipped unit with no structural match."""
    StructuredLogger.log_structured(
        "segmentation_miss",
        {"level": level, "reason": reason, "excerpt": excerpt[:80], "offset": offset},
        logging.WARNING,
    )


def log_batch_failure(
    batch_index: int,
    first_id: str,
    last_id: str,
    size: int,
    error: str
) -> None:
    """Log a failed ingestion batch with its chunk-ID range.

    Args:
        batch_index: Zero-based batch position
        first_id: ID of the first chunk in the batch
        last_id: ID of the last chunk in the batch
        size: Number of chunks in the batch
        error: Error description
    """
    data = {
        "batch_index": batch_index,
        "first_id": first_id,
        "last_id": last_id,
        "size": size,
        "error": error,
    }
    StructuredLogger.log_structured("ingestion_batch_failed", data, logging.ERROR)
    logger.error(f"Batch {batch_index} [{first_id} .. {last_id}] failed: {error}")


def log_ingestion_summary(
    total: int,
    succeeded: int,
    failed: int,
    batches: int,
    duration_ms: Optional[float] = None
) -> None:
    """Log aggregate ingestion counts."""
    data = {
        "total": total,
        "succeeded": succeeded,
        "failed": failed,
        "batches": batches,
    }

    if duration_ms is not None:
        data["duration_ms"] = duration_ms

    level = logging.WARNING if failed else logging.INFO
    StructuredLogger.log_structured("ingestion_summary", data, level)
    logger.info(f"Ingestion complete: {succeeded}/{total} succeeded, {failed} failed")


def log_retrieval(
    query: str,
    candidate_count: int,
    returned_ids: List[str],
    top_k: int,
    duration_ms: Optional[float] = None
) -> None:
    """Log retrieval operation.

    Args:
        query: User query
        candidate_count: Number of matches returned by the index
        returned_ids: IDs of results that survived filtering
        top_k: Number of neighbours requested
        duration_ms: Retrieval duration in milliseconds
    """
    data = {
        "query": query,
        "candidate_count": candidate_count,
        "returned_ids": returned_ids,
        "returned_count": len(returned_ids),
        "top_k": top_k,
    }

    if duration_ms is not None:
        data["duration_ms"] = duration_ms

    StructuredLogger.log_structured("retrieval", data, logging.INFO)
    logger.info(f"Retrieved {len(returned_ids)} chunks for query: {query[:50]}...")


def log_empty_context(query: str, candidate_count: int, best_score: Optional[float]) -> None:
    """Log a retrieval that produced no usable context."""
    StructuredLogger.log_structured(
        "empty_context",
        {"query": query, "candidate_count": candidate_count, "best_score": best_score},
        logging.WARNING,
    )
