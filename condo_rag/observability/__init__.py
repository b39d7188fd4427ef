"""Structured logging helpers."""

from .logging import (
    StructuredLogger,
    configure_logging,
    log_batch_failure,
    log_empty_context,
    log_ingestion_summary,
    log_retrieval,
    log_segmentation_miss,
)

__all__ = [
    "StructuredLogger",
    "configure_logging",
    "log_batch_failure",
    "log_empty_context",
    "log_ingestion_summary",
    "log_retrieval",
    "log_segmentation_miss",
]
