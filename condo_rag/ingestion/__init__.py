"""Document cleaning, validation, sanitization and batched ingestion."""

from .cleaner import PageText, clean_page_text, extract_page_number, join_pages
from .pdf_loader import load_pdf_pages
from .pipeline import (
    BatchOutcome,
    IngestionPipeline,
    IngestionResult,
    PipelineConfig,
    build_record_metadata,
)
from .sanitizer import sanitize_metadata, sanitize_value
from .validator import ValidationError, validate_raw_text

__all__ = [
    "PageText",
    "clean_page_text",
    "extract_page_number",
    "join_pages",
    "load_pdf_pages",
    "BatchOutcome",
    "IngestionPipeline",
    "IngestionResult",
    "PipelineConfig",
    "build_record_metadata",
    "sanitize_metadata",
    "sanitize_value",
    "ValidationError",
    "validate_raw_text",
]
