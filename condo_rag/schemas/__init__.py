"""Schemas for chunks and search results."""

from .chunk import (
    Amendment,
    ChunkMetadata,
    ChunkType,
    Definition,
    DocumentChunk,
    ProvisionType,
    RelatedSection,
)
from .search import Citation, EmptyContext, SearchResult

__all__ = [
    "Amendment",
    "ChunkMetadata",
    "ChunkType",
    "Definition",
    "DocumentChunk",
    "ProvisionType",
    "RelatedSection",
    "Citation",
    "EmptyContext",
    "SearchResult",
]
