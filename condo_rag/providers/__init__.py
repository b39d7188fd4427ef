"""Collaborator interfaces."""

from .base import (
    EmbeddingProvider,
    GenerationClient,
    ProviderError,
    VectorIndex,
    VectorMatch,
    VectorRecord,
)

__all__ = [
    "EmbeddingProvider",
    "GenerationClient",
    "ProviderError",
    "VectorIndex",
    "VectorMatch",
    "VectorRecord",
]
