"""
Concrete collaborator adapters.

The chromadb index is imported from `condo_rag.stores.chroma_store` directly
so that the in-memory index works without chromadb installed.
"""

from .embeddings import SentenceTransformerEmbedder
from .memory_store import InMemoryVectorIndex

__all__ = ["InMemoryVectorIndex", "SentenceTransformerEmbedder"]
