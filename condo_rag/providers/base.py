"""
Collaborator Interfaces

Abstract interfaces for the external services the pipeline depends on:
the embedding provider, the vector index and the generation model.
Concrete adapters are constructed explicitly and passed in.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


class ProviderError(Exception):
    """Raised when an embedding, vector-store or generation call fails"""

    def __init__(self, message: str, provider: Optional[str] = None, operation: Optional[str] = None):
        self.message = message
        self.provider = provider
        self.operation = operation
        where = "/".join(p for p in (provider, operation) if p)
        super().__init__(f"Provider call failed{f' ({where})' if where else ''}: {message}")


@dataclass
class VectorRecord:
    """One persisted record: id, embedding values and flat metadata."""
    id: str
    values: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class VectorMatch:
    """One nearest-neighbour match. `score` is None when the store gave none."""
    id: str
    score: Optional[float]
    metadata: Dict[str, Any] = field(default_factory=dict)


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers."""

    def initialize(self) -> None:
        """Acquire resources (load model, open connection)."""

    def close(self) -> None:
        """Release resources."""

    @abstractmethod
    def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed a batch of texts, one vector per text, in order."""
        pass

    def embed_query(self, text: str) -> List[float]:
        """Embed a single query text."""
        return self.embed_documents([text])[0]

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return embedding dimension."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dimension={self.dimension})"


class VectorIndex(ABC):
    """Abstract base class for vector index stores.

    upsert overwrites on id collision.
    """

    def initialize(self) -> None:
        """Open the connection and ensure the index exists."""

    def close(self) -> None:
        """Release the connection."""

    @abstractmethod
    def upsert(self, records: Sequence[VectorRecord]) -> None:
        """Write all records in a single call."""
        pass

    @abstractmethod
    def query(self, vector: Sequence[float], top_k: int) -> List[VectorMatch]:
        """Return up to top_k matches ranked by descending score."""
        pass

    @abstractmethod
    def describe_stats(self) -> Dict[str, Any]:
        """Return index statistics (at least `count`)."""
        pass

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every record."""
        pass


class GenerationClient(ABC):
    """Abstract base class for generation models."""

    @abstractmethod
    def generate(
        self,
        instruction: str,
        context: str,
        history: Sequence[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: float = 0.0
    ) -> str:
        """Generate a reply.

        Args:
            instruction: Rendered system instruction
            context: Assembled grounding context
            history: Prior turns as {"role", "content"} dicts
            max_tokens: Maximum tokens to generate (optional)
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return generator name."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"
