"""
Sentence-Transformers Embedding Provider

Wraps a SentenceTransformer model behind EmbeddingProvider. The model is
loaded in `initialize()`, not at import or construction time.
"""

import logging
from typing import List, Optional, Sequence

from ..providers.base import EmbeddingProvider, ProviderError

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder(EmbeddingProvider):
    """
    Embedding provider backed by sentence-transformers.

    BAAI/bge-large-en-v1.5 is CPU compatible, deterministic and produces
    1024-dimensional vectors.
    """

    DEFAULT_MODEL = "BAAI/bge-large-en-v1.5"
    DEFAULT_DIMENSION = 1024

    def __init__(
        self,
        model_name: Optional[str] = None,
        device: Optional[str] = None,
        batch_size: int = 32,
        normalize: bool = True,
        query_instruction: str = ""
    ):
        self.model_name = model_name or self.DEFAULT_MODEL
        self.device = device
        self.batch_size = batch_size
        self.normalize = normalize
        self.query_instruction = query_instruction
        self._model = None

    def initialize(self) -> None:
        if self._model is not None:
            return
        from sentence_transformers import SentenceTransformer

        logger.info(f"Loading embedding model: {self.model_name}")
        try:
            self._model = SentenceTransformer(self.model_name, device=self.device)
        except Exception as e:
            raise ProviderError(str(e), "sentence-transformers", "load") from e
        logger.info(f"Model loaded (dim: {self.dimension})")

    def close(self) -> None:
        self._model = None

    @property
    def model(self):
        if self._model is None:
            self.initialize()
        return self._model

    @property
    def dimension(self) -> int:
        if self._model is None:
            return self.DEFAULT_DIMENSION
        return self._model.get_sentence_embedding_dimension()

    def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed texts. Returns list of embeddings."""
        if not texts:
            return []
        embeddings = self.model.encode(
            list(texts),
            batch_size=self.batch_size,
            normalize_embeddings=self.normalize,
            show_progress_bar=False,
        )
        return embeddings.tolist()

    def embed_query(self, text: str) -> List[float]:
        return self.embed_documents([f"{self.query_instruction}{text}"])[0]
