"""
ChromaDB Vector Index

VectorIndex adapter over a chromadb collection in cosine space.

Chroma metadata values must be scalars, so string arrays are stored as JSON
strings and the names of those fields are kept under `_list_fields`.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import chromadb
from chromadb.config import Settings

from ..providers.base import ProviderError, VectorIndex, VectorMatch, VectorRecord

logger = logging.getLogger(__name__)

LIST_FIELDS_KEY = "_list_fields"


def encode_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Encode list values as JSON strings for chroma."""
    encoded: Dict[str, Any] = {}
    list_fields = []
    for key, value in metadata.items():
        if isinstance(value, list):
            encoded[key] = json.dumps(value)
            list_fields.append(key)
        else:
            encoded[key] = value
    if list_fields:
        encoded[LIST_FIELDS_KEY] = ",".join(list_fields)
    return encoded


def decode_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Inverse of `encode_metadata`."""
    decoded = dict(metadata or {})
    list_fields = decoded.pop(LIST_FIELDS_KEY, "")
    for key in filter(None, str(list_fields).split(",")):
        if isinstance(decoded.get(key), str):
            decoded[key] = json.loads(decoded[key])
    return decoded


def distance_to_score(distance: Optional[float]) -> Optional[float]:
    """Cosine distance -> similarity clamped to [0, 1]."""
    if distance is None or not math.isfinite(distance):
        return None
    return max(0.0, min(1.0, 1.0 - float(distance)))


class ChromaVectorIndex(VectorIndex):
    """
    ChromaDB-backed vector index.

    Uses a PersistentClient when `persist_dir` is set, otherwise an
    in-memory EphemeralClient. A pre-built client can be passed in.
    """

    def __init__(
        self,
        collection_name: str = "condo_act",
        persist_dir: Optional[str] = None,
        client: Optional[Any] = None
    ):
        self.collection_name = collection_name
        self.persist_dir = persist_dir
        self._client = client
        self._owns_client = client is None
        self._collection = None

    def initialize(self) -> None:
        if self._collection is not None:
            return

        if self._client is None:
            settings = Settings(anonymized_telemetry=False)
            if self.persist_dir:
                Path(self.persist_dir).mkdir(parents=True, exist_ok=True)
                self._client = chromadb.PersistentClient(path=str(self.persist_dir), settings=settings)
            else:
                self._client = chromadb.EphemeralClient(settings=settings)

        self._collection = self._get_or_create_collection()
        logger.info(f"Collection '{self.collection_name}' ready (count: {self._collection.count()})")

    def close(self) -> None:
        self._collection = None
        if self._owns_client:
            self._client = None

    @property
    def collection(self):
        if self._collection is None:
            self.initialize()
        return self._collection

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        if not records:
            return
        self._call("upsert", lambda: self.collection.upsert(
            ids=[r.id for r in records],
            embeddings=[list(r.values) for r in records],
            metadatas=[encode_metadata(r.metadata) for r in records],
            documents=[str(r.metadata.get("text", "")) for r in records],
        ))

    def query(self, vector: Sequence[float], top_k: int) -> List[VectorMatch]:
        count = self._call("count", self.collection.count)
        if count == 0 or top_k < 1:
            return []

        results = self._call("query", lambda: self.collection.query(
            query_embeddings=[list(vector)],
            n_results=min(top_k, count),
            include=["metadatas", "documents", "distances"],
        ))

        ids = results["ids"][0]
        distances = (results.get("distances") or [[None] * len(ids)])[0]
        metadatas = (results.get("metadatas") or [[None] * len(ids)])[0]
        documents = (results.get("documents") or [[None] * len(ids)])[0]

        matches = []
        for chunk_id, distance, metadata, document in zip(ids, distances, metadatas, documents):
            decoded = decode_metadata(metadata)
            if "text" not in decoded and document is not None:
                decoded["text"] = document
            matches.append(VectorMatch(id=chunk_id, score=distance_to_score(distance), metadata=decoded))
        return matches

    def describe_stats(self) -> Dict[str, Any]:
        collection = self.collection
        return {
            "name": collection.name,
            "count": self._call("count", collection.count),
            "metadata": collection.metadata,
        }

    def delete_all(self) -> None:
        """Drop and recreate the collection."""
        self.initialize()
        self._call("delete_all", lambda: self._client.delete_collection(name=self.collection_name))
        self._collection = self._get_or_create_collection()
        logger.warning(f"Collection '{self.collection_name}' cleared")

    def _get_or_create_collection(self):
        return self._call("initialize", lambda: self._client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        ))

    def _call(self, operation: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e), "chromadb", operation) from e
