"""In-memory vector index (numpy cosine similarity) for tests and offline runs."""

import logging
import threading
from typing import Any, Dict, List, Sequence

import numpy as np

from ..providers.base import VectorIndex, VectorMatch, VectorRecord

logger = logging.getLogger(__name__)


class InMemoryVectorIndex(VectorIndex):
    """Dict-backed index; upsert overwrites on id collision."""

    def __init__(self, name: str = "memory"):
        self.name = name
        self._records: Dict[str, VectorRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        with self._lock:
            for record in records:
                self._records[record.id] = VectorRecord(record.id, list(record.values), dict(record.metadata))

    def query(self, vector: Sequence[float], top_k: int) -> List[VectorMatch]:
        with self._lock:
            records = list(self._records.values())
        if not records or top_k < 1:
            return []

        matrix = np.asarray([r.values for r in records], dtype=np.float64)
        query = np.asarray(vector, dtype=np.float64)
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        norms[norms == 0] = 1.0
        scores = np.clip(matrix @ query / norms, 0.0, 1.0)

        # stable so equal scores keep insertion order
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [
            VectorMatch(id=records[i].id, score=float(scores[i]), metadata=dict(records[i].metadata))
            for i in order
        ]

    def describe_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"name": self.name, "count": len(self._records)}

    def delete_all(self) -> None:
        with self._lock:
            self._records.clear()
        logger.warning(f"Index '{self.name}' cleared")

    def get(self, record_id: str) -> VectorRecord:
        with self._lock:
            return self._records[record_id]
