"""Shared fixtures: sample Act text and deterministic test doubles."""

import hashlib
import re
import sys
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import numpy as np
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from condo_rag.providers.base import EmbeddingProvider, VectorIndex, VectorMatch, VectorRecord
from condo_rag.schemas.chunk import ChunkMetadata, DocumentChunk
from condo_rag.stores.memory_store import InMemoryVectorIndex


SAMPLE_ACT = """Condominium Act, 1998
Page 1

PART I - DEFINITIONS AND INTERPRETATION

1. Definitions
(1) In this Act, "board" means the board of directors of the corporation.
(2) "common elements" means all the property except the units.
Note: These definitions apply to every Part of this Act.

2. Application of Act
(1) This Act applies to every corporation created under it. See Section 17 for the objects of a corporation.

PART III - CORPORATIONS

17. Objects
(1) The objects of the corporation are to manage the property and the assets of the corporation on behalf of the owners.
(2) The corporation has a duty to control, manage and administer the common elements and the assets of the corporation.
(3) The corporation shall take all reasonable steps to ensure that the owners comply with this Act. [Amendment: 2015-12-03: Subsection (3) amended to require reasonable steps]

27. Board of directors
(1) A board of directors shall manage the affairs of the corporation.
(2) The board may make by-laws relating to the financial duties of the corporation, including the reserve fund.

PART IV - OFFENCES

130. Offences
(1) Every person who contravenes this Act is guilty of an offence and liable to a fine.
"""


class HashEmbedder(EmbeddingProvider):
    """Bag-of-words embedder: words longer than 3 chars hashed into buckets."""

    def __init__(self, dim: int = 256, fail_on: Optional[Set[str]] = None, delay: float = 0.0):
        self.dim = dim
        self.fail_on = fail_on or set()
        self.delay = delay
        self.calls: List[List[str]] = []
        self.queries: List[str] = []
        self._lock = threading.Lock()

    @property
    def dimension(self) -> int:
        return self.dim

    def _vector(self, text: str) -> List[float]:
        vec = np.zeros(self.dim)
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            if len(word) > 3:
                bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dim
                vec[bucket] += 1.0
        return vec.tolist()

    def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        with self._lock:
            self.calls.append(list(texts))
        if self.delay:
            time.sleep(self.delay)
        for text in texts:
            if any(marker in text for marker in self.fail_on):
                raise RuntimeError(f"embedding failed for {text[:20]!r}")
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        self.queries.append(text)
        if any(marker in text for marker in self.fail_on):
            raise RuntimeError(f"embedding failed for {text[:20]!r}")
        return self._vector(text)


class RecordingIndex(InMemoryVectorIndex):
    """In-memory index that tracks concurrent upserts and can be told to fail."""

    def __init__(
        self,
        delay: float = 0.0,
        fail_ids: Optional[Set[str]] = None,
        slow_ids: Optional[Dict[str, float]] = None
    ):
        super().__init__("recording")
        self.delay = delay
        self.fail_ids = fail_ids or set()
        self.slow_ids = slow_ids or {}
        self.upsert_calls: List[List[str]] = []
        self.active = 0
        self.max_active = 0
        self._count_lock = threading.Lock()

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        ids = [r.id for r in records]
        with self._count_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.upsert_calls.append(ids)
        try:
            time.sleep(self.delay + max((self.slow_ids.get(i, 0.0) for i in ids), default=0.0))
            if self.fail_ids.intersection(ids):
                raise ConnectionError("upsert rejected")
            super().upsert(records)
        finally:
            with self._count_lock:
                self.active -= 1


class StaticIndex(VectorIndex):
    """Returns a fixed match list, in the given order."""

    def __init__(self, matches: List[VectorMatch], error: Optional[Exception] = None, delay: float = 0.0):
        self.matches = matches
        self.error = error
        self.delay = delay
        self.requested_top_k: List[int] = []

    def upsert(self, records):
        raise NotImplementedError

    def query(self, vector, top_k):
        self.requested_top_k.append(top_k)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.matches[:top_k])

    def describe_stats(self):
        return {"count": len(self.matches)}

    def delete_all(self):
        self.matches = []


def make_match(chunk_id: str, score, text: Optional[str] = None, section: str = "17", **metadata) -> VectorMatch:
    """Build a VectorMatch with citation metadata."""
    meta = {
        "text": text if text is not None else f"Text of {chunk_id}",
        "part": "PART III",
        "part_title": "CORPORATIONS",
        "section": section,
        "section_title": "Objects",
    }
    meta.update(metadata)
    return VectorMatch(id=chunk_id, score=score, metadata=meta)


def make_chunks(n: int, text: str = "The board has financial duties regarding item {i}.") -> List[DocumentChunk]:
    """Build n distinct chunks with citation metadata."""
    return [
        DocumentChunk(
            id=f"part-iii-{i}",
            text=text.format(i=i),
            metadata=ChunkMetadata(part="PART III", part_title="CORPORATIONS", section=str(i), section_title=f"Item {i}"),
        )
        for i in range(n)
    ]


@pytest.fixture
def sample_act() -> str:
    return SAMPLE_ACT


@pytest.fixture
def embedder() -> HashEmbedder:
    return HashEmbedder()


@pytest.fixture
def index() -> RecordingIndex:
    return RecordingIndex()
