"""
Ingestion Pipeline

Embeds chunks and upserts them into the vector index:

- Batches capped at `batch_size` (default 100)
- At most `max_concurrency` batches in flight (default 3); the rest wait on
  a semaphore for a free slot
- Each batch runs under its own timeout
- A failed or timed-out batch is logged with its chunk-ID range and counted;
  sibling batches carry on

The result is always a pair of counts, never a single pass/fail flag.
"""

import asyncio
import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..observability.logging import log_batch_failure, log_ingestion_summary
from ..providers.base import EmbeddingProvider, ProviderError, VectorIndex, VectorRecord
from ..schemas.chunk import DocumentChunk
from .sanitizer import sanitize_metadata

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """
    Configuration for batched ingestion.

    Attributes:
        batch_size: Maximum chunks per upsert call
        max_concurrency: Maximum batches in flight
        batch_timeout_seconds: Per-batch timeout (None disables it)
    """
    batch_size: int = 100
    max_concurrency: int = 3
    batch_timeout_seconds: Optional[float] = 120.0

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if self.batch_timeout_seconds is not None and self.batch_timeout_seconds <= 0:
            raise ValueError(f"batch_timeout_seconds must be > 0, got {self.batch_timeout_seconds}")


@dataclass
class BatchOutcome:
    """Outcome of one batch."""
    index: int
    first_id: str
    last_id: str
    size: int
    succeeded: bool
    error: Optional[str] = None
    duration_ms: float = 0.0


@dataclass
class IngestionResult:
    """Aggregate chunk counts plus per-batch outcomes."""
    succeeded: int = 0
    failed: int = 0
    batches: List[BatchOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    @property
    def failed_batches(self) -> List[BatchOutcome]:
        return [b for b in self.batches if not b.succeeded]

    def to_dict(self) -> Dict[str, int]:
        return {"succeeded": self.succeeded, "failed": self.failed}


def build_record_metadata(chunk: DocumentChunk) -> Dict[str, Any]:
    """Flat metadata for a chunk, carrying its raw text under `text`."""
    metadata = sanitize_metadata(chunk.metadata.model_dump(mode="json"))
    metadata["text"] = chunk.text
    return metadata


class IngestionPipeline:
    """Batched, concurrency-bounded embedding and upsert."""

    def __init__(
        self,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        config: Optional[PipelineConfig] = None
    ):
        self.embedder = embedder
        self.index = index
        self.config = config or PipelineConfig()
        self._in_flight = 0
        self.max_in_flight = 0

    def partition(self, chunks: Sequence[DocumentChunk]) -> List[List[DocumentChunk]]:
        """Split chunks into ceil(N / batch_size) batches, order preserved."""
        size = self.config.batch_size
        return [list(chunks[i:i + size]) for i in range(0, len(chunks), size)]

    def ingest(self, chunks: Sequence[DocumentChunk]) -> IngestionResult:
        """
        Ingest chunks from synchronous code.

        Must not be called from inside a running event loop; use `aingest`.
        """
        return asyncio.run(self.aingest(chunks))

    async def aingest(self, chunks: Sequence[DocumentChunk]) -> IngestionResult:
        """
        Ingest chunks.

        Args:
            chunks: Chunks to embed and upsert

        Returns:
            IngestionResult with succeeded/failed chunk counts
        """
        batches = self.partition(chunks)
        result = IngestionResult()
        if not batches:
            log_ingestion_summary(0, 0, 0, 0)
            return result

        expected = math.ceil(len(chunks) / self.config.batch_size)
        logger.info(
            f"Ingesting {len(chunks)} chunks in {expected} batches "
            f"(batch_size={self.config.batch_size}, concurrency={self.config.max_concurrency})"
        )

        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        # Spare workers keep a timed-out batch that still holds a thread from starving the next one.
        executor = ThreadPoolExecutor(
            max_workers=self.config.max_concurrency * 2,
            thread_name_prefix="condo-rag-ingest",
        )
        self._in_flight = 0
        self.max_in_flight = 0
        start = time.perf_counter()

        try:
            outcomes = await asyncio.gather(*(
                self._run_batch(index, batch, semaphore, executor)
                for index, batch in enumerate(batches)
            ))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for outcome in outcomes:
            result.batches.append(outcome)
            if outcome.succeeded:
                result.succeeded += outcome.size
            else:
                result.failed += outcome.size

        log_ingestion_summary(
            total=len(chunks),
            succeeded=result.succeeded,
            failed=result.failed,
            batches=len(batches),
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return result

    async def _run_batch(
        self,
        index: int,
        batch: List[DocumentChunk],
        semaphore: asyncio.Semaphore,
        executor: ThreadPoolExecutor
    ) -> BatchOutcome:
        """Run one batch in a worker thread, isolating its failure."""
        first_id, last_id = batch[0].id, batch[-1].id

        async with semaphore:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
            started = time.perf_counter()
            error: Optional[str] = None

            try:
                loop = asyncio.get_running_loop()
                await asyncio.wait_for(
                    loop.run_in_executor(executor, self._embed_and_upsert, batch),
                    timeout=self.config.batch_timeout_seconds,
                )
            except asyncio.TimeoutError:
                error = f"timed out after {self.config.batch_timeout_seconds}s"
            except Exception as e:
                error = f"{type(e).__name__}: {e}"
            finally:
                self._in_flight -= 1

        duration_ms = (time.perf_counter() - started) * 1000
        if error is not None:
            log_batch_failure(index, first_id, last_id, len(batch), error)
            return BatchOutcome(index, first_id, last_id, len(batch), False, error, duration_ms)

        logger.debug(f"Batch {index} [{first_id} .. {last_id}] upserted {len(batch)} chunks")
        return BatchOutcome(index, first_id, last_id, len(batch), True, None, duration_ms)

    def _embed_and_upsert(self, batch: List[DocumentChunk]) -> None:
        """Embed every chunk in the batch, then upsert them in one call."""
        texts = [chunk.text for chunk in batch]

        try:
            vectors = self.embedder.embed_documents(texts)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e), type(self.embedder).__name__, "embed") from e

        if len(vectors) != len(batch):
            raise ProviderError(
                f"expected {len(batch)} vectors, got {len(vectors)}",
                type(self.embedder).__name__,
                "embed",
            )

        records = []
        for chunk, vector in zip(batch, vectors):
            embedded = chunk.with_embedding(vector)
            records.append(VectorRecord(
                id=embedded.id,
                values=embedded.embedding,
                metadata=build_record_metadata(embedded),
            ))

        try:
            self.index.upsert(records)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e), type(self.index).__name__, "upsert") from e
