"""
Condominium Act RAG Service

Facade over segmentation, assembly, ingestion and retrieval. Collaborators
are passed in (or built from settings by `from_settings`) and have an
explicit initialize/close lifecycle.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .chunking.assembler import ChunkAssembler
from .chunking.section_parser import DocumentSegmenter, SegmentationReport
from .context.assembler import AssembledContext, ContextAssembler
from .context.citation import CitationStyle
from .ingestion.cleaner import PageText, clean_page_text, join_pages
from .ingestion.pdf_loader import load_pdf_pages
from .ingestion.pipeline import IngestionPipeline, IngestionResult
from .ingestion.validator import validate_raw_text
from .providers.base import EmbeddingProvider, VectorIndex
from .retrieval.engine import RetrievalEngine, RetrievalOutcome
from .runtime.config_loader import RagSettings
from .schemas.chunk import DocumentChunk

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    """Outcome of ingesting one document."""
    chunk_count: int
    succeeded: int
    failed: int
    skipped_units: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"chunk_count": self.chunk_count, "succeeded": self.succeeded, "failed": self.failed}


class CondoActRAG:
    """Ingestion and retrieval over the Condominium Act."""

    def __init__(
        self,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        settings: Optional[RagSettings] = None
    ):
        self.settings = settings or RagSettings()
        self.embedder = embedder
        self.index = index
        self.segmenter = DocumentSegmenter()
        self.assembler = ChunkAssembler(self.settings.chunking, self.segmenter)
        self.pipeline = IngestionPipeline(embedder, index, self.settings.ingestion)
        self.engine = RetrievalEngine(embedder, index, self.settings.retrieval)
        self.context_assembler = ContextAssembler(
            CitationStyle.INLINE,
            include_relevance=self.settings.include_relevance,
        )

    @classmethod
    def from_settings(cls, settings: RagSettings) -> "CondoActRAG":
        """Build with the chromadb index and sentence-transformers embedder."""
        from .stores.chroma_store import ChromaVectorIndex
        from .stores.embeddings import SentenceTransformerEmbedder

        embedder = SentenceTransformerEmbedder(
            model_name=settings.embedding.model_name,
            device=settings.embedding.device,
            batch_size=settings.embedding.batch_size,
            normalize=settings.embedding.normalize,
            query_instruction=settings.embedding.query_instruction,
        )
        index = ChromaVectorIndex(
            collection_name=settings.store.collection_name,
            persist_dir=settings.store.persist_dir,
        )
        return cls(embedder, index, settings)

    def initialize(self) -> None:
        self.embedder.initialize()
        self.index.initialize()

    def close(self) -> None:
        self.engine.close()
        self.index.close()
        self.embedder.close()

    def __enter__(self) -> "CondoActRAG":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def chunk_document(
        self,
        raw_text: str,
        page_breaks: Optional[Sequence[Tuple[int, int]]] = None,
        page_number: int = 0
    ) -> Tuple[List[DocumentChunk], SegmentationReport]:
        """Validate, segment and assemble without touching the index.

        Raises:
            ValidationError: If the text is unusable
        """
        validate_raw_text(raw_text, self.settings.min_document_chars)
        text = raw_text if page_breaks else clean_page_text(raw_text)
        report = self.segmenter.segment(text, page_breaks=page_breaks, page_number=page_number)
        return self.assembler.assemble(report.units), report

    def ingest_chunks(self, chunks: Sequence[DocumentChunk]) -> IngestionResult:
        return self.pipeline.ingest(chunks)

    def ingest_document(self, raw_text: str, page_number: int = 0) -> IngestReport:
        """
        Ingest one document.

        Args:
            raw_text: Document text
            page_number: Page number recorded on every unit

        Returns:
            IngestReport with chunk_count, succeeded and failed

        Raises:
            ValidationError: Before any batch is sent, if the text is unusable
        """
        chunks, report = self.chunk_document(raw_text, page_number=page_number)
        return self._ingest(chunks, report)

    def ingest_pages(self, pages: Sequence[PageText]) -> IngestReport:
        """Ingest cleaned pages, keeping the page each unit starts on."""
        text, page_breaks = join_pages(pages)
        chunks, report = self.chunk_document(text, page_breaks=page_breaks)
        return self._ingest(chunks, report)

    def ingest_pdf(self, file_path: str) -> IngestReport:
        """Ingest the Act from a PDF file."""
        return self.ingest_pages(load_pdf_pages(file_path))

    def retrieve(self, query: str, k: Optional[int] = None) -> RetrievalOutcome:
        """Ranked results or EmptyContext (see RetrievalEngine.retrieve)."""
        return self.engine.retrieve(query, k)

    def build_context(self, outcome: RetrievalOutcome) -> AssembledContext:
        return self.context_assembler.assemble(outcome)

    def reset_index(self) -> None:
        """Delete every record from the index."""
        logger.warning("Resetting vector index")
        self.index.delete_all()

    def stats(self) -> Dict[str, Any]:
        return self.index.describe_stats()

    def _ingest(self, chunks: List[DocumentChunk], report: SegmentationReport) -> IngestReport:
        result = self.pipeline.ingest(chunks)
        return IngestReport(
            chunk_count=len(chunks),
            succeeded=result.succeeded,
            failed=result.failed,
            skipped_units=len(report.misses),
        )
