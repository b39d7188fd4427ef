"""
Condominium Act RAG

Retrieval-augmented generation over the Ontario Condominium Act.

Ingestion:
- Page cleaning and PDF page extraction
- Structural segmentation (Part > Section > Subsection)
- Semantic metadata (definitions, amendments, notes, cross-references, topics)
- Overlapping windows with structural chunk IDs
- Batched, concurrency-bounded embedding and upsert with per-batch isolation

Retrieval:
- Strict score threshold and keyword filters
- Stable score ranking and truncation
- Explicit EmptyContext signal
- Citation-annotated grounding context

Does NOT implement:
- A chat UI or HTTP transport
- A generation model (consumed through GenerationClient)
"""

from .chunking import AssemblerConfig, ChunkAssembler, DocumentSegmenter
from .context import AssembledContext, ContextAssembler, CitationStyle
from .generation import FALLBACK_MESSAGE, ChatService, PromptOptions, PromptTemplate
from .ingestion import IngestionPipeline, IngestionResult, PipelineConfig, ValidationError
from .providers import EmbeddingProvider, GenerationClient, ProviderError, VectorIndex
from .retrieval import RetrievalConfig, RetrievalEngine
from .runtime import RagSettings, load_settings
from .schemas import ChunkMetadata, Citation, DocumentChunk, EmptyContext, SearchResult
from .service import CondoActRAG, IngestReport

__version__ = "0.1.0"

__all__ = [
    "AssemblerConfig",
    "ChunkAssembler",
    "DocumentSegmenter",
    "AssembledContext",
    "ContextAssembler",
    "CitationStyle",
    "FALLBACK_MESSAGE",
    "ChatService",
    "PromptOptions",
    "PromptTemplate",
    "IngestionPipeline",
    "IngestionResult",
    "PipelineConfig",
    "ValidationError",
    "EmbeddingProvider",
    "GenerationClient",
    "ProviderError",
    "VectorIndex",
    "RetrievalConfig",
    "RetrievalEngine",
    "RagSettings",
    "load_settings",
    "ChunkMetadata",
    "Citation",
    "DocumentChunk",
    "EmptyContext",
    "SearchResult",
    "CondoActRAG",
    "IngestReport",
]
