"""Segmentation and chunk assembly."""

from .assembler import AssemblerConfig, ChunkAssembler, ChunkValidationError
from .id_generator import ChunkIdRegistry, generate_amendment_id, generate_chunk_id
from .metadata import (
    SemanticMetadata,
    determine_type,
    extract_amendments,
    extract_cross_references,
    extract_definitions,
    extract_notes,
    extract_semantic_metadata,
    extract_topics,
)
from .section_parser import (
    DocumentSegmenter,
    SegmentationMiss,
    SegmentationReport,
    StructuralUnit,
    SubsectionSpan,
)
from .splitter import RecursiveCharacterSplitter, TextWindow

__all__ = [
    "AssemblerConfig",
    "ChunkAssembler",
    "ChunkValidationError",
    "ChunkIdRegistry",
    "generate_amendment_id",
    "generate_chunk_id",
    "SemanticMetadata",
    "determine_type",
    "extract_amendments",
    "extract_cross_references",
    "extract_definitions",
    "extract_notes",
    "extract_semantic_metadata",
    "extract_topics",
    "DocumentSegmenter",
    "SegmentationMiss",
    "SegmentationReport",
    "StructuralUnit",
    "SubsectionSpan",
    "RecursiveCharacterSplitter",
    "TextWindow",
]
