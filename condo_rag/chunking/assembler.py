"""
Chunk Assembler

Turns structural units into identified DocumentChunks:

1. Size-bounded, overlapping windows over each unit's text
2. One chunk per subsection (a separate, non-overlapping walk)
3. One chunk per inline amendment marker

Context widening (each window's text extended with its neighbours) is an
ingestion-time switch and is OFF by default: it raises recall at the cost of
a larger index and embeddings of mixed provisions.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..schemas.chunk import ChunkMetadata, ChunkType, DocumentChunk, ProvisionType
from .id_generator import ChunkIdRegistry, generate_amendment_id, generate_chunk_id
from .section_parser import DocumentSegmenter, StructuralUnit
from .splitter import RecursiveCharacterSplitter

logger = logging.getLogger(__name__)


class ChunkValidationError(Exception):
    """Raised when chunk validation fails"""

    def __init__(self, message: str, chunk_index: int = -1):
        self.message = message
        self.chunk_index = chunk_index
        super().__init__(f"Chunk validation failed (index {chunk_index}): {message}")


@dataclass
class AssemblerConfig:
    """
    Configuration for chunk assembly.

    Attributes:
        chunk_size: Window size for section units (characters)
        chunk_overlap: Overlap between section windows (characters)
        part_chunk_size: Window size for part-level units
        part_chunk_overlap: Overlap between part-level windows
        include_subsections: Emit one chunk per subsection
        include_amendments: Emit one chunk per amendment marker
        expand_context: Widen window text with neighbouring windows
        context_neighbors: Neighbours taken on each side when widening
    """
    chunk_size: int = 1000
    chunk_overlap: int = 100
    part_chunk_size: int = 2000
    part_chunk_overlap: int = 200
    include_subsections: bool = True
    include_amendments: bool = True
    expand_context: bool = False
    context_neighbors: int = 1

    @classmethod
    def default(cls) -> "AssemblerConfig":
        return cls()

    @classmethod
    def widened(cls, neighbors: int = 1) -> "AssemblerConfig":
        """Preset with context widening switched on."""
        return cls(expand_context=True, context_neighbors=neighbors)


class ChunkAssembler:
    """Builds identified chunks from segmented units."""

    def __init__(
        self,
        config: Optional[AssemblerConfig] = None,
        segmenter: Optional[DocumentSegmenter] = None
    ):
        self.config = config or AssemblerConfig.default()
        if self.config.context_neighbors < 0:
            raise ValueError(f"context_neighbors must be >= 0, got {self.config.context_neighbors}")
        self.segmenter = segmenter or DocumentSegmenter()
        self.section_splitter = RecursiveCharacterSplitter(
            self.config.chunk_size, self.config.chunk_overlap
        )
        self.part_splitter = RecursiveCharacterSplitter(
            self.config.part_chunk_size, self.config.part_chunk_overlap
        )

    def assemble(self, units: Sequence[StructuralUnit]) -> List[DocumentChunk]:
        """
        Assemble chunks for one document.

        Args:
            units: Structural units in document order

        Returns:
            Chunks with IDs unique within this call

        Raises:
            ChunkValidationError: If a chunk would be empty
        """
        registry = ChunkIdRegistry()
        chunks: List[DocumentChunk] = []
        window_positions: List[int] = []

        for unit in units:
            splitter = self.part_splitter if unit.chunk_type == ChunkType.PART else self.section_splitter
            windows = splitter.split(unit.text)

            for n, window in enumerate(windows, 1):
                chunk_id = generate_chunk_id(
                    unit.part, unit.section, window=n if len(windows) > 1 else None
                )
                window_positions.append(len(chunks))
                chunks.append(self._make_chunk(
                    registry.claim(chunk_id), window.text, unit, len(chunks)
                ))

            if self.config.include_subsections:
                for span in self.segmenter.find_subsections(unit.text):
                    chunk_id = generate_chunk_id(unit.part, unit.section, span.marker)
                    chunks.append(self._make_chunk(
                        registry.claim(chunk_id), span.text, unit, len(chunks),
                        chunk_type=ChunkType.SUBSECTION, subsection=span.marker,
                    ))

            if self.config.include_amendments:
                for amendment in unit.metadata.amendments:
                    if not amendment.text.strip():
                        continue
                    chunk_id = generate_amendment_id(unit.part, unit.section, amendment.date)
                    chunk = self._make_chunk(
                        registry.claim(chunk_id), amendment.text, unit, len(chunks),
                        provision_type=ProvisionType.AMENDMENT,
                    )
                    chunks.append(chunk.model_copy(update={
                        "metadata": chunk.metadata.model_copy(update={
                            "is_amendment": True,
                            "amendments": [amendment],
                        })
                    }))

        if self.config.expand_context:
            chunks = self._widen(chunks, window_positions)

        logger.info(f"Assembled {len(chunks)} chunks from {len(units)} units")
        return chunks

    def assemble_text(self, text: str, page_number: int = 0) -> List[DocumentChunk]:
        """Segment and assemble in one step."""
        report = self.segmenter.segment(text, page_number=page_number)
        return self.assemble(report.units)

    def _make_chunk(
        self,
        chunk_id: str,
        text: str,
        unit: StructuralUnit,
        index: int,
        chunk_type: Optional[ChunkType] = None,
        subsection: Optional[str] = None,
        provision_type: Optional[ProvisionType] = None
    ) -> DocumentChunk:
        if not text or not text.strip():
            raise ChunkValidationError(f"empty text for {chunk_id}", index)

        semantic = unit.metadata
        metadata = ChunkMetadata(
            part=unit.part,
            part_title=unit.part_title,
            section=unit.section,
            section_title=unit.section_title,
            subsection=subsection,
            page_number=unit.page_number,
            chunk_type=chunk_type or unit.chunk_type,
            type=provision_type or semantic.type,
            related_sections=semantic.related_sections,
            definitions=semantic.definitions,
            amendments=semantic.amendments,
            topics=semantic.topics,
            is_amendment=semantic.is_amendment,
            notes=semantic.notes,
        )
        return DocumentChunk(id=chunk_id, text=text, metadata=metadata)

    def _widen(self, chunks: List[DocumentChunk], window_positions: List[int]) -> List[DocumentChunk]:
        """Replace each window's text with itself plus its neighbouring windows."""
        n = self.config.context_neighbors
        originals = [chunks[p].text for p in window_positions]
        widened = list(chunks)
        for i, position in enumerate(window_positions):
            lo, hi = max(0, i - n), min(len(originals), i + n + 1)
            widened[position] = chunks[position].model_copy(
                update={"text": "\n\n".join(originals[lo:hi])}
            )
        return widened
