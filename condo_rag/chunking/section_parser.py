"""
Document Segmenter for the Condominium Act

Splits cleaned Act text into structural units (Part > Section) and attaches
the semantic metadata of each unit. Subsections are walked later by the
chunk assembler via `find_subsections`.
"""

import bisect
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..observability.logging import log_segmentation_miss
from ..schemas.chunk import ChunkType
from .metadata import SemanticMetadata, extract_semantic_metadata

logger = logging.getLogger(__name__)


@dataclass
class StructuralUnit:
    """
    One part or section of the Act.

    Attributes:
        part: Normalised part label (e.g. "PART III")
        part_title: Part heading title
        section: Section number, empty for part-level units
        section_title: Section heading title
        chunk_type: PART when the part has no section headings
        text: Unit text including its heading line
        start_offset: Start position in the segmented text
        end_offset: End position in the segmented text
        page_number: Page the unit heading starts on
        metadata: Semantic metadata extracted from `text`
    """
    part: str
    part_title: str
    section: str
    section_title: str
    chunk_type: ChunkType
    text: str
    start_offset: int
    end_offset: int
    page_number: int = 0
    metadata: SemanticMetadata = field(default_factory=SemanticMetadata)


@dataclass
class SubsectionSpan:
    """A subsection found inside a unit's text."""
    marker: str
    text: str
    start_offset: int


@dataclass
class SegmentationMiss:
    """A stretch of text skipped because no structural pattern matched."""
    level: str
    reason: str
    excerpt: str
    offset: int


@dataclass
class SegmentationReport:
    """Result of segmenting one document."""
    units: List[StructuralUnit] = field(default_factory=list)
    misses: List[SegmentationMiss] = field(default_factory=list)


class DocumentSegmenter:
    """
    Segmenter for Condominium Act text.

    Supports:
    - "PART III - CORPORATIONS" / "Part III: Corporations"
    - "17. Objects" / "Section 17 - Objects" / "17.1 Title"
    - "17 (1) The objects..." with the title on the line above
    - "(2)" / "(2)(a)" subsection markers at line start
    """

    PART_PATTERN = re.compile(
        r'^[ \t]*(?:PART|Part)[ \t]+([IVXLC]+)\b[ \t]*(?:[-–—:.][ \t]*)?(.*)$',
        re.MULTILINE
    )

    # A bare number (page footer) is not a heading: needs a title or a marker.
    SECTION_PATTERN = re.compile(
        r'^[ \t]*(?:Section[ \t]+)?(\d+(?:\.\d+)?)\.?'
        r'(?:[ \t]*(?=\(\d+\))|[ \t]+(?:[-–—][ \t]*)?([A-Z][^\n]*?)[ \t]*$)',
        re.MULTILINE
    )

    # Marginal title printed on the line above "17 (1) ..."
    TITLE_LINE_PATTERN = re.compile(r'^[A-Z][^\n]{0,79}(?<![.;:,])$')

    SUBSECTION_PATTERN = re.compile(
        r'^[ \t]*(?:\d+(?:\.\d+)?\.?[ \t]*)?(\(\d+\)(?:\([a-z]\))?)',
        re.MULTILINE
    )

    def segment(
        self,
        text: str,
        page_breaks: Optional[Sequence[Tuple[int, int]]] = None,
        page_number: int = 0
    ) -> SegmentationReport:
        """
        Segment a cleaned document.

        Args:
            text: Cleaned document text
            page_breaks: (start_offset, page_number) pairs from `join_pages`
            page_number: Page number used when no page breaks are given

        Returns:
            SegmentationReport with units in document order
        """
        report = SegmentationReport()
        part_matches = list(self.PART_PATTERN.finditer(text))

        if not part_matches:
            self._miss(report, "part", "no part heading found", text, 0)
            return report

        preamble = text[:part_matches[0].start()]
        if preamble.strip():
            self._miss(report, "part", "text before first part heading", preamble.strip(), 0)

        for i, part_match in enumerate(part_matches):
            part_end = part_matches[i + 1].start() if i + 1 < len(part_matches) else len(text)
            part = f"PART {part_match.group(1)}"
            part_title = (part_match.group(2) or "").strip()

            section_matches = list(self.SECTION_PATTERN.finditer(text, part_match.end(), part_end))

            if not section_matches:
                part_text = text[part_match.start():part_end].strip()
                if part_text == part_match.group(0).strip():
                    self._miss(report, "section", f"{part} has no body", part_text, part_match.start())
                    continue
                report.units.append(self._build_unit(
                    part, part_title, "", "", ChunkType.PART, part_text,
                    part_match.start(), part_end, page_breaks, page_number,
                ))
                continue

            headings = []
            floor = part_match.end()
            for section_match in section_matches:
                title = (section_match.group(2) or "").strip()
                start = section_match.start()
                if not title:
                    title_line = self._title_above(text, start, floor)
                    if title_line is not None:
                        start, title = title_line
                headings.append((start, section_match.group(1), title))
                floor = section_match.end()

            first_start = headings[0][0]
            if text[part_match.end():first_start].strip():
                report.units.append(self._build_unit(
                    part, part_title, "", "", ChunkType.PART,
                    text[part_match.start():first_start].strip(),
                    part_match.start(), first_start, page_breaks, page_number,
                ))

            for j, (start, section, section_title) in enumerate(headings):
                end = headings[j + 1][0] if j + 1 < len(headings) else part_end
                report.units.append(self._build_unit(
                    part,
                    part_title,
                    section,
                    section_title,
                    ChunkType.SECTION,
                    text[start:end].strip(),
                    start,
                    end,
                    page_breaks,
                    page_number,
                ))

        logger.info(f"Segmented {len(report.units)} units ({len(report.misses)} skipped)")
        return report

    def find_subsections(self, text: str) -> List[SubsectionSpan]:
        """
        Walk subsection markers in a unit's text.

        Each span runs from its marker to the next marker (or end of text),
        so spans never overlap.
        """
        matches = list(self.SUBSECTION_PATTERN.finditer(text))
        spans = []
        for i, match in enumerate(matches):
            end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
            body = text[match.start(1):end].strip()
            if body:
                spans.append(SubsectionSpan(marker=match.group(1), text=body, start_offset=match.start(1)))
        return spans

    def _build_unit(
        self,
        part: str,
        part_title: str,
        section: str,
        section_title: str,
        chunk_type: ChunkType,
        unit_text: str,
        start: int,
        end: int,
        page_breaks: Optional[Sequence[Tuple[int, int]]],
        page_number: int
    ) -> StructuralUnit:
        return StructuralUnit(
            part=part,
            part_title=part_title,
            section=section,
            section_title=section_title,
            chunk_type=chunk_type,
            text=unit_text,
            start_offset=start,
            end_offset=end,
            page_number=self._page_for(start, page_breaks, page_number),
            metadata=extract_semantic_metadata(unit_text, section),
        )

    def _title_above(self, text: str, line_start: int, floor: int) -> Optional[Tuple[int, str]]:
        """(start, title) of the short title line directly above `line_start`, if any."""
        if line_start == 0 or text[line_start - 1] != '\n':
            return None
        prev_start = text.rfind('\n', 0, line_start - 1) + 1
        if prev_start < floor:
            return None
        candidate = text[prev_start:line_start - 1].strip()
        if not self.TITLE_LINE_PATTERN.match(candidate):
            return None
        return prev_start, candidate

    @staticmethod
    def _page_for(
        offset: int,
        page_breaks: Optional[Sequence[Tuple[int, int]]],
        default: int
    ) -> int:
        if not page_breaks:
            return default
        offsets = [start for start, _ in page_breaks]
        index = bisect.bisect_right(offsets, offset) - 1
        return page_breaks[max(index, 0)][1]

    @staticmethod
    def _miss(report: SegmentationReport, level: str, reason: str, excerpt: str, offset: int) -> None:
        miss = SegmentationMiss(level=level, reason=reason, excerpt=excerpt[:80], offset=offset)
        report.misses.append(miss)
        log_segmentation_miss(level, reason, excerpt, offset)
