"""Tests for DocumentSegmenter"""

import pytest

from condo_rag.chunking.section_parser import DocumentSegmenter
from condo_rag.ingestion.cleaner import clean_page_text
from condo_rag.schemas.chunk import ChunkType, ProvisionType


@pytest.fixture
def segmenter():
    return DocumentSegmenter()


@pytest.fixture
def report(segmenter, sample_act):
    return segmenter.segment(clean_page_text(sample_act))


class TestStructure:
    """Test suite for part/section segmentation"""

    def test_units_in_document_order(self, report):
        """Each section heading produces one unit"""
        assert [(u.part, u.section) for u in report.units] == [
            ("PART I", "1"),
            ("PART I", "2"),
            ("PART III", "17"),
            ("PART III", "27"),
            ("PART IV", "130"),
        ]
        assert report.misses == []

    def test_titles(self, report):
        unit = report.units[2]
        assert unit.part_title == "CORPORATIONS"
        assert unit.section_title == "Objects"
        assert unit.chunk_type == ChunkType.SECTION

    def test_unit_text_spans_heading_to_next_heading(self, report):
        unit = report.units[2]
        assert unit.text.startswith("17. Objects")
        assert "(3) The corporation shall" in unit.text
        assert "27. Board" not in unit.text

    def test_heading_variants(self, segmenter):
        text = (
            "Part II: Registration\n"
            "Section 5 - Declaration\n"
            "(1) A declaration shall be registered.\n"
            "5.1 Description\n"
            "(1) A description may be amended.\n"
        )
        units = segmenter.segment(text).units

        assert [(u.part, u.part_title, u.section, u.section_title) for u in units] == [
            ("PART II", "Registration", "5", "Declaration"),
            ("PART II", "Registration", "5.1", "Description"),
        ]

    def test_lowercase_line_after_number_is_not_a_heading(self, segmenter):
        text = "PART I - GENERAL\n1. Scope\n(1) The board acts within\n90 days after the meeting.\n"
        units = segmenter.segment(text).units

        assert len(units) == 1
        assert "90 days after" in units[0].text

    def test_part_without_sections_becomes_part_unit(self, segmenter):
        text = "PART IX - TRANSITION\nThe transitional rules apply to existing corporations.\n"
        units = segmenter.segment(text).units

        assert len(units) == 1
        assert units[0].chunk_type == ChunkType.PART
        assert units[0].section == ""
        assert "transitional rules" in units[0].text


class TestSegmentationMiss:
    """Test suite for non-fatal misses"""

    def test_text_without_parts_is_skipped(self, segmenter):
        report = segmenter.segment("Just some prose without any structure at all.")

        assert report.units == []
        assert len(report.misses) == 1
        assert report.misses[0].level == "part"

    def test_preamble_is_skipped_and_segmentation_continues(self, segmenter):
        text = "Preamble text.\n\nPART I - GENERAL\n1. Scope\n(1) The Act applies.\n"
        report = segmenter.segment(text)

        assert len(report.misses) == 1
        assert [u.section for u in report.units] == ["1"]

    def test_empty_part_is_a_miss(self, segmenter):
        report = segmenter.segment("PART I - GENERAL\nPART II - MORE\n2. Scope\n(1) Text here.\n")

        assert [u.part for u in report.units] == ["PART II"]
        assert report.misses[0].level == "section"


class TestUnitMetadata:
    """Test suite for metadata attached to units"""

    def test_definitions_section(self, report):
        unit = report.units[0]
        assert unit.metadata.type == ProvisionType.DEFINITION
        assert set(unit.metadata.definitions) == {"board", "common elements"}
        assert unit.metadata.notes == ["These definitions apply to every Part of this Act."]

    def test_cross_reference(self, report):
        assert [r.section for r in report.units[1].metadata.related_sections] == ["Section 17"]

    def test_amendment(self, report):
        unit = report.units[2]
        assert unit.metadata.is_amendment
        assert unit.metadata.amendments[0].date == "2015-12-03"
        assert unit.metadata.amendments[0].section == "17"

    def test_penalty(self, report):
        assert report.units[4].metadata.type == ProvisionType.PENALTY


class TestSubsections:
    """Test suite for the subsection walk"""

    def test_markers_and_spans(self, segmenter, report):
        spans = segmenter.find_subsections(report.units[2].text)

        assert [s.marker for s in spans] == ["(1)", "(2)", "(3)"]
        assert spans[0].text.startswith("(1) The objects")
        assert "(2)" not in spans[0].text
        assert spans[2].text.endswith("reasonable steps]")

    def test_lettered_marker(self, segmenter):
        text = "12. Meetings\n(1)(a) The board shall meet.\n(b) Quorum is required.\n(2) Minutes are kept.\n"
        spans = segmenter.find_subsections(text)

        assert [s.marker for s in spans] == ["(1)(a)", "(2)"]
        assert "(b) Quorum" in spans[0].text

    def test_inline_reference_is_not_a_marker(self, segmenter):
        spans = segmenter.find_subsections("(1) As set out in subsection (2), the board acts.\n")
        assert [s.marker for s in spans] == ["(1)"]


class TestPageNumbers:
    """Test suite for page tracking"""

    def test_default_page_number(self, segmenter, report):
        units = segmenter.segment("PART I - GENERAL\n1. Scope\n(1) Text.\n", page_number=7).units
        assert units[0].page_number == 7

    def test_page_breaks(self, segmenter):
        text = "PART I - GENERAL\n1. Scope\n(1) Text.\n\n2. Other\n(1) More text."
        second = text.index("2. Other")
        units = segmenter.segment(text, page_breaks=[(0, 10), (second - 1, 11)]).units

        assert [u.page_number for u in units] == [10, 11]


ACT_LAYOUT = (
    "PART III - CORPORATIONS\n"
    "Objects\n"
    "17 (1) The objects of the corporation are to manage the property.\n"
    "(2) The corporation has a duty to control the common elements.\n"
    "Board of directors\n"
    "27 (1) A board of directors shall manage the affairs of the corporation.\n"
    "(2) The board shall consist of at least three persons.\n"
    "27.1 (1) Every director shall complete the prescribed training.\n"
)


class TestActLayout:
    """Test suite for "17 (1) ..." headings with the title on the line above"""

    def test_sections_found(self, segmenter):
        report = segmenter.segment(ACT_LAYOUT)

        assert [(u.section, u.section_title, u.chunk_type) for u in report.units] == [
            ("17", "Objects", ChunkType.SECTION),
            ("27", "Board of directors", ChunkType.SECTION),
            ("27.1", "", ChunkType.SECTION),
        ]
        assert report.misses == []

    def test_unit_starts_at_title_line(self, segmenter):
        units = segmenter.segment(ACT_LAYOUT).units

        assert units[0].text.startswith("Objects\n17 (1) The objects")
        assert units[0].text.endswith("common elements.")
        assert "Board of directors" not in units[0].text
        assert units[2].text.startswith("27.1 (1) Every director")

    def test_first_subsection_on_heading_line(self, segmenter):
        units = segmenter.segment(ACT_LAYOUT).units
        spans = segmenter.find_subsections(units[0].text)

        assert [s.marker for s in spans] == ["(1)", "(2)"]
        assert spans[0].text == "(1) The objects of the corporation are to manage the property."

    def test_sentence_above_heading_is_not_a_title(self, segmenter):
        text = (
            "PART III - CORPORATIONS\n"
            "17 (1) The objects of the corporation are to manage the property.\n"
            "(2) The corporation has a duty to control the common elements.\n"
            "18 (1) The corporation may own land.\n"
        )
        units = segmenter.segment(text).units

        assert [(u.section, u.section_title) for u in units] == [("17", ""), ("18", "")]
        assert units[0].text.endswith("common elements.")

    def test_bare_number_line_is_not_a_heading(self, segmenter):
        text = "PART I - GENERAL\n1. Scope\n(1) The Act applies to every corporation.\n12\n(2) It binds the Crown.\n"
        units = segmenter.segment(text).units

        assert [u.section for u in units] == ["1"]
        assert "It binds the Crown" in units[0].text


class TestPartPreamble:
    """Test suite for text between a part heading and its first section"""

    def test_preamble_becomes_part_unit(self, segmenter):
        text = (
            "PART III - CORPORATIONS\n"
            "The corporation shall keep adequate records of its affairs.\n"
            "17. Objects\n"
            "(1) The objects of the corporation are to manage the property.\n"
        )
        report = segmenter.segment(text)

        assert [(u.section, u.chunk_type) for u in report.units] == [
            ("", ChunkType.PART),
            ("17", ChunkType.SECTION),
        ]
        preamble = report.units[0]
        assert preamble.text == "PART III - CORPORATIONS\nThe corporation shall keep adequate records of its affairs."
        assert preamble.part_title == "CORPORATIONS"
        assert report.misses == []

    def test_blank_preamble_adds_nothing(self, segmenter, report):
        assert all(u.chunk_type == ChunkType.SECTION for u in report.units)
