"""Tests for ChunkAssembler and chunk IDs"""

import pytest

from condo_rag.chunking.assembler import AssemblerConfig, ChunkAssembler
from condo_rag.chunking.id_generator import ChunkIdRegistry, generate_amendment_id, generate_chunk_id
from condo_rag.chunking.section_parser import DocumentSegmenter
from condo_rag.ingestion.cleaner import clean_page_text
from condo_rag.schemas.chunk import ChunkType, ProvisionType
from condo_rag.schemas.search import Citation


LONG_SECTION = "PART II - RECORDS\n5. Records\n" + " ".join(
    f"The corporation shall keep adequate record number {i} of its financial affairs." for i in range(60)
)


def assemble(text: str, config: AssemblerConfig = None):
    assembler = ChunkAssembler(config)
    units = DocumentSegmenter().segment(clean_page_text(text)).units
    return assembler.assemble(units)


class TestChunkIds:
    """Test suite for structural IDs"""

    def test_generate_chunk_id(self):
        assert generate_chunk_id("PART III", "17") == "part-iii-17"
        assert generate_chunk_id("PART III", "17", "(2)(a)") == "part-iii-17-2-a"
        assert generate_chunk_id("PART III", "17.1") == "part-iii-17.1"
        assert generate_chunk_id("PART III", "17", window=2) == "part-iii-17-w2"
        assert generate_chunk_id("PART IX", "") == "part-ix"

    def test_generate_amendment_id(self):
        assert generate_amendment_id("PART III", "17", "2015-12-03") == "part-iii-17-amendment-2015-12-03"
        assert generate_amendment_id("PART III", "17", None) == "part-iii-17-amendment-unknown"

    def test_registry_deduplicates_in_order(self):
        registry = ChunkIdRegistry()
        assert [registry.claim(i) for i in ["a", "b", "a", "a"]] == ["a", "b", "a~2", "a~3"]


class TestSampleAct:
    """Test suite for assembling the sample Act"""

    @pytest.fixture
    def chunks(self, sample_act):
        return assemble(sample_act)

    def test_ids_are_unique(self, chunks):
        ids = [c.id for c in chunks]
        assert len(ids) == len(set(ids))

    def test_expected_chunks(self, chunks):
        ids = [c.id for c in chunks]

        assert ids[:4] == ["part-i-1", "part-i-1-1", "part-i-1-2", "part-i-2"]
        assert "part-iii-17-3" in ids
        assert "part-iii-17-amendment-2015-12-03" in ids
        assert "part-iv-130" in ids
        # 5 section windows + 9 subsections + 1 amendment
        assert len(chunks) == 15

    def test_ids_are_stable_across_runs(self, sample_act, chunks):
        assert [c.id for c in assemble(sample_act)] == [c.id for c in chunks]

    def test_subsection_chunk_metadata(self, chunks):
        chunk = next(c for c in chunks if c.id == "part-iii-27-2")

        assert chunk.metadata.chunk_type == ChunkType.SUBSECTION
        assert chunk.metadata.subsection == "(2)"
        assert chunk.metadata.section == "27"
        assert chunk.metadata.section_title == "Board of directors"
        assert chunk.text.startswith("(2) The board may make by-laws")

    def test_amendment_chunk(self, chunks):
        chunk = next(c for c in chunks if c.id.startswith("part-iii-17-amendment"))

        assert chunk.metadata.type == ProvisionType.AMENDMENT
        assert chunk.metadata.is_amendment
        assert chunk.text == "Subsection (3) amended to require reasonable steps"
        assert len(chunk.metadata.amendments) == 1

    def test_embedding_absent(self, chunks):
        assert all(c.embedding is None for c in chunks)

    def test_optional_walks_can_be_disabled(self, sample_act):
        config = AssemblerConfig(include_subsections=False, include_amendments=False)
        chunks = assemble(sample_act, config)

        assert [c.id for c in chunks] == ["part-i-1", "part-i-2", "part-iii-17", "part-iii-27", "part-iv-130"]


class TestWindows:
    """Test suite for multi-window units"""

    def test_long_section_windows(self):
        config = AssemblerConfig(include_subsections=False, include_amendments=False)
        chunks = assemble(LONG_SECTION, config)

        assert len(chunks) > 2
        assert [c.id for c in chunks] == [f"part-ii-5-w{i}" for i in range(1, len(chunks) + 1)]
        assert all(len(c.text) <= config.chunk_size for c in chunks)

    def test_overlap_law_between_adjacent_windows(self):
        config = AssemblerConfig(include_subsections=False, include_amendments=False)
        chunks = assemble(LONG_SECTION, config)
        overlap = config.chunk_overlap

        for current, following in zip(chunks, chunks[1:]):
            assert following.text[:overlap] == current.text[-overlap:]

    def test_duplicate_section_numbers_get_unique_ids(self):
        text = "PART II - RECORDS\n5. Records\n(1) Keep records.\n5. Records again\n(1) Keep more records.\n"
        ids = [c.id for c in assemble(text)]

        assert ids == ["part-ii-5", "part-ii-5-1", "part-ii-5~2", "part-ii-5-1~2"]

    def test_part_level_unit(self):
        chunks = assemble("PART IX - TRANSITION\nThe transitional rules apply to existing corporations.\n")

        assert [c.id for c in chunks] == ["part-ix"]
        assert chunks[0].metadata.chunk_type == ChunkType.PART

    def test_act_layout_ids_and_citations(self):
        text = (
            "PART III - CORPORATIONS\n"
            "Objects\n"
            "17 (1) The objects of the corporation are to manage the property.\n"
            "(2) The corporation has a duty to control the common elements.\n"
        )
        chunks = assemble(text)

        assert [c.id for c in chunks] == ["part-iii-17", "part-iii-17-1", "part-iii-17-2"]
        assert str(Citation.from_metadata(chunks[2].metadata.model_dump())) == "PART III, Section 17 (2) - Objects"

    def test_part_preamble_is_kept(self):
        text = (
            "PART III - CORPORATIONS\n"
            "The corporation shall keep adequate records of its affairs.\n"
            "17. Objects\n"
            "(1) The objects of the corporation are to manage the property.\n"
        )
        chunks = assemble(text)

        assert [c.id for c in chunks] == ["part-iii", "part-iii-17", "part-iii-17-1"]
        assert "adequate records" in chunks[0].text
        assert chunks[0].metadata.chunk_type == ChunkType.PART


class TestContextWidening:
    """Test suite for the explicit widening switch"""

    def test_off_by_default(self, sample_act):
        assert AssemblerConfig().expand_context is False
        chunk = next(c for c in assemble(sample_act) if c.id == "part-i-2")
        assert chunk.text.startswith("2. Application of Act")
        assert "1. Definitions" not in chunk.text

    def test_window_text_includes_neighbours(self, sample_act):
        plain = {c.id: c.text for c in assemble(sample_act)}
        widened = {c.id: c.text for c in assemble(sample_act, AssemblerConfig.widened())}

        assert widened["part-i-2"] == "\n\n".join([plain["part-i-1"], plain["part-i-2"], plain["part-iii-17"]])
        assert widened["part-i-1"] == "\n\n".join([plain["part-i-1"], plain["part-i-2"]])
        # subsection and amendment chunks keep their own text
        assert widened["part-iii-17-3"] == plain["part-iii-17-3"]

    def test_neighbour_count(self, sample_act):
        plain = {c.id: c.text for c in assemble(sample_act)}
        widened = {c.id: c.text for c in assemble(sample_act, AssemblerConfig.widened(neighbors=2))}

        assert widened["part-iv-130"] == "\n\n".join(
            [plain["part-iii-17"], plain["part-iii-27"], plain["part-iv-130"]]
        )
