"""Tests for the chromadb-backed vector index"""

import uuid

import pytest

pytest.importorskip("chromadb")

from condo_rag.ingestion.pipeline import IngestionPipeline, PipelineConfig
from condo_rag.providers.base import VectorRecord
from condo_rag.stores.chroma_store import (
    ChromaVectorIndex,
    decode_metadata,
    distance_to_score,
    encode_metadata,
)

from conftest import HashEmbedder, make_chunks


@pytest.fixture
def chroma_index():
    index = ChromaVectorIndex(collection_name=f"test_{uuid.uuid4().hex[:12]}")
    index.initialize()
    yield index
    index.delete_all()
    index.close()


class TestMetadataCodec:
    """Test suite for chroma metadata encoding"""

    def test_lists_round_trip(self):
        metadata = {"section": "17", "topics": ["board", "fund"], "page_number": 3}
        encoded = encode_metadata(metadata)

        assert encoded["topics"] == '["board", "fund"]'
        assert encoded["_list_fields"] == "topics"
        assert decode_metadata(encoded) == metadata

    def test_scalars_untouched(self):
        assert encode_metadata({"a": 1, "b": "x"}) == {"a": 1, "b": "x"}
        assert decode_metadata(None) == {}

    @pytest.mark.parametrize("distance,score", [(0.0, 1.0), (0.25, 0.75), (1.4, 0.0), (-0.01, 1.0)])
    def test_distance_to_score(self, distance, score):
        assert distance_to_score(distance) == pytest.approx(score)

    def test_missing_distance(self):
        assert distance_to_score(None) is None
        assert distance_to_score(float("nan")) is None


class TestChromaVectorIndex:
    """Test suite for ChromaVectorIndex"""

    def test_empty_collection_query(self, chroma_index):
        assert chroma_index.query([1.0, 0.0, 0.0], 15) == []
        assert chroma_index.describe_stats()["count"] == 0

    def test_upsert_and_query(self, chroma_index):
        chroma_index.upsert([
            VectorRecord("a", [1.0, 0.0, 0.0], {"text": "alpha", "section": "1"}),
            VectorRecord("b", [0.0, 1.0, 0.0], {"text": "beta", "section": "2"}),
            VectorRecord("c", [0.7, 0.7, 0.0], {"text": "gamma", "section": "3"}),
        ])
        matches = chroma_index.query([1.0, 0.0, 0.0], 15)

        assert [m.id for m in matches] == ["a", "c", "b"]
        assert matches[0].score == pytest.approx(1.0, abs=1e-3)
        assert matches[0].metadata == {"text": "alpha", "section": "1"}
        assert all(0.0 <= m.score <= 1.0 for m in matches)

    def test_upsert_overwrites(self, chroma_index):
        chroma_index.upsert([VectorRecord("a", [1.0, 0.0], {"text": "old"})])
        chroma_index.upsert([VectorRecord("a", [0.0, 1.0], {"text": "new"})])

        assert chroma_index.describe_stats()["count"] == 1
        assert chroma_index.query([0.0, 1.0], 1)[0].metadata["text"] == "new"

    def test_delete_all(self, chroma_index):
        chroma_index.upsert([VectorRecord("a", [1.0, 0.0], {"text": "alpha"})])
        chroma_index.delete_all()
        assert chroma_index.describe_stats()["count"] == 0

    def test_pipeline_into_chroma(self, chroma_index):
        result = IngestionPipeline(
            HashEmbedder(), chroma_index, PipelineConfig(batch_size=10)
        ).ingest(make_chunks(25))

        assert result.to_dict() == {"succeeded": 25, "failed": 0}
        assert chroma_index.describe_stats()["count"] == 25
