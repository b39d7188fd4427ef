"""
Chunk Schema - Condominium Act Chunking

Canonical schema for chunks of the Condominium Act.
Each chunk is one bounded span of a part, section or subsection together
with the structural and semantic metadata used for citation and filtering.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChunkType(str, Enum):
    """Structural level a chunk was cut from."""
    PART = "part"
    SECTION = "section"
    SUBSECTION = "subsection"


class ProvisionType(str, Enum):
    """Semantic classification of a provision."""
    DEFINITION = "definition"
    REQUIREMENT = "requirement"
    PROCEDURE = "procedure"
    PENALTY = "penalty"
    AMENDMENT = "amendment"
    NOTE = "note"


class Amendment(BaseModel):
    """An inline `[Amendment: <date>: <description>]` marker."""

    section: str = Field(default="", description="Section the amendment applies to")
    subsection: Optional[str] = Field(default=None, description="Subsection marker, if known")
    text: str = Field(..., description="Amendment text")
    date: Optional[str] = Field(default=None, description="Date portion of the marker")
    description: Optional[str] = Field(default=None, description="Description portion of the marker")


class Definition(BaseModel):
    """A `"term" means ...` clause."""

    term: str
    definition: str
    context: str = Field(default="", description="Surrounding text (+/-100 chars)")


class RelatedSection(BaseModel):
    """A `Section <n>` cross-reference."""

    section: str
    context: str = Field(default="", description="Surrounding text (+/-50 chars)")


class ChunkMetadata(BaseModel):
    """Structural locator plus semantic annotations for a chunk."""

    part: str = Field(..., description="Part label, e.g. 'PART III'")
    part_title: str = Field(default="", description="Part heading title")
    section: str = Field(default="", description="Section number, e.g. '17' or '17.1'")
    section_title: str = Field(default="", description="Section heading title")
    subsection: Optional[str] = Field(default=None, description="Subsection marker, e.g. '(2)(a)'")
    page_number: int = Field(default=0, ge=0, description="Page the unit heading starts on")
    chunk_type: ChunkType = Field(default=ChunkType.SECTION)
    type: ProvisionType = Field(default=ProvisionType.REQUIREMENT)
    related_sections: List[RelatedSection] = Field(default_factory=list)
    definitions: Dict[str, Definition] = Field(default_factory=dict)
    amendments: List[Amendment] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list, max_length=5)
    is_amendment: bool = False
    notes: List[str] = Field(default_factory=list)


class DocumentChunk(BaseModel):
    """
    A chunk ready for embedding.

    `embedding` stays None until the ingestion pipeline assigns one.
    Instances are frozen; `with_embedding` returns a copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Structural-path chunk ID")
    text: str = Field(..., min_length=1)
    metadata: ChunkMetadata
    embedding: Optional[List[float]] = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("chunk text must not be blank")
        return v

    def with_embedding(self, vector: List[float]) -> "DocumentChunk":
        """Return a copy carrying the given embedding vector."""
        return self.model_copy(update={"embedding": list(vector)})
