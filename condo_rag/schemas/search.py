"""
Search Result Schema

Query-scoped projections returned by the retrieval engine.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Citation:
    """Structural locator for a retrieved chunk."""
    part: str = ""
    part_title: str = ""
    section: str = ""
    section_title: str = ""
    subsection: str = ""

    @classmethod
    def from_metadata(cls, metadata: Dict[str, Any]) -> "Citation":
        def text(key: str) -> str:
            value = metadata.get(key)
            return str(value).strip() if value is not None else ""

        return cls(
            part=text("part"),
            part_title=text("part_title"),
            section=text("section"),
            section_title=text("section_title"),
            subsection=text("subsection"),
        )

    @property
    def title(self) -> str:
        """Most specific heading title available."""
        return self.section_title or self.part_title

    def is_empty(self) -> bool:
        return not (self.part or self.section or self.subsection or self.title)

    def __str__(self) -> str:
        pieces = []
        if self.part:
            pieces.append(self.part)
        if self.section:
            locator = f"Section {self.section}"
            if self.subsection:
                locator += f" {self.subsection}"
            pieces.append(locator)
        elif self.subsection:
            pieces.append(f"Subsection {self.subsection}")
        label = ", ".join(pieces)
        if self.title:
            label = f"{label} - {self.title}" if label else self.title
        return label


@dataclass
class SearchResult:
    """One retrieved chunk with its relevance score in [0, 1]."""
    text: str
    score: float
    citation: Citation
    chunk_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EmptyContext:
    """
    Signal that no chunk cleared the relevance threshold.

    Returned instead of an empty list so callers branch to a fallback
    response rather than generate from no context.
    """
    query: str
    candidates_seen: int = 0
    best_score: Optional[float] = None
    reason: str = "no result above threshold"

    def __bool__(self) -> bool:
        return False

    def __len__(self) -> int:
        return 0
