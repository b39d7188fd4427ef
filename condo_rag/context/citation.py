"""
Citation Formatting

Formats the structural locator printed above each context entry.
Empty locator fields are omitted.
"""

from enum import Enum
from typing import Optional

from ..schemas.search import Citation


class CitationStyle(str, Enum):
    """How the locator is rendered."""
    INLINE = "inline"          # Section 17 (2) - Objects:
    BRACKETED = "bracketed"    # [PART III, Section 17 (2) - Objects]


class CitationFormatter:
    """
    Formats citation prefixes.

    Examples (INLINE):
        PART III, Section 17 (2) - Objects:
        PART III, Section 17 (2) - Objects [Relevance: 87%]:
    """

    def __init__(self, style: CitationStyle = CitationStyle.INLINE, include_relevance: bool = False):
        self.style = CitationStyle(style)
        self.include_relevance = include_relevance

    def format(self, citation: Citation, score: Optional[float] = None) -> str:
        """Return the prefix line, or "" when the citation is empty."""
        if citation.is_empty():
            return ""

        label = str(citation)
        relevance = ""
        if self.include_relevance and score is not None:
            relevance = f" [Relevance: {round(score * 100)}%]"

        if self.style == CitationStyle.BRACKETED:
            return f"[{label}]{relevance}"
        return f"{label}{relevance}:"
