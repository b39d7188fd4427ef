"""
Context Assembler

Builds the grounding context handed to the generation model: one entry per
result in ranked order, each a citation prefix line followed by the trimmed
chunk text, entries separated by a blank line.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..schemas.search import EmptyContext, SearchResult
from .citation import CitationFormatter, CitationStyle


@dataclass
class AssembledContext:
    """Assembled grounding context."""
    text: str
    citations: List[str] = field(default_factory=list)
    result_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.result_count == 0


class ContextAssembler:
    """Concatenates ranked results into a context string."""

    SEPARATOR = "\n\n"

    def __init__(
        self,
        style: CitationStyle = CitationStyle.INLINE,
        include_relevance: bool = False,
        formatter: Optional[CitationFormatter] = None
    ):
        self.formatter = formatter or CitationFormatter(style, include_relevance)

    def format_entry(self, result: SearchResult) -> str:
        prefix = self.formatter.format(result.citation, result.score)
        body = result.text.strip()
        return f"{prefix}\n{body}" if prefix else body

    def assemble(self, results: Union[Sequence[SearchResult], EmptyContext]) -> AssembledContext:
        """
        Assemble context from ranked results.

        Args:
            results: Output of RetrievalEngine.retrieve

        Returns:
            AssembledContext (empty for EmptyContext)
        """
        if isinstance(results, EmptyContext) or not results:
            return AssembledContext(text="")

        entries = [self.format_entry(r) for r in results]
        return AssembledContext(
            text=self.SEPARATOR.join(entries),
            citations=[str(r.citation) for r in results],
            result_count=len(results),
        )


def build_context(results: Sequence[SearchResult], style: CitationStyle = CitationStyle.INLINE) -> str:
    """Convenience wrapper returning only the context text."""
    return ContextAssembler(style).assemble(results).text
