"""Grounding-context assembly."""

from .assembler import AssembledContext, ContextAssembler, build_context
from .citation import CitationFormatter, CitationStyle

__all__ = [
    "AssembledContext",
    "ContextAssembler",
    "build_context",
    "CitationFormatter",
    "CitationStyle",
]
