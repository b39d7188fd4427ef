"""
Prompt Template

One parameterized instruction template for the Condominium Act assistant.
Variants (tone, citation style, answer length) are options, not copies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from ..context.citation import CitationStyle


class Tone(str, Enum):
    """Register of the generated answer."""
    PLAIN = "plain"
    FORMAL = "formal"


@dataclass
class PromptOptions:
    """
    Options for rendering the instruction.

    Attributes:
        tone: Plain-language or formal register
        citation_style: How section numbers are cited in the answer
        max_points: Upper bound on bullet points
        max_tokens: Generation length limit
        temperature: Sampling temperature
        focus: Subject area emphasised in the answer
    """
    tone: Tone = Tone.PLAIN
    citation_style: CitationStyle = CitationStyle.BRACKETED
    max_points: int = 5
    max_tokens: int = 400
    temperature: float = 0.1
    focus: str = "condo board responsibilities"


class PromptTemplate:
    """Renders the system instruction for the generation model."""

    HEADER = "You are a knowledgeable assistant specializing in the Ontario Condominium Act."

    def render(self, options: PromptOptions) -> str:
        """Render the instruction text (the context is passed separately)."""
        lines: List[str] = [
            self.HEADER,
            "Provide clear, structured answers following these rules:",
            "",
            "1. Start with a brief 1-2 sentence overview",
            "2. List key responsibilities/requirements using bullet points",
            "3. Each point must:",
            "   - Focus on one specific duty or power",
            f"   - {self._citation_rule(options.citation_style)}",
        ]

        if Tone(options.tone) == Tone.PLAIN:
            lines += [
                "   - Explain in plain, practical language",
                "   - Avoid legal jargon",
            ]
        else:
            lines += [
                "   - Use precise statutory language",
                "   - Quote the provision where wording matters",
            ]

        lines += [
            f"4. Limit to 3-{max(options.max_points, 3)} most important points",
            "5. End with a note if there are additional responsibilities not covered",
            "6. Answer only from the context provided; if it does not cover the question, say so",
        ]

        if options.focus:
            lines += ["", f"Focus on {options.focus}."]

        return "\n".join(lines)

    @staticmethod
    def _citation_rule(style: CitationStyle) -> str:
        if CitationStyle(style) == CitationStyle.BRACKETED:
            return "Include the exact section number in [brackets]"
        return "Cite the exact section number inline (e.g. \"under section 17 (2)\")"
