"""
Semantic Metadata Extraction

Pure functions over a unit's text: each call scans the whole text in one
pass and keeps no state between calls.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

from ..schemas.chunk import Amendment, Definition, ProvisionType, RelatedSection


AMENDMENT_PATTERN = re.compile(r'\[Amendment:\s*([^\]]+)\]')
NOTE_PATTERN = re.compile(r'^[ \t]*Note:[ \t]*(.+?)[ \t]*$', re.MULTILINE)
DEFINITION_PATTERN = re.compile(r'["“]([^"”]+)["”]\s+means\s+([^.]+)')
CROSS_REFERENCE_PATTERN = re.compile(r'\bSection \d+(?:\.\d+)?')

DEFINITION_CONTEXT_CHARS = 100
CROSS_REFERENCE_CONTEXT_CHARS = 50

TOPIC_STOPWORDS = frozenset({'this', 'that', 'with', 'from', 'have', 'were'})
MAX_TOPICS = 5

# First hit wins, in this order.
TYPE_RULES = [
    (ProvisionType.DEFINITION, ('means', 'definition')),
    (ProvisionType.REQUIREMENT, ('shall', 'must')),
    (ProvisionType.PROCEDURE, ('may', 'procedure')),
    (ProvisionType.PENALTY, ('offence', 'liable')),
    (ProvisionType.AMENDMENT, ('[Amendment:',)),
    (ProvisionType.NOTE, ('Note:',)),
]


@dataclass
class SemanticMetadata:
    """Everything extracted from one structural unit."""
    type: ProvisionType = ProvisionType.REQUIREMENT
    definitions: Dict[str, Definition] = field(default_factory=dict)
    amendments: List[Amendment] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    related_sections: List[RelatedSection] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)

    @property
    def is_amendment(self) -> bool:
        return bool(self.amendments)


def _window(text: str, start: int, end: int, radius: int) -> str:
    return text[max(0, start - radius):end + radius]


def extract_amendments(text: str, section: str = "") -> List[Amendment]:
    """
    Extract `[Amendment: <date>: <description>]` markers.

    The body is split on its first colon. A body without a colon is all date.
    """
    amendments = []
    for match in AMENDMENT_PATTERN.finditer(text):
        body = match.group(1).strip()
        date, sep, description = body.partition(':')
        date = date.strip() or None
        description = description.strip() if sep else None
        amendments.append(Amendment(
            section=section,
            text=description or body,
            date=date,
            description=description or None,
        ))
    return amendments


def extract_notes(text: str) -> List[str]:
    """Extract trimmed text of lines beginning with `Note:`."""
    return [m.group(1).strip() for m in NOTE_PATTERN.finditer(text) if m.group(1).strip()]


def extract_definitions(text: str) -> Dict[str, Definition]:
    """Extract `"term" means ...` clauses keyed by term. Later duplicates win."""
    definitions: Dict[str, Definition] = {}
    for match in DEFINITION_PATTERN.finditer(text):
        term = match.group(1).strip()
        definitions[term] = Definition(
            term=term,
            definition=match.group(2).strip(),
            context=_window(text, match.start(), match.end(), DEFINITION_CONTEXT_CHARS),
        )
    return definitions


def extract_cross_references(text: str) -> List[RelatedSection]:
    """Extract `Section <n>[.<n>]` references in order of appearance."""
    return [
        RelatedSection(
            section=match.group(0),
            context=_window(text, match.start(), match.end(), CROSS_REFERENCE_CONTEXT_CHARS).strip(),
        )
        for match in CROSS_REFERENCE_PATTERN.finditer(text)
    ]


def extract_topics(text: str, limit: int = MAX_TOPICS) -> List[str]:
    """
    Top keywords by frequency.

    Lowercased, punctuation stripped, tokens of length <= 3 and stopwords
    dropped. Ties keep first-appearance order.
    """
    words = re.sub(r'[^\w\s]', '', text.lower()).split()
    counts = Counter(w for w in words if len(w) > 3 and w not in TOPIC_STOPWORDS)
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]


def determine_type(text: str) -> ProvisionType:
    """
    Classify a provision by fixed-priority keyword scan.

    A definition clause that also says "shall" is still a definition.
    """
    for provision_type, needles in TYPE_RULES:
        if any(needle in text for needle in needles):
            return provision_type
    return ProvisionType.REQUIREMENT


def extract_semantic_metadata(text: str, section: str = "") -> SemanticMetadata:
    """Run every extractor over one unit's text."""
    return SemanticMetadata(
        type=determine_type(text),
        definitions=extract_definitions(text),
        amendments=extract_amendments(text, section),
        notes=extract_notes(text),
        related_sections=extract_cross_references(text),
        topics=extract_topics(text),
    )
