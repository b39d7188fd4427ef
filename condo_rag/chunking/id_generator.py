"""
Structural Chunk ID Generator

Chunk IDs are slugs of the structural path (part, section, subsection or
amendment date), so re-ingesting the Act produces the SAME IDs and the
vector index overwrites instead of duplicating.
"""

import re
from typing import Dict, Optional


def slugify(value: str) -> str:
    """Lowercase and replace runs of anything but [a-z0-9.] with '-'."""
    return re.sub(r'[^a-z0-9.]+', '-', value.lower()).strip('-')


def generate_chunk_id(
    part: str,
    section: Optional[str] = None,
    subsection: Optional[str] = None,
    window: Optional[int] = None,
) -> str:
    """
    Generate a deterministic chunk ID.

    Examples:
        ("PART III", "17")            -> "part-iii-17"
        ("PART III", "17", "(2)(a)")  -> "part-iii-17-2-a"
        ("PART III", "17", window=2)  -> "part-iii-17-w2"

    Args:
        part: Part label
        section: Section number
        subsection: Subsection marker
        window: 1-based window number when a unit spans several windows

    Returns:
        Slug ID
    """
    pieces = [slugify(p) for p in (part, section, subsection) if p]
    if window is not None:
        pieces.append(f"w{window}")
    return "-".join(p for p in pieces if p)


def generate_amendment_id(part: str, section: Optional[str], date: Optional[str]) -> str:
    """ID of an amendment chunk: "<part>-<section>-amendment-<date|unknown>"."""
    base = generate_chunk_id(part, section)
    return f"{base}-amendment-{slugify(date or '') or 'unknown'}"


class ChunkIdRegistry:
    """
    Keeps IDs unique within one ingestion run.

    The first use of an ID returns it unchanged; later uses get "~2", "~3"...
    in the order they are seen, so the result is still deterministic.
    """

    def __init__(self):
        self._seen: Dict[str, int] = {}

    def claim(self, chunk_id: str) -> str:
        count = self._seen.get(chunk_id, 0) + 1
        self._seen[chunk_id] = count
        if count == 1:
            return chunk_id
        # slugify never emits "~", so suffixed IDs cannot collide with natural ones
        return f"{chunk_id}~{count}"
