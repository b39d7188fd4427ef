"""
Page Text Cleaning

Strips running headers and footers from extracted Act pages and normalises
whitespace while keeping line structure, which the segmenter's line-anchored
heading patterns depend on.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


# Running header/footer lines printed on every page of the consolidated Act
HEADER_FOOTER_PATTERNS = [
    re.compile(r'^[ \t]*Page \d+(?: of \d+)?[ \t]*$', re.MULTILINE),
    re.compile(r'^[ \t]*Condominium Act, \d{4}[ \t]*$', re.MULTILINE),
]

PAGE_NUMBER_PATTERN = re.compile(r'Page (\d+)')


@dataclass(frozen=True)
class PageText:
    """Cleaned text of one page with its printed page number."""
    page_number: int
    text: str


def clean_page_text(text: str) -> str:
    """
    Clean raw page text.

    - Normalise line endings
    - Drop header/footer lines
    - Collapse runs of spaces and tabs
    - Strip each line
    - Collapse 3+ newlines to a paragraph break

    Args:
        text: Raw extracted page text

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = text.replace('\u00a0', ' ')

    for pattern in HEADER_FOOTER_PATTERNS:
        text = pattern.sub('', text)

    text = re.sub(r'[ \t]+', ' ', text)
    text = '\n'.join(line.strip() for line in text.split('\n'))
    text = re.sub(r'\n{3,}', '\n\n', text)

    return text.strip()


def extract_page_number(text: str) -> Optional[int]:
    """Return the printed `Page <n>` number, or None if absent."""
    match = PAGE_NUMBER_PATTERN.search(text or "")
    return int(match.group(1)) if match else None


def join_pages(pages: Sequence[PageText]) -> Tuple[str, List[Tuple[int, int]]]:
    """
    Concatenate cleaned pages into one document.

    Returns:
        (text, page_breaks) where page_breaks holds (start_offset, page_number)
        for every non-empty page, in offset order.
    """
    parts: List[str] = []
    page_breaks: List[Tuple[int, int]] = []
    offset = 0

    for page in pages:
        if not page.text:
            continue
        if parts:
            offset += 2  # paragraph break joining pages
        page_breaks.append((offset, page.page_number))
        parts.append(page.text)
        offset += len(page.text)

    return "\n\n".join(parts), page_breaks
