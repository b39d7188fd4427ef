"""
PDF Page Loader

Extracts per-page text from the Act PDF with pypdf.
"""

import logging
from pathlib import Path
from typing import List

import pypdf

from .cleaner import PageText, clean_page_text, extract_page_number

logger = logging.getLogger(__name__)


def load_pdf_pages(file_path: str) -> List[PageText]:
    """
    Extract cleaned text for every page of a PDF.

    The printed `Page <n>` number is used when present, otherwise the
    1-based page index.

    Args:
        file_path: Path to PDF file

    Returns:
        List of PageText in page order

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    pages: List[PageText] = []
    with open(path, 'rb') as f:
        reader = pypdf.PdfReader(f)
        for index, page in enumerate(reader.pages, 1):
            raw = page.extract_text() or ""
            printed = extract_page_number(raw)
            pages.append(PageText(
                page_number=printed if printed is not None else index,
                text=clean_page_text(raw),
            ))

    logger.info(f"Extracted {len(pages)} pages from {path.name}")
    return pages
