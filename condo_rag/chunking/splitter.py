"""
Recursive Character Splitter

Cuts text into windows of at most `chunk_size` characters. Each window after
the first starts with the last `chunk_overlap` characters of the previous
window, exactly. Split points prefer paragraph breaks, then sentence ends,
then clause punctuation, and fall back to a hard cut.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple


DEFAULT_SEPARATORS: Tuple[str, ...] = (
    "\n\n",
    ". ", "? ", "! ",
    "; ", ", ",
)


@dataclass(frozen=True)
class TextWindow:
    """A window and its character span in the source text."""
    text: str
    start: int
    end: int


class RecursiveCharacterSplitter:
    """
    Separator-priority text splitter.

    Attributes:
        chunk_size: Maximum window length in characters
        chunk_overlap: Characters shared between consecutive windows
        separators: Split candidates, highest priority first
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: Sequence[str] = DEFAULT_SEPARATORS
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = tuple(separators)

    def split(self, text: str) -> List[TextWindow]:
        """
        Split text into overlapping windows.

        Args:
            text: Text to split

        Returns:
            Windows in order; empty for blank text
        """
        if not text.strip():
            return []

        windows: List[TextWindow] = []
        start = 0
        length = len(text)

        while True:
            if length - start <= self.chunk_size:
                windows.append(TextWindow(text[start:], start, length))
                break

            end = self._find_split(text, start)
            windows.append(TextWindow(text[start:end], start, end))
            start = end - self.chunk_overlap

        return windows

    def split_text(self, text: str) -> List[str]:
        return [w.text for w in self.split(text)]

    def _find_split(self, text: str, start: int) -> int:
        """Pick the end of the window starting at `start`."""
        limit = start + self.chunk_size
        # The window must extend past the overlap or the next window would not advance.
        floor = start + self.chunk_overlap + 1

        for separator in self.separators:
            index = text.rfind(separator, start, limit)
            if index == -1:
                continue
            end = index + len(separator)
            if end >= floor:
                return end

        return limit
