"""
Document Validator

Rejects raw documents that cannot be segmented, before any batching starts.
"""

from typing import Any, Optional


class ValidationError(Exception):
    """Raised when document validation fails"""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(f"Validation failed{f' for {field}' if field else ''}: {message}")


def validate_raw_text(raw_text: Any, min_chars: int = 20) -> str:
    """
    Validate raw document text.

    Args:
        raw_text: Candidate document text
        min_chars: Minimum stripped length

    Returns:
        The text unchanged

    Raises:
        ValidationError: If the text is not usable
    """
    if isinstance(raw_text, bytes):
        raise ValidationError("expected decoded text, got bytes", "raw_text")

    if not isinstance(raw_text, str):
        raise ValidationError(f"expected str, got {type(raw_text).__name__}", "raw_text")

    if not raw_text.strip():
        raise ValidationError("raw_text is empty or whitespace only", "raw_text")

    if '\x00' in raw_text:
        raise ValidationError("raw_text contains NUL bytes (binary content?)", "raw_text")

    stripped_len = len(raw_text.strip())
    if stripped_len < min_chars:
        raise ValidationError(
            f"raw_text too short ({stripped_len} chars, minimum {min_chars})",
            "raw_text"
        )

    return raw_text
