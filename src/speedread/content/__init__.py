"""Reading content storage and text helpers."""

from .manager import (
    ContentManager,
    count_words,
    extract_title_from_content,
    validate_content_text,
)

__all__ = [
    "ContentManager",
    "count_words",
    "extract_title_from_content",
    "validate_content_text",
]
