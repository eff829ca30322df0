"""Reading content management.

Stores pasted or uploaded texts together with their word counts.
"""

import logging
import re
from typing import Optional

from ..db.schemas import ContentCreate, ContentResponse
from ..db.sqlite import Database
from ..errors import InvalidInputError

logger = logging.getLogger(__name__)

SENTENCE_END = re.compile(r"[.!?]")


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len(text.split())


def validate_content_text(text: str, min_words: int = 1) -> bool:
    """Check that text holds at least ``min_words`` words."""
    return count_words(text) >= min_words


def extract_title_from_content(text: str, max_length: int = 50) -> str:
    """Derive a title from the first sentence of a text.

    Args:
        text: Content text
        max_length: Longest title returned, ellipsis included

    Returns:
        The first sentence, truncated with "..." if too long,
        or "Untitled Content" when the text has no sentence.
    """
    first_sentence = SENTENCE_END.split(text, maxsplit=1)[0].strip()

    if not first_sentence:
        return "Untitled Content"

    if len(first_sentence) <= max_length:
        return first_sentence

    return first_sentence[: max_length - 3] + "..."


class ContentManager:
    """Creates and looks up reading content."""

    def __init__(self, db: Database):
        """Initialize content manager.

        Args:
            db: Database instance
        """
        self.db = db

    def create_content(self, request: ContentCreate) -> ContentResponse:
        """Store a new text.

        Raises:
            InvalidInputError: If the text contains no words
        """
        if not validate_content_text(request.text):
            raise InvalidInputError("Content must contain at least one word")
        word_count = count_words(request.text)

        if not request.title:
            request = request.model_copy(
                update={"title": extract_title_from_content(request.text)}
            )

        content = self.db.create_content(request, word_count)
        logger.info("Stored content %s (%d words)", content.id, word_count)
        return ContentResponse.model_validate(content)

    def get_content(self, content_id: str) -> Optional[ContentResponse]:
        """Get content by ID."""
        content = self.db.get_content(content_id)
        return ContentResponse.model_validate(content) if content else None

    def get_recent_content(self, limit: int = 10) -> list[ContentResponse]:
        """Get the most recently stored texts."""
        return [ContentResponse.model_validate(c) for c in self.db.get_recent_content(limit)]
