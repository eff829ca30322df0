"""Database module for local SQLite storage."""

from .models import (
    ComprehensionQuestion,
    ComprehensionResult,
    ReadingContent,
    ReadingSession,
    StudyLog,
)
from .schemas import (
    AnalyticsSummary,
    ContentCreate,
    Question,
    ReadingMode,
    SessionComplete,
    SessionCreate,
)
from .sqlite import Database

__all__ = [
    "ComprehensionQuestion",
    "ComprehensionResult",
    "ReadingContent",
    "ReadingSession",
    "StudyLog",
    "AnalyticsSummary",
    "ContentCreate",
    "Question",
    "ReadingMode",
    "SessionComplete",
    "SessionCreate",
    "Database",
]
