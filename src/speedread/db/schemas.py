"""Pydantic schemas for data validation.

These schemas define the request shapes accepted by the services and the
response shapes they return.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ReadingMode(str, Enum):
    """Pacing/display mode of a reading session."""

    WORD = "word"
    CHUNK = "chunk"
    PARAGRAPH = "paragraph"


class Language(str, Enum):
    """Supported content languages."""

    EN = "en"
    VI = "vi"


class ContentSource(str, Enum):
    """Where a piece of reading content came from."""

    PASTE = "paste"
    UPLOAD = "upload"
    AI = "ai"


class TimePeriod(str, Enum):
    """Preset analytics periods."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


MIN_PACE_WPM = 100
MAX_PACE_WPM = 1200
MIN_CHUNK_SIZE = 2
MAX_CHUNK_SIZE = 8


# ============================================================================
# Content Schemas
# ============================================================================


class ContentCreate(BaseModel):
    """Schema for storing a pasted or uploaded text."""

    language: Language = Field(default=Language.EN)
    source: ContentSource = Field(default=ContentSource.PASTE)
    text: str = Field(..., min_length=1)
    title: Optional[str] = None


class ContentResponse(BaseModel):
    """Schema for content responses."""

    id: str
    language: Language
    source: ContentSource
    title: Optional[str] = None
    text: str
    word_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


# ============================================================================
# Session Schemas
# ============================================================================


class SessionCreate(BaseModel):
    """Schema for starting a reading session.

    ``chunk_size`` is required in chunk mode and forbidden otherwise.
    """

    content_id: str = Field(..., min_length=1)
    mode: ReadingMode
    pace_wpm: int = Field(..., ge=MIN_PACE_WPM, le=MAX_PACE_WPM)
    chunk_size: Optional[int] = Field(None, ge=MIN_CHUNK_SIZE, le=MAX_CHUNK_SIZE)

    @model_validator(mode="after")
    def check_chunk_size(self) -> "SessionCreate":
        """Enforce chunk_size present iff mode is chunk."""
        if self.mode == ReadingMode.CHUNK and self.chunk_size is None:
            raise ValueError(
                f"Chunk size must be between {MIN_CHUNK_SIZE} and {MAX_CHUNK_SIZE} for chunk mode"
            )
        if self.mode != ReadingMode.CHUNK and self.chunk_size is not None:
            raise ValueError(f"Chunk size should not be specified for {self.mode.value} mode")
        return self


class SessionComplete(BaseModel):
    """Schema for completing a reading session."""

    session_id: str = Field(..., min_length=1)
    words_read: int = Field(..., ge=0)
    duration_ms: int = Field(..., ge=0)


class SessionResponse(BaseModel):
    """Schema for reading session responses."""

    id: str
    content_id: str
    mode: ReadingMode
    pace_wpm: int
    chunk_size: Optional[int] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_ms: int = 0
    words_read: int = 0
    computed_wpm: int = 0

    model_config = {"from_attributes": True}

    @property
    def is_completed(self) -> bool:
        return self.ended_at is not None


# ============================================================================
# Quiz Schemas
# ============================================================================


class Question(BaseModel):
    """A single multiple-choice comprehension question."""

    index: int = Field(..., ge=1)
    prompt: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=4, max_length=4)
    correct_index: int = Field(..., ge=0, le=3)

    model_config = {"from_attributes": True}


class GenerateQuestionsRequest(BaseModel):
    """Schema for requesting a question set for a session."""

    session_id: str = Field(..., min_length=1)
    count: int = Field(default=5, ge=1, le=10)


class QuestionsResponse(BaseModel):
    """A session's question set."""

    session_id: str
    questions: list[Question]


class SubmitAnswersRequest(BaseModel):
    """Schema for submitting quiz answers."""

    session_id: str = Field(..., min_length=1)
    answers: list[int] = Field(..., min_length=1)

    @field_validator("answers")
    @classmethod
    def check_answer_range(cls, v: list[int]) -> list[int]:
        """Each answer must be an option index 0-3."""
        for position, answer in enumerate(v, 1):
            if not 0 <= answer <= 3:
                raise ValueError(f"Answer {position} must be 0, 1, 2, or 3")
        return v


class ComprehensionResultResponse(BaseModel):
    """Schema for comprehension result responses."""

    id: str
    session_id: str
    answers: list[int]
    score_percent: int = Field(..., ge=0, le=100)
    completed_at: datetime


# ============================================================================
# Analytics Schemas
# ============================================================================


class AnalyticsSummary(BaseModel):
    """Aggregated reading analytics."""

    total_time_ms: int = Field(default=0, ge=0)
    average_wpm_by_mode: dict[str, int] = Field(default_factory=dict)
    average_score_percent: int = Field(default=0, ge=0, le=100)
    sessions_count: int = Field(default=0, ge=0)
