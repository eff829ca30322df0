"""SQLAlchemy ORM models for local SQLite database.

Tables:
- reading_content: Texts available for reading
- reading_sessions: One row per reading session, metrics set at completion
- comprehension_questions: Question set generated for a session
- comprehension_results: Scored answers, at most one per session
- study_logs: Cached analytics summary per profile
"""

import json
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import ContentSource, Language


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class ReadingContent(Base):
    """A stored text that sessions read from."""

    __tablename__ = "reading_content"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    language: Mapped[str] = mapped_column(String(5), default=Language.EN.value)
    source: Mapped[str] = mapped_column(String(10), default=ContentSource.PASTE.value)
    title: Mapped[Optional[str]] = mapped_column(String(200))
    text: Mapped[str] = mapped_column(Text, nullable=False)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, index=True)

    sessions: Mapped[list["ReadingSession"]] = relationship(
        "ReadingSession", back_populates="content", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ReadingContent(id={self.id}, title='{self.title}', words={self.word_count})>"


class ReadingSession(Base):
    """A reading session. Metrics are written once, at completion."""

    __tablename__ = "reading_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    content_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("reading_content.id", ondelete="CASCADE"), nullable=False, index=True
    )
    mode: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    pace_wpm: Mapped[int] = mapped_column(Integer, nullable=False)
    chunk_size: Mapped[Optional[int]] = mapped_column(Integer)
    started_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, index=True)
    ended_at: Mapped[Optional[str]] = mapped_column(String(32), index=True)
    duration_ms: Mapped[int] = mapped_column(Integer, default=0)
    words_read: Mapped[int] = mapped_column(Integer, default=0)
    computed_wpm: Mapped[int] = mapped_column(Integer, default=0)

    content: Mapped["ReadingContent"] = relationship("ReadingContent", back_populates="sessions")
    questions: Mapped[list["ComprehensionQuestion"]] = relationship(
        "ComprehensionQuestion",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ComprehensionQuestion.index",
    )
    result: Mapped[Optional["ComprehensionResult"]] = relationship(
        "ComprehensionResult", back_populates="session", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ReadingSession(id={self.id}, mode={self.mode}, ended_at={self.ended_at})>"


class ComprehensionQuestion(Base):
    """One multiple-choice question belonging to a session."""

    __tablename__ = "comprehension_questions"
    __table_args__ = (UniqueConstraint("session_id", "index", name="uq_question_session_index"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("reading_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[str] = mapped_column(Text, nullable=False)  # JSON array of 4 strings
    correct_index: Mapped[int] = mapped_column(Integer, nullable=False)

    session: Mapped["ReadingSession"] = relationship("ReadingSession", back_populates="questions")

    def get_options(self) -> list[str]:
        """Get options as list."""
        return json.loads(self.options) if self.options else []

    def set_options(self, options: list[str]) -> None:
        """Set options from list."""
        self.options = json.dumps(options)


class ComprehensionResult(Base):
    """Scored answers for a session."""

    __tablename__ = "comprehension_results"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("reading_sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    answers: Mapped[str] = mapped_column(Text, nullable=False)  # JSON array of ints
    score_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)

    session: Mapped["ReadingSession"] = relationship("ReadingSession", back_populates="result")

    def get_answers(self) -> list[int]:
        """Get answers as list."""
        return json.loads(self.answers) if self.answers else []

    def set_answers(self, answers: list[int]) -> None:
        """Set answers from list."""
        self.answers = json.dumps(answers)


class StudyLog(Base):
    """Cached analytics summary, one row per profile."""

    __tablename__ = "study_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    profile: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    total_time_ms: Mapped[int] = mapped_column(Integer, default=0)
    average_wpm_by_mode: Mapped[Optional[str]] = mapped_column(Text)  # JSON dict
    average_score_percent: Mapped[int] = mapped_column(Integer, default=0)
    sessions_count: Mapped[int] = mapped_column(Integer, default=0)
    updated_at: Mapped[str] = mapped_column(
        String(32), default=utc_now_iso, onupdate=utc_now_iso
    )

    def get_average_wpm_by_mode(self) -> dict[str, int]:
        """Get per-mode averages as dict."""
        if self.average_wpm_by_mode:
            return json.loads(self.average_wpm_by_mode)
        return {}

    def set_average_wpm_by_mode(self, averages: dict[str, int]) -> None:
        """Set per-mode averages from dict."""
        self.average_wpm_by_mode = json.dumps(averages) if averages else None
