"""SQLite database operations.

Handles database connection, session management, and CRUD operations.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import (
    Base,
    ComprehensionQuestion,
    ComprehensionResult,
    ReadingContent,
    ReadingSession,
    StudyLog,
    utc_now_iso,
)
from .schemas import AnalyticsSummary, ContentCreate, Question, SessionCreate

logger = logging.getLogger(__name__)


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     SPEEDREAD_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "SPEEDREAD_DB_PATH",
                str(Path.home() / ".speedread" / "speedread.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases must share one connection across sessions
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _run(self, fn, session: Optional[Session] = None):
        """Run ``fn`` in the given session, or in a fresh committed one."""
        if session:
            return fn(session)
        with self.get_session() as s:
            result = fn(s)
            s.flush()
            if isinstance(result, list):
                for item in result:
                    if isinstance(item, Base):
                        s.expunge(item)
            elif isinstance(result, Base):
                s.expunge(result)
            return result

    # ========================================================================
    # Content Operations
    # ========================================================================

    def create_content(
        self, content: ContentCreate, word_count: int, session: Optional[Session] = None
    ) -> ReadingContent:
        """Create a new content record."""

        def _create(s: Session) -> ReadingContent:
            db_content = ReadingContent(
                language=content.language.value,
                source=content.source.value,
                title=content.title,
                text=content.text,
                word_count=word_count,
            )
            s.add(db_content)
            s.flush()
            return db_content

        return self._run(_create, session)

    def get_content(
        self, content_id: str, session: Optional[Session] = None
    ) -> Optional[ReadingContent]:
        """Get content by ID."""
        return self._run(lambda s: s.get(ReadingContent, content_id), session)

    def get_recent_content(
        self, limit: int = 10, session: Optional[Session] = None
    ) -> list[ReadingContent]:
        """Get the most recently created content, newest first."""

        def _get(s: Session) -> list[ReadingContent]:
            stmt = (
                select(ReadingContent)
                .order_by(ReadingContent.created_at.desc())
                .limit(limit)
            )
            return list(s.execute(stmt).scalars().all())

        return self._run(_get, session)

    # ========================================================================
    # Reading Session Operations
    # ========================================================================

    def create_reading_session(
        self, request: SessionCreate, session: Optional[Session] = None
    ) -> ReadingSession:
        """Create a session record with zero metrics."""

        def _create(s: Session) -> ReadingSession:
            db_session = ReadingSession(
                content_id=request.content_id,
                mode=request.mode.value,
                pace_wpm=request.pace_wpm,
                chunk_size=request.chunk_size,
                started_at=utc_now_iso(),
                ended_at=None,
                duration_ms=0,
                words_read=0,
                computed_wpm=0,
            )
            s.add(db_session)
            s.flush()
            return db_session

        return self._run(_create, session)

    def get_reading_session(
        self, session_id: str, session: Optional[Session] = None
    ) -> Optional[ReadingSession]:
        """Get a reading session by ID."""
        return self._run(lambda s: s.get(ReadingSession, session_id), session)

    def get_sessions_by_content(
        self, content_id: str, session: Optional[Session] = None
    ) -> list[ReadingSession]:
        """Get all sessions for a piece of content, oldest first."""

        def _get(s: Session) -> list[ReadingSession]:
            stmt = (
                select(ReadingSession)
                .where(ReadingSession.content_id == content_id)
                .order_by(ReadingSession.started_at)
            )
            return list(s.execute(stmt).scalars().all())

        return self._run(_get, session)

    def get_recent_sessions(
        self,
        limit: int = 10,
        completed_only: bool = False,
        session: Optional[Session] = None,
    ) -> list[ReadingSession]:
        """Get the most recently started sessions, newest first."""

        def _get(s: Session) -> list[ReadingSession]:
            stmt = select(ReadingSession)
            if completed_only:
                stmt = stmt.where(ReadingSession.ended_at.is_not(None))
            stmt = stmt.order_by(ReadingSession.started_at.desc()).limit(limit)
            return list(s.execute(stmt).scalars().all())

        return self._run(_get, session)

    def get_sessions_with_scores(
        self,
        start: Optional[str] = None,
        end: Optional[str] = None,
        mode: Optional[str] = None,
        session: Optional[Session] = None,
    ) -> list[tuple[ReadingSession, Optional[int]]]:
        """Get completed sessions joined with their comprehension score.

        Args:
            start: Inclusive lower bound on ended_at (ISO string)
            end: Inclusive upper bound on ended_at (ISO string)
            mode: Restrict to one reading mode

        Returns:
            (session, score_percent or None) pairs ordered by ended_at
        """

        def _get(s: Session) -> list[tuple[ReadingSession, Optional[int]]]:
            stmt = (
                select(ReadingSession, ComprehensionResult.score_percent)
                .outerjoin(
                    ComprehensionResult,
                    ComprehensionResult.session_id == ReadingSession.id,
                )
                .where(ReadingSession.ended_at.is_not(None))
            )
            if start:
                stmt = stmt.where(ReadingSession.ended_at >= start)
            if end:
                stmt = stmt.where(ReadingSession.ended_at <= end)
            if mode:
                stmt = stmt.where(ReadingSession.mode == mode)
            stmt = stmt.order_by(ReadingSession.ended_at)

            rows = [(row[0], row[1]) for row in s.execute(stmt).all()]
            for reading_session, _ in rows:
                s.expunge(reading_session)
            return rows

        return self._run(_get, session)

    # ========================================================================
    # Quiz Operations
    # ========================================================================

    def add_questions(
        self,
        session_id: str,
        questions: list[Question],
        session: Optional[Session] = None,
    ) -> None:
        """Store a question set for a session."""

        def _add(s: Session) -> None:
            for question in questions:
                db_question = ComprehensionQuestion(
                    session_id=session_id,
                    index=question.index,
                    prompt=question.prompt,
                    correct_index=question.correct_index,
                )
                db_question.set_options(question.options)
                s.add(db_question)
            s.flush()

        self._run(_add, session)

    def get_questions(
        self, session_id: str, session: Optional[Session] = None
    ) -> list[ComprehensionQuestion]:
        """Get a session's questions ordered by index."""

        def _get(s: Session) -> list[ComprehensionQuestion]:
            stmt = (
                select(ComprehensionQuestion)
                .where(ComprehensionQuestion.session_id == session_id)
                .order_by(ComprehensionQuestion.index)
            )
            return list(s.execute(stmt).scalars().all())

        return self._run(_get, session)

    def get_result(
        self, session_id: str, session: Optional[Session] = None
    ) -> Optional[ComprehensionResult]:
        """Get the comprehension result for a session."""

        def _get(s: Session) -> Optional[ComprehensionResult]:
            stmt = select(ComprehensionResult).where(
                ComprehensionResult.session_id == session_id
            )
            return s.execute(stmt).scalar_one_or_none()

        return self._run(_get, session)

    def create_result(
        self,
        session_id: str,
        answers: list[int],
        score_percent: int,
        session: Optional[Session] = None,
    ) -> ComprehensionResult:
        """Store a scored result for a session."""

        def _create(s: Session) -> ComprehensionResult:
            db_result = ComprehensionResult(
                session_id=session_id,
                score_percent=score_percent,
                completed_at=utc_now_iso(),
            )
            db_result.set_answers(answers)
            s.add(db_result)
            s.flush()
            return db_result

        return self._run(_create, session)

    # ========================================================================
    # Study Log Operations
    # ========================================================================

    def get_study_log(
        self, profile: str, session: Optional[Session] = None
    ) -> Optional[StudyLog]:
        """Get the cached summary for a profile."""

        def _get(s: Session) -> Optional[StudyLog]:
            stmt = select(StudyLog).where(StudyLog.profile == profile)
            return s.execute(stmt).scalar_one_or_none()

        return self._run(_get, session)

    def upsert_study_log(
        self,
        profile: str,
        summary: AnalyticsSummary,
        session: Optional[Session] = None,
    ) -> StudyLog:
        """Create or overwrite the cached summary for a profile."""

        def _upsert(s: Session) -> StudyLog:
            stmt = select(StudyLog).where(StudyLog.profile == profile)
            log = s.execute(stmt).scalar_one_or_none()
            if log is None:
                log = StudyLog(profile=profile)
                s.add(log)
                logger.debug("Creating study log for profile %s", profile)

            log.total_time_ms = summary.total_time_ms
            log.set_average_wpm_by_mode(summary.average_wpm_by_mode)
            log.average_score_percent = summary.average_score_percent
            log.sessions_count = summary.sessions_count
            log.updated_at = utc_now_iso()
            s.flush()
            return log

        return self._run(_upsert, session)
