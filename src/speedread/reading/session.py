"""Reading session management.

Handles starting, completing and querying reading sessions. A session is
created with zero metrics and completed exactly once.
"""

import logging
from typing import Optional

from ..db.models import ReadingSession, utc_now_iso
from ..db.schemas import (
    MAX_PACE_WPM,
    MIN_PACE_WPM,
    SessionComplete,
    SessionCreate,
    SessionResponse,
)
from ..db.sqlite import Database
from ..errors import ConflictError, InvalidInputError, NotFoundError
from .metrics import compute_wpm, validate_session_metrics

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages the reading session lifecycle."""

    def __init__(self, db: Database):
        """Initialize session manager.

        Args:
            db: Database instance
        """
        self.db = db

    def start_session(self, request: SessionCreate) -> SessionResponse:
        """Start a new reading session.

        Args:
            request: Validated session parameters

        Returns:
            The created session with zero metrics

        Raises:
            NotFoundError: If the content does not exist
        """
        with self.db.get_session() as s:
            content = self.db.get_content(request.content_id, session=s)
            if not content:
                raise NotFoundError(f"Content not found: {request.content_id}")

            db_session = self.db.create_reading_session(request, session=s)
            logger.info(
                "Started %s session %s at %d WPM", request.mode.value, db_session.id, request.pace_wpm
            )
            return SessionResponse.model_validate(db_session)

    def complete_session(self, request: SessionComplete) -> SessionResponse:
        """Complete a session and record its metrics.

        Args:
            request: Words read and exposure time

        Returns:
            The completed session

        Raises:
            NotFoundError: If the session does not exist
            ConflictError: If the session was already completed
        """
        with self.db.get_session() as s:
            db_session = self.db.get_reading_session(request.session_id, session=s)
            if not db_session:
                raise NotFoundError(f"Session not found: {request.session_id}")

            if db_session.ended_at:
                raise ConflictError(f"Session already completed: {request.session_id}")

            content = self.db.get_content(db_session.content_id, session=s)
            if content:
                check = validate_session_metrics(
                    request.words_read, request.duration_ms, content.word_count
                )
                if not check.valid:
                    logger.warning(
                        "Session %s has implausible metrics: %s",
                        request.session_id,
                        "; ".join(check.errors),
                    )

            db_session.ended_at = utc_now_iso()
            db_session.duration_ms = request.duration_ms
            db_session.words_read = request.words_read
            db_session.computed_wpm = compute_wpm(request.words_read, request.duration_ms)
            s.flush()

            logger.info(
                "Completed session %s: %d words in %d ms (%d WPM)",
                db_session.id,
                db_session.words_read,
                db_session.duration_ms,
                db_session.computed_wpm,
            )
            return SessionResponse.model_validate(db_session)

    def get_session(self, session_id: str) -> Optional[SessionResponse]:
        """Get session by ID."""
        db_session = self.db.get_reading_session(session_id)
        return SessionResponse.model_validate(db_session) if db_session else None

    def get_sessions_by_content(self, content_id: str) -> list[SessionResponse]:
        """Get sessions for a piece of content, oldest first."""
        return [
            SessionResponse.model_validate(s)
            for s in self.db.get_sessions_by_content(content_id)
        ]

    def get_recent_sessions(
        self, limit: int = 10, completed_only: bool = False
    ) -> list[SessionResponse]:
        """Get recent sessions, optionally only completed ones."""
        return [
            SessionResponse.model_validate(s)
            for s in self.db.get_recent_sessions(limit=limit, completed_only=completed_only)
        ]

    def update_session_pace(self, session_id: str, pace_wpm: int) -> SessionResponse:
        """Change the pace of an active session.

        Raises:
            InvalidInputError: If the pace is out of range
            NotFoundError: If the session does not exist
            ConflictError: If the session was already completed
        """
        if not MIN_PACE_WPM <= pace_wpm <= MAX_PACE_WPM:
            raise InvalidInputError(
                f"Pace must be between {MIN_PACE_WPM} and {MAX_PACE_WPM} WPM"
            )

        with self.db.get_session() as s:
            db_session: Optional[ReadingSession] = self.db.get_reading_session(
                session_id, session=s
            )
            if not db_session:
                raise NotFoundError(f"Session not found: {session_id}")
            if db_session.ended_at:
                raise ConflictError(f"Session already completed: {session_id}")

            db_session.pace_wpm = pace_wpm
            s.flush()
            return SessionResponse.model_validate(db_session)
