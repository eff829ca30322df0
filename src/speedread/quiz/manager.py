"""Comprehension quiz management.

Generates (or reuses) a session's question set and scores submitted
answers. Scoring is idempotent: a session is scored at most once.
"""

import logging
from datetime import datetime
from typing import Optional

from ..db.models import ComprehensionQuestion, ComprehensionResult
from ..db.schemas import (
    ComprehensionResultResponse,
    GenerateQuestionsRequest,
    Question,
    QuestionsResponse,
    SubmitAnswersRequest,
)
from ..db.sqlite import Database
from ..errors import ConflictError, InvalidInputError, NotFoundError, UpstreamUnavailableError
from .generators import QuestionGenerator
from .scoring import calculate_score, validate_questions

logger = logging.getLogger(__name__)


def _to_question(row: ComprehensionQuestion) -> Question:
    return Question(
        index=row.index,
        prompt=row.prompt,
        options=row.get_options(),
        correct_index=row.correct_index,
    )


def _to_result(row: ComprehensionResult) -> ComprehensionResultResponse:
    return ComprehensionResultResponse(
        id=row.id,
        session_id=row.session_id,
        answers=row.get_answers(),
        score_percent=row.score_percent,
        completed_at=datetime.fromisoformat(row.completed_at),
    )


class QuizManager:
    """Manages question sets and comprehension results."""

    def __init__(self, db: Database, generator: Optional[QuestionGenerator] = None):
        """Initialize quiz manager.

        Args:
            db: Database instance
            generator: Source of new question sets
        """
        self.db = db
        self.generator = generator

    def generate_questions(self, request: GenerateQuestionsRequest) -> QuestionsResponse:
        """Get the session's question set, generating it on first request.

        Raises:
            NotFoundError: If the session or its content does not exist
            UpstreamUnavailableError: If no generator is configured or it fails
            InvalidInputError: If the generated set is malformed
        """
        with self.db.get_session() as s:
            reading_session = self.db.get_reading_session(request.session_id, session=s)
            if not reading_session:
                raise NotFoundError(f"Session not found: {request.session_id}")

            content = self.db.get_content(reading_session.content_id, session=s)
            if not content:
                raise NotFoundError("Content not found for session")

            existing = self.db.get_questions(request.session_id, session=s)
            if existing:
                return QuestionsResponse(
                    session_id=request.session_id,
                    questions=[_to_question(q) for q in existing],
                )

            if self.generator is None:
                raise UpstreamUnavailableError("No question generator configured")

            raw = self.generator.generate(content.text, content.language, request.count)
            questions = validate_questions(raw, request.count)
            self.db.add_questions(request.session_id, questions, session=s)
            logger.info(
                "Generated %d questions for session %s", len(questions), request.session_id
            )

            return QuestionsResponse(session_id=request.session_id, questions=questions)

    def submit_answers(self, request: SubmitAnswersRequest) -> ComprehensionResultResponse:
        """Score a session's answers.

        If the session already has a result it is returned unchanged.

        Raises:
            NotFoundError: If the session does not exist
            ConflictError: If no question set exists for the session
            InvalidInputError: If the answer count differs from the question count
        """
        with self.db.get_session() as s:
            existing = self.db.get_result(request.session_id, session=s)
            if existing:
                logger.debug("Session %s already scored", request.session_id)
                return _to_result(existing)

            if not self.db.get_reading_session(request.session_id, session=s):
                raise NotFoundError(f"Session not found: {request.session_id}")

            rows = self.db.get_questions(request.session_id, session=s)
            if not rows:
                raise ConflictError(f"No questions found for session: {request.session_id}")

            if len(rows) != len(request.answers):
                raise InvalidInputError(
                    f"Expected {len(rows)} answers, got {len(request.answers)}"
                )

            questions = [_to_question(q) for q in rows]
            score = calculate_score(request.answers, questions)
            result = self.db.create_result(request.session_id, request.answers, score, session=s)
            logger.info("Session %s scored %d%%", request.session_id, score)
            return _to_result(result)

    def get_result_by_session(self, session_id: str) -> Optional[ComprehensionResultResponse]:
        """Get the comprehension result for a session."""
        result = self.db.get_result(session_id)
        return _to_result(result) if result else None

    def get_questions_by_session(self, session_id: str) -> list[Question]:
        """Get a session's questions ordered by index."""
        return [_to_question(q) for q in self.db.get_questions(session_id)]
