"""Comprehension scoring and question-set validation."""

from typing import Any, Sequence

from ..db.schemas import Question
from ..errors import InvalidInputError
from ..utils import round_half_up

OPTIONS_PER_QUESTION = 4


def calculate_score(answers: Sequence[int], questions: Sequence[Question]) -> int:
    """Percentage of answers matching the questions' correct options.

    Raises:
        InvalidInputError: If there is not exactly one answer per question
    """
    if len(answers) != len(questions):
        raise InvalidInputError("Number of answers must match number of questions")
    if not questions:
        raise InvalidInputError("At least one question is required")

    correct = sum(
        1 for answer, question in zip(answers, questions) if answer == question.correct_index
    )
    return round_half_up(correct / len(questions) * 100)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_questions(raw: Any, expected_count: int) -> list[Question]:
    """Validate an externally generated question set.

    Each item must carry a non-empty string ``prompt``, exactly four string
    ``options`` and a ``correct_index`` (or ``correctIndex``) of 0-3.
    Questions are numbered from 1 in the order given.

    Raises:
        InvalidInputError: Naming the first offending question
    """
    if not isinstance(raw, list) or len(raw) != expected_count:
        got = len(raw) if isinstance(raw, list) else type(raw).__name__
        raise InvalidInputError(f"Expected {expected_count} questions, got {got}")

    questions = []
    for position, item in enumerate(raw, 1):
        if not isinstance(item, dict):
            raise InvalidInputError(f"Question {position}: must be an object")

        prompt = item.get("prompt")
        if not prompt or not isinstance(prompt, str):
            raise InvalidInputError(
                f"Question {position}: prompt is required and must be a string"
            )

        options = item.get("options")
        if (
            not isinstance(options, list)
            or len(options) != OPTIONS_PER_QUESTION
            or not all(isinstance(option, str) for option in options)
        ):
            raise InvalidInputError(f"Question {position}: must have exactly 4 options")

        correct_index = item.get("correct_index", item.get("correctIndex"))
        if not _is_int(correct_index) or not 0 <= correct_index <= 3:
            raise InvalidInputError(
                f"Question {position}: correct_index must be 0, 1, 2, or 3"
            )

        questions.append(
            Question(
                index=position,
                prompt=prompt,
                options=options,
                correct_index=correct_index,
            )
        )

    return questions
