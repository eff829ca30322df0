"""Comprehension questions and scoring."""

from .generators import JsonFileQuestionGenerator, QuestionGenerator
from .manager import QuizManager
from .scoring import calculate_score, validate_questions

__all__ = [
    "JsonFileQuestionGenerator",
    "QuestionGenerator",
    "QuizManager",
    "calculate_score",
    "validate_questions",
]
