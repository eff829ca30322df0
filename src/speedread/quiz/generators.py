"""Question generator collaborators.

The quiz manager asks a generator for raw question dicts and validates
them itself, so generators only need to produce data.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..errors import UpstreamUnavailableError


class QuestionGenerator(ABC):
    """Produces raw multiple-choice questions for a text."""

    @abstractmethod
    def generate(self, text: str, language: str, count: int) -> list[dict[str, Any]]:
        """Return ``count`` raw question dicts about ``text``.

        Raises:
            UpstreamUnavailableError: If no question set can be produced
        """


class JsonFileQuestionGenerator(QuestionGenerator):
    """Serves a prepared question set from a JSON file.

    The file holds either a list of questions or an object mapping language
    codes to lists. The first ``count`` questions are returned.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Any:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise UpstreamUnavailableError(f"Question file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise UpstreamUnavailableError(f"Question file is not valid JSON: {e}") from e

    def generate(self, text: str, language: str, count: int) -> list[dict[str, Any]]:
        data = self._load()
        if isinstance(data, dict):
            data = data.get(language, [])
        if not isinstance(data, list):
            raise UpstreamUnavailableError(f"No question list in {self.path}")
        return data[:count]
