"""Configuration management for speedread.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Reader defaults
    default_pace_wpm: int
    default_chunk_size: int

    # Quiz
    question_count: int

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "SPEEDREAD_DB_PATH",
            str(Path.home() / ".speedread" / "speedread.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            default_pace_wpm=int(os.environ.get("SPEEDREAD_DEFAULT_PACE", "300")),
            default_chunk_size=int(os.environ.get("SPEEDREAD_DEFAULT_CHUNK_SIZE", "3")),
            question_count=int(os.environ.get("SPEEDREAD_QUESTION_COUNT", "5")),
            log_level=os.environ.get("SPEEDREAD_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not 100 <= self.default_pace_wpm <= 1200:
            errors.append(
                f"Default pace must be between 100 and 1200 WPM: {self.default_pace_wpm}"
            )

        if not 2 <= self.default_chunk_size <= 8:
            errors.append(
                f"Default chunk size must be between 2 and 8: {self.default_chunk_size}"
            )

        if not 1 <= self.question_count <= 10:
            errors.append(
                f"Question count must be between 1 and 10: {self.question_count}"
            )

        # Check database directory is writable
        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        return errors


_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the cached config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the cached config instance. Used for testing."""
    global _config
    _config = None
