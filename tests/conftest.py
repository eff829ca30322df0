"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the speedread application,
including temporary databases, stored content and a controllable clock.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from speedread.config import reset_config
from speedread.content import ContentManager
from speedread.db.schemas import (
    ContentCreate,
    ContentResponse,
    ReadingMode,
    SessionComplete,
    SessionCreate,
    SessionResponse,
)
from speedread.db.sqlite import Database
from speedread.reading import SessionManager


SAMPLE_TEXT = (
    "The quick brown fox jumps over the lazy dog. "
    "It was a bright cold day in April.\n\n"
    "Reading faster takes practice and patience.\n\n"
    "Short paragraph."
)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    reset_config()
    os.environ["SPEEDREAD_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    # Cleanup
    database.engine.dispose()
    reset_config()
    if "SPEEDREAD_DB_PATH" in os.environ:
        del os.environ["SPEEDREAD_DB_PATH"]


@pytest.fixture(scope="function")
def session(db: Database) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    with db.get_session() as sess:
        yield sess


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_content_data() -> ContentCreate:
    """Create sample content data for testing."""
    return ContentCreate(title="Sample", text=SAMPLE_TEXT)


@pytest.fixture
def created_content(db: Database, sample_content_data: ContentCreate) -> ContentResponse:
    """Store and return sample content (25 words)."""
    return ContentManager(db).create_content(sample_content_data)


@pytest.fixture
def session_manager(db: Database) -> SessionManager:
    """Create a session manager."""
    return SessionManager(db)


@pytest.fixture
def active_session(
    session_manager: SessionManager, created_content: ContentResponse
) -> SessionResponse:
    """Start a word-mode session on the sample content."""
    return session_manager.start_session(
        SessionCreate(content_id=created_content.id, mode=ReadingMode.WORD, pace_wpm=300)
    )


@pytest.fixture
def completed_session(
    session_manager: SessionManager, active_session: SessionResponse
) -> SessionResponse:
    """Complete the active session: 20 words in one minute."""
    return session_manager.complete_session(
        SessionComplete(session_id=active_session.id, words_read=20, duration_ms=60000)
    )


# ============================================================================
# Pacing Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms

    def sleep(self, seconds: float) -> None:
        self.advance(seconds * 1000)


@pytest.fixture
def clock() -> FakeClock:
    """A clock starting at zero."""
    return FakeClock()


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()
