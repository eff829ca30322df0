"""Tests for the CLI interface."""

import json
import os
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from speedread.cli import app
from speedread.config import reset_config
from speedread.db.sqlite import Database


@pytest.fixture(autouse=True)
def setup_test_db():
    """Set up a test database for each test."""
    reset_config()

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    os.environ["SPEEDREAD_DB_PATH"] = db_path

    yield db_path

    # Cleanup
    reset_config()
    if "SPEEDREAD_DB_PATH" in os.environ:
        del os.environ["SPEEDREAD_DB_PATH"]
    if Path(db_path).exists():
        Path(db_path).unlink()


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


def add_content(runner: CliRunner, text: str = "one two three") -> str:
    """Store content through the CLI and return its ID."""
    result = runner.invoke(app, ["content", "add", "--text", text, "--title", "Test"])
    assert result.exit_code == 0
    return Database(os.environ["SPEEDREAD_DB_PATH"]).get_recent_content(1)[0].id


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_help(self, runner: CliRunner):
        """Test that help command works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Train your reading speed" in result.stdout

    def test_version(self, runner: CliRunner):
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout


class TestContentCommands:
    """Tests for content commands."""

    def test_add_text(self, runner: CliRunner):
        """Test storing pasted text."""
        result = runner.invoke(app, ["content", "add", "--text", "Hello there. More words."])
        assert result.exit_code == 0
        assert "Hello there (4 words)" in result.stdout

    def test_add_file(self, runner: CliRunner, tmp_path: Path):
        """Test storing text from a file."""
        path = tmp_path / "article.txt"
        path.write_text("From a file.", encoding="utf-8")
        result = runner.invoke(app, ["content", "add", "--file", str(path)])
        assert result.exit_code == 0
        content = Database(os.environ["SPEEDREAD_DB_PATH"]).get_recent_content(1)[0]
        assert content.source == "upload"

    def test_add_missing_file(self, runner: CliRunner, tmp_path: Path):
        """Test a missing file fails."""
        result = runner.invoke(app, ["content", "add", "--file", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_add_nothing(self, runner: CliRunner):
        """Test text or file is required."""
        result = runner.invoke(app, ["content", "add"])
        assert result.exit_code == 1

    def test_add_blank_text(self, runner: CliRunner):
        """Test whitespace-only text is rejected."""
        result = runner.invoke(app, ["content", "add", "--text", "   "])
        assert result.exit_code == 1
        assert "at least one word" in result.stdout

    def test_list(self, runner: CliRunner):
        """Test listing stored content."""
        add_content(runner)
        result = runner.invoke(app, ["content", "list"])
        assert result.exit_code == 0
        assert "Test" in result.stdout

    def test_list_empty(self, runner: CliRunner):
        """Test listing with nothing stored."""
        result = runner.invoke(app, ["content", "list"])
        assert result.exit_code == 0
        assert "No content stored yet" in result.stdout


class TestReadCommand:
    """Tests for the read command."""

    def test_read_records_session(self, runner: CliRunner):
        """Test reading to the end completes a session."""
        content_id = add_content(runner)
        result = runner.invoke(app, ["read", content_id, "--pace", "1200"])
        assert result.exit_code == 0
        assert "Session Complete" in result.stdout

        session = Database(os.environ["SPEEDREAD_DB_PATH"]).get_recent_sessions(1)[0]
        assert session.ended_at is not None
        assert session.words_read == 3

    def test_read_unknown_content(self, runner: CliRunner):
        """Test reading missing content fails."""
        result = runner.invoke(app, ["read", "missing"])
        assert result.exit_code == 1
        assert "Content not found" in result.stdout

    def test_read_bad_pace(self, runner: CliRunner):
        """Test an out-of-range pace fails before reading."""
        content_id = add_content(runner)
        result = runner.invoke(app, ["read", content_id, "--pace", "5000"])
        assert result.exit_code == 1

    def test_sessions_list(self, runner: CliRunner):
        """Test listing sessions after reading."""
        content_id = add_content(runner)
        runner.invoke(app, ["read", content_id, "--pace", "1200"])
        result = runner.invoke(app, ["sessions", "--completed"])
        assert result.exit_code == 0
        assert "Reading Sessions" in result.stdout


class TestQuizCommand:
    """Tests for the quiz command."""

    @pytest.fixture
    def questions_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "questions.json"
        path.write_text(
            json.dumps(
                [
                    {"prompt": "First?", "options": ["a", "b", "c", "d"], "correct_index": 0},
                    {"prompt": "Second?", "options": ["a", "b", "c", "d"], "correct_index": 3},
                ]
            ),
            encoding="utf-8",
        )
        return path

    def test_quiz(self, runner: CliRunner, questions_file: Path):
        """Test answering a quiz prints the score."""
        content_id = add_content(runner)
        runner.invoke(app, ["read", content_id, "--pace", "1200"])
        session_id = Database(os.environ["SPEEDREAD_DB_PATH"]).get_recent_sessions(1)[0].id

        result = runner.invoke(
            app,
            ["quiz", session_id, "--questions", str(questions_file), "--count", "2"],
            input="1\n2\n",
        )
        assert result.exit_code == 0
        assert "Comprehension score: 50%" in result.stdout

        again = runner.invoke(app, ["quiz", session_id])
        assert "already scored" in again.stdout

    def test_quiz_without_questions(self, runner: CliRunner):
        """Test a quiz needs a question source the first time."""
        content_id = add_content(runner)
        runner.invoke(app, ["read", content_id, "--pace", "1200"])
        session_id = Database(os.environ["SPEEDREAD_DB_PATH"]).get_recent_sessions(1)[0].id

        result = runner.invoke(app, ["quiz", session_id])
        assert result.exit_code == 1
        assert "No question generator" in result.stdout


class TestStatsCommands:
    """Tests for stats commands."""

    def test_summary_empty(self, runner: CliRunner):
        """Test the summary with no sessions."""
        result = runner.invoke(app, ["stats", "summary"])
        assert result.exit_code == 0
        assert "Sessions" in result.stdout

    def test_summary_after_reading(self, runner: CliRunner):
        """Test the summary lists per-mode averages."""
        content_id = add_content(runner)
        runner.invoke(app, ["read", content_id, "--pace", "1200"])
        result = runner.invoke(app, ["stats", "summary", "--period", "today", "--mode", "word"])
        assert result.exit_code == 0
        assert "Average WPM (word)" in result.stdout

    def test_detail_empty(self, runner: CliRunner):
        """Test the detail view with no sessions."""
        result = runner.invoke(app, ["stats", "detail"])
        assert result.exit_code == 0
        assert "No completed sessions" in result.stdout

    def test_export(self, runner: CliRunner, tmp_path: Path):
        """Test exporting sessions to CSV."""
        output = tmp_path / "out.csv"
        result = runner.invoke(app, ["stats", "export", str(output)])
        assert result.exit_code == 0
        assert output.exists()
        assert "Exported 0 sessions" in result.stdout

    def test_refresh(self, runner: CliRunner):
        """Test refreshing the study log."""
        result = runner.invoke(app, ["stats", "refresh", "--profile", "me"])
        assert result.exit_code == 0
        assert Database(os.environ["SPEEDREAD_DB_PATH"]).get_study_log("me") is not None
