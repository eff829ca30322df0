"""Tests for session metrics."""

import pytest

from speedread.reading.metrics import (
    MAX_WPM,
    MetricsValidation,
    compute_wpm,
    validate_session_metrics,
)


class TestComputeWpm:
    """Tests for compute_wpm."""

    @pytest.mark.parametrize(
        "words, duration, expected",
        [
            (100, 60000, 100),
            (50, 30000, 100),
            (12, 3000, 240),
            (1, 120000, 1),  # 0.5 rounds up
            (0, 60000, 0),
        ],
    )
    def test_values(self, words, duration, expected):
        """Test words over time convert to rounded WPM."""
        assert compute_wpm(words, duration) == expected

    def test_non_positive_duration(self):
        """Test zero or negative duration gives 0."""
        assert compute_wpm(100, 0) == 0
        assert compute_wpm(100, -5) == 0

    def test_clamped(self):
        """Test results are capped at the maximum."""
        assert compute_wpm(10000, 1000) == MAX_WPM == 3000

    def test_negative_words_clamped_to_zero(self):
        """Test a negative word count never yields negative WPM."""
        assert compute_wpm(-10, 60000) == 0


class TestValidateSessionMetrics:
    """Tests for validate_session_metrics."""

    def test_valid(self):
        """Test plausible metrics pass."""
        result = validate_session_metrics(100, 60000, 200)
        assert result.valid
        assert result.errors == []
        assert bool(result) is True

    def test_negative_and_zero_duration(self):
        """Test both problems are reported together."""
        result = validate_session_metrics(-1, 0, 10)
        assert not result
        assert "Words read cannot be negative" in result.errors
        assert "Duration must be positive" in result.errors
        assert len(result.errors) == 2

    def test_words_exceed_total(self):
        """Test reading more words than the content holds."""
        result = validate_session_metrics(300, 60000, 200)
        assert result.errors == ["Words read (300) cannot exceed total words (200)"]

    def test_implausible_speed(self):
        """Test speeds above 2000 WPM are flagged though not clamped."""
        result = validate_session_metrics(2100, 60000, 5000)
        assert result.errors == ["Computed WPM (2100) seems unrealistically high"]

    def test_implausible_speed_uses_clamped_value(self):
        """Test the flagged WPM is the clamped figure."""
        result = validate_session_metrics(10000, 1000, 10000)
        assert result.errors == ["Computed WPM (3000) seems unrealistically high"]

    def test_dataclass_defaults(self):
        """Test a bare validation result has no errors."""
        assert MetricsValidation(valid=True).errors == []
