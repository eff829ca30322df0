"""Session metrics: words-per-minute computation and plausibility checks."""

from dataclasses import dataclass, field

from ..utils import clamp, round_half_up

MS_PER_MINUTE = 60_000

# Hard ceiling applied to every computed WPM.
MAX_WPM = 3000

# Sessions above this are flagged by validation even though they are not clamped.
PLAUSIBLE_WPM = 2000


@dataclass
class MetricsValidation:
    """Outcome of validate_session_metrics."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def compute_wpm(words_read: int, duration_ms: int) -> int:
    """Convert words read over an exposure time into words per minute.

    Returns 0 for a non-positive duration. The result is rounded half-up
    and clamped to ``[0, MAX_WPM]``.
    """
    if duration_ms <= 0:
        return 0

    wpm = round_half_up(words_read / duration_ms * MS_PER_MINUTE)
    return clamp(wpm, 0, MAX_WPM)


def validate_session_metrics(
    words_read: int, duration_ms: int, total_words: int
) -> MetricsValidation:
    """Check a session's reported metrics against the content it read.

    Args:
        words_read: Words the reader reported as read
        duration_ms: Exposure time in milliseconds
        total_words: Word count of the content

    Returns:
        MetricsValidation with every problem found
    """
    errors = []

    if words_read < 0:
        errors.append("Words read cannot be negative")

    if duration_ms <= 0:
        errors.append("Duration must be positive")

    if words_read > total_words:
        errors.append(f"Words read ({words_read}) cannot exceed total words ({total_words})")

    wpm = compute_wpm(words_read, duration_ms)
    if wpm > PLAUSIBLE_WPM:
        errors.append(f"Computed WPM ({wpm}) seems unrealistically high")

    return MetricsValidation(valid=not errors, errors=errors)
