"""Reading pacing, session metrics and session lifecycle."""

from .metrics import (
    MAX_WPM,
    PLAUSIBLE_WPM,
    MetricsValidation,
    compute_wpm,
    validate_session_metrics,
)
from .pacing import (
    PacingDriver,
    ReadingUnit,
    split_chunks,
    split_paragraphs,
    split_words,
    start_pacing,
    tokenize,
)
from .session import SessionManager

__all__ = [
    "MAX_WPM",
    "PLAUSIBLE_WPM",
    "MetricsValidation",
    "compute_wpm",
    "validate_session_metrics",
    "PacingDriver",
    "ReadingUnit",
    "split_chunks",
    "split_paragraphs",
    "split_words",
    "start_pacing",
    "tokenize",
    "SessionManager",
]
