"""Reading statistics and analytics."""

from .analytics import (
    DailyStats,
    DetailedAnalytics,
    ModeComparison,
    ReadingAnalytics,
    SessionAggregation,
    SessionRecord,
    aggregate,
    calculate_average_score,
    period_start,
    summarize,
)

__all__ = [
    "DailyStats",
    "DetailedAnalytics",
    "ModeComparison",
    "ReadingAnalytics",
    "SessionAggregation",
    "SessionRecord",
    "aggregate",
    "calculate_average_score",
    "period_start",
    "summarize",
]
