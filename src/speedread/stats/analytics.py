"""Reading analytics and statistics calculations.

Provides cross-session statistics, including:
- Total reading time and words read
- Average WPM per reading mode
- Average comprehension score
- Daily breakdowns and mode comparisons

``aggregate`` is a pure reduction over explicit session records; the
ReadingAnalytics class only selects the records from the database.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from ..db.models import ReadingSession
from ..db.schemas import AnalyticsSummary, ReadingMode, TimePeriod
from ..db.sqlite import Database
from ..utils import calculate_average, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


@dataclass
class SessionRecord:
    """A session's metrics joined with its comprehension score."""

    mode: str
    duration_ms: int = 0
    words_read: int = 0
    computed_wpm: int = 0
    ended_at: Optional[str] = None  # ISO datetime, None while active
    score_percent: Optional[int] = None

    @classmethod
    def from_session(
        cls, session: ReadingSession, score_percent: Optional[int] = None
    ) -> "SessionRecord":
        return cls(
            mode=session.mode,
            duration_ms=session.duration_ms,
            words_read=session.words_read,
            computed_wpm=session.computed_wpm,
            ended_at=session.ended_at,
            score_percent=score_percent,
        )


@dataclass
class SessionAggregation:
    """Totals over a collection of sessions."""

    total_sessions: int = 0
    total_time_ms: int = 0
    total_words_read: int = 0
    average_wpm_by_mode: dict[str, int] = field(default_factory=dict)
    scores: list[int] = field(default_factory=list)


@dataclass
class DailyStats:
    """Statistics for one calendar day (UTC)."""

    date: str
    sessions_count: int = 0
    total_time_ms: int = 0
    average_wpm: int = 0
    average_score: int = 0


@dataclass
class ModeComparison:
    """Statistics for one reading mode."""

    mode: str
    sessions_count: int = 0
    average_wpm: int = 0
    average_score: int = 0
    total_time_ms: int = 0


@dataclass
class DetailedAnalytics:
    """Summary plus daily and per-mode breakdowns."""

    summary: AnalyticsSummary
    daily_stats: list[DailyStats] = field(default_factory=list)
    mode_comparison: list[ModeComparison] = field(default_factory=list)


def aggregate(sessions: Iterable[SessionRecord]) -> SessionAggregation:
    """Reduce session records to totals and per-mode averages.

    Sessions without an end time or with a non-positive duration are left
    out of time, word and WPM totals. ``total_sessions`` still counts every
    session with an end time, including those with a non-positive duration.
    """
    sessions = list(sessions)
    wpm_totals: dict[str, int] = defaultdict(int)
    wpm_counts: dict[str, int] = defaultdict(int)
    scores: list[int] = []
    total_time_ms = 0
    total_words_read = 0

    for session in sessions:
        if not session.ended_at or session.duration_ms <= 0:
            continue

        total_time_ms += session.duration_ms
        total_words_read += session.words_read

        wpm_totals[session.mode] += session.computed_wpm
        wpm_counts[session.mode] += 1

        if session.score_percent is not None:
            scores.append(session.score_percent)

    average_wpm_by_mode = {
        mode: round_half_up(wpm_totals[mode] / count)
        for mode, count in wpm_counts.items()
    }

    return SessionAggregation(
        total_sessions=sum(1 for s in sessions if s.ended_at),
        total_time_ms=total_time_ms,
        total_words_read=total_words_read,
        average_wpm_by_mode=average_wpm_by_mode,
        scores=scores,
    )


def calculate_average_score(scores: list[int]) -> int:
    """Rounded mean of scores, 0 when there are none."""
    if not scores:
        return 0
    return round_half_up(calculate_average(scores))


def summarize(sessions: Iterable[SessionRecord]) -> AnalyticsSummary:
    """Build an AnalyticsSummary from session records."""
    aggregation = aggregate(sessions)
    return AnalyticsSummary(
        total_time_ms=aggregation.total_time_ms,
        average_wpm_by_mode=aggregation.average_wpm_by_mode,
        average_score_percent=calculate_average_score(aggregation.scores),
        sessions_count=aggregation.total_sessions,
    )


def _to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def period_start(period: Union[TimePeriod, str], now: Optional[datetime] = None) -> Optional[datetime]:
    """First instant (UTC) covered by a preset period; None for all time."""
    period = TimePeriod(period)
    now = now or datetime.now(timezone.utc)

    if period == TimePeriod.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == TimePeriod.WEEK:
        return now - timedelta(days=7)
    if period == TimePeriod.MONTH:
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


class ReadingAnalytics:
    """Calculates reading analytics from stored sessions."""

    def __init__(self, db: Database):
        """Initialize analytics.

        Args:
            db: Database instance
        """
        self.db = db

    def get_session_records(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        mode: Optional[Union[ReadingMode, str]] = None,
    ) -> list[SessionRecord]:
        """Get completed sessions, optionally filtered by end time and mode."""
        mode_value = ReadingMode(mode).value if mode else None
        rows = self.db.get_sessions_with_scores(
            start=_to_utc_iso(start), end=_to_utc_iso(end), mode=mode_value
        )
        return [SessionRecord.from_session(session, score) for session, score in rows]

    def generate_summary(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        mode: Optional[Union[ReadingMode, str]] = None,
    ) -> AnalyticsSummary:
        """Summarize sessions completed in a range.

        Args:
            start: Earliest end time included
            end: Latest end time included
            mode: Restrict to one reading mode

        Returns:
            AnalyticsSummary
        """
        return summarize(self.get_session_records(start, end, mode))

    def get_detailed_analytics(
        self, days: int = 30, now: Optional[datetime] = None
    ) -> DetailedAnalytics:
        """Get a summary with daily stats and a per-mode comparison.

        Args:
            days: How many days back to include
            now: End of the window (default: current time)
        """
        end = now or datetime.now(timezone.utc)
        start = end - timedelta(days=days)
        records = self.get_session_records(start, end)

        by_day: dict[str, list[SessionRecord]] = defaultdict(list)
        by_mode: dict[str, list[SessionRecord]] = defaultdict(list)
        for record in records:
            if not record.ended_at:
                continue
            by_day[record.ended_at[:10]].append(record)
            by_mode[record.mode].append(record)

        daily_stats = []
        for day, day_records in by_day.items():
            aggregation = aggregate(day_records)
            averages = list(aggregation.average_wpm_by_mode.values())
            daily_stats.append(
                DailyStats(
                    date=day,
                    sessions_count=aggregation.total_sessions,
                    total_time_ms=aggregation.total_time_ms,
                    average_wpm=round_half_up(calculate_average(averages)) if averages else 0,
                    average_score=calculate_average_score(aggregation.scores),
                )
            )

        mode_comparison = []
        for mode, mode_records in by_mode.items():
            aggregation = aggregate(mode_records)
            mode_comparison.append(
                ModeComparison(
                    mode=mode,
                    sessions_count=aggregation.total_sessions,
                    average_wpm=aggregation.average_wpm_by_mode.get(mode, 0),
                    average_score=calculate_average_score(aggregation.scores),
                    total_time_ms=aggregation.total_time_ms,
                )
            )

        return DetailedAnalytics(
            summary=summarize(records),
            daily_stats=sorted(daily_stats, key=lambda d: d.date),
            mode_comparison=sorted(mode_comparison, key=lambda m: m.sessions_count, reverse=True),
        )

    def get_analytics_for_period(
        self, period: Union[TimePeriod, str], now: Optional[datetime] = None
    ) -> AnalyticsSummary:
        """Summarize a preset period: today, week, month or all."""
        return self.generate_summary(start=period_start(period, now))

    def update_study_log(self, profile: str = DEFAULT_PROFILE) -> AnalyticsSummary:
        """Recompute the all-time summary and cache it in the study log."""
        summary = self.generate_summary()
        self.db.upsert_study_log(profile, summary)
        logger.info(
            "Study log for %s updated: %d sessions", profile, summary.sessions_count
        )
        return summary
