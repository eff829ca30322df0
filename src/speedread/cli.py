"""Command-line interface for speedread.

Built with Typer for commands and Rich for beautiful output.
"""

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import get_config
from .content import ContentManager
from .db.schemas import (
    ContentCreate,
    ContentSource,
    GenerateQuestionsRequest,
    Language,
    ReadingMode,
    SessionComplete,
    SessionCreate,
    SubmitAnswersRequest,
    TimePeriod,
)
from .db.sqlite import Database
from .errors import TrainerError
from .export import CSVExporter
from .quiz import JsonFileQuestionGenerator, QuizManager
from .reading import PacingDriver, SessionManager
from .stats import ReadingAnalytics, period_start

# Create the main app
app = typer.Typer(
    name="speedread",
    help="Train your reading speed and comprehension.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
content_app = typer.Typer(help="Store and list reading texts.")
app.add_typer(content_app, name="content")

stats_app = typer.Typer(help="Reading analytics.")
app.add_typer(stats_app, name="stats")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def get_database() -> Database:
    """Open the configured database, creating tables if needed."""
    db = Database(str(get_config().db_path))
    db.create_tables()
    return db


def format_duration(ms: int) -> str:
    """Format milliseconds as e.g. '2m 05s'."""
    seconds = ms // 1000
    minutes, seconds = divmod(seconds, 60)
    if minutes:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Train your reading speed and comprehension."""
    level = logging.DEBUG if verbose else get_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"speedread {__version__}")


# ============================================================================
# Content Commands
# ============================================================================


@content_app.command("add")
def content_add(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to store"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read text from a file"),
    title: Optional[str] = typer.Option(None, "--title", help="Title (default: first sentence)"),
    language: Language = typer.Option(Language.EN, "--language", "-l", help="Text language"),
) -> None:
    """Store a text to read later."""
    if file:
        if not file.exists():
            print_error(f"File not found: {file}")
            raise typer.Exit(1)
        text = file.read_text(encoding="utf-8")
        source = ContentSource.UPLOAD
    else:
        source = ContentSource.PASTE

    if not text:
        print_error("Provide --text or --file.")
        raise typer.Exit(1)

    manager = ContentManager(get_database())
    try:
        content = manager.create_content(
            ContentCreate(language=language, source=source, text=text, title=title)
        )
    except (TrainerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Stored: {content.title} ({content.word_count} words)")
    console.print(f"[dim]ID: {content.id}[/dim]")


@content_app.command("list")
def content_list(
    limit: int = typer.Option(10, "--limit", "-n", help="How many texts to show"),
) -> None:
    """List recently stored texts."""
    contents = ContentManager(get_database()).get_recent_content(limit)
    if not contents:
        console.print("[dim]No content stored yet.[/dim]")
        return

    table = Table(title="Reading Content", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Words", justify="right")
    table.add_column("Language")

    for content in contents:
        table.add_row(content.id, content.title or "-", str(content.word_count), content.language.value)

    console.print(table)


# ============================================================================
# Reading Commands
# ============================================================================


def _render(driver: PacingDriver) -> Panel:
    unit = driver.current_unit
    position = f"{driver.index + 1} of {len(driver.units)}" if driver.units else "0 of 0"
    return Panel(
        f"[bold]{escape(unit.text) if unit else ''}[/bold]",
        title=f"{driver.mode.value} mode, {driver.pace_wpm} WPM",
        subtitle=f"{position} | {driver.words_read}/{driver.total_words} words",
    )


@app.command()
def read(
    content_id: str = typer.Argument(..., help="ID of the content to read"),
    mode: ReadingMode = typer.Option(ReadingMode.WORD, "--mode", "-m", help="Display mode"),
    pace: Optional[int] = typer.Option(None, "--pace", "-p", help="Target pace in WPM"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", "-c", help="Words per chunk"),
) -> None:
    """Read a stored text at a target pace, then record the session.

    Press Ctrl+C to finish early; only the words shown so far are counted.
    """
    config = get_config()
    db = get_database()
    content = ContentManager(db).get_content(content_id)
    if not content:
        print_error(f"Content not found: {content_id}")
        raise typer.Exit(1)

    pace = pace or config.default_pace_wpm
    if mode == ReadingMode.CHUNK and chunk_size is None:
        chunk_size = config.default_chunk_size

    session_manager = SessionManager(db)
    try:
        session = session_manager.start_session(
            SessionCreate(content_id=content_id, mode=mode, pace_wpm=pace, chunk_size=chunk_size)
        )
        driver = PacingDriver(content.text, mode, pace, chunk_size=chunk_size)
    except (TrainerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    started = time.monotonic()
    with Live(_render(driver), console=console, refresh_per_second=20) as live:
        try:
            driver.run(on_advance=lambda: live.update(_render(driver)))
        except KeyboardInterrupt:
            driver.stop()
    duration_ms = int((time.monotonic() - started) * 1000)

    completed = session_manager.complete_session(
        SessionComplete(
            session_id=session.id,
            words_read=driver.words_read,
            duration_ms=duration_ms,
        )
    )

    table = Table(title="Session Complete", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Session", completed.id)
    table.add_row("Words read", f"{completed.words_read} / {content.word_count}")
    table.add_row("Duration", format_duration(completed.duration_ms))
    table.add_row("Reading speed", f"{completed.computed_wpm} WPM")
    console.print(table)
    console.print(f"[dim]Take the quiz with 'speedread quiz {completed.id} --questions FILE'[/dim]")


@app.command()
def sessions(
    limit: int = typer.Option(10, "--limit", "-n", help="How many sessions to show"),
    completed: bool = typer.Option(False, "--completed", help="Only completed sessions"),
) -> None:
    """List recent reading sessions."""
    recent = SessionManager(get_database()).get_recent_sessions(limit, completed_only=completed)
    if not recent:
        console.print("[dim]No reading sessions yet.[/dim]")
        return

    table = Table(title="Reading Sessions", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Mode", style="cyan")
    table.add_column("Pace", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("WPM", justify="right")
    table.add_column("Status", style="yellow")

    for s in recent:
        table.add_row(
            s.id,
            s.mode.value,
            str(s.pace_wpm),
            str(s.words_read),
            str(s.computed_wpm) if s.is_completed else "-",
            "completed" if s.is_completed else "active",
        )

    console.print(table)


# ============================================================================
# Quiz Commands
# ============================================================================


@app.command()
def quiz(
    session_id: str = typer.Argument(..., help="ID of a reading session"),
    questions: Optional[Path] = typer.Option(
        None, "--questions", "-q", help="JSON file with prepared questions"
    ),
    count: Optional[int] = typer.Option(None, "--count", help="Number of questions"),
) -> None:
    """Answer comprehension questions for a session."""
    db = get_database()
    generator = JsonFileQuestionGenerator(questions) if questions else None
    manager = QuizManager(db, generator)

    existing = manager.get_result_by_session(session_id)
    if existing:
        print_warning(f"Session already scored: {existing.score_percent}%")
        return

    try:
        question_set = manager.generate_questions(
            GenerateQuestionsRequest(
                session_id=session_id, count=count or get_config().question_count
            )
        )
    except (TrainerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    answers = []
    for question in question_set.questions:
        console.print(f"\n[bold]{question.index}. {question.prompt}[/bold]")
        for number, option in enumerate(question.options, 1):
            console.print(f"  {number}) {option}")
        choice = typer.prompt("Answer", type=int)
        while not 1 <= choice <= len(question.options):
            choice = typer.prompt("Answer (1-4)", type=int)
        answers.append(choice - 1)

    try:
        result = manager.submit_answers(SubmitAnswersRequest(session_id=session_id, answers=answers))
    except (TrainerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Comprehension score: {result.score_percent}%")


# ============================================================================
# Stats Commands
# ============================================================================


@stats_app.command("summary")
def stats_summary(
    period: TimePeriod = typer.Option(TimePeriod.ALL, "--period", "-p", help="Time period"),
    mode: Optional[ReadingMode] = typer.Option(None, "--mode", "-m", help="Only one mode"),
) -> None:
    """Show total time, average WPM by mode and average score."""
    analytics = ReadingAnalytics(get_database())
    if mode:
        summary = analytics.generate_summary(start=period_start(period), mode=mode)
    else:
        summary = analytics.get_analytics_for_period(period)

    table = Table(title=f"Reading Summary ({period.value})", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Sessions", str(summary.sessions_count))
    table.add_row("Total time", format_duration(summary.total_time_ms))
    for mode_name, wpm in sorted(summary.average_wpm_by_mode.items()):
        table.add_row(f"Average WPM ({mode_name})", str(wpm))
    table.add_row("Average score", f"{summary.average_score_percent}%")
    console.print(table)


@stats_app.command("detail")
def stats_detail(
    days: int = typer.Option(30, "--days", "-d", help="How many days back"),
) -> None:
    """Show daily stats and a comparison of reading modes."""
    detail = ReadingAnalytics(get_database()).get_detailed_analytics(days)

    if not detail.daily_stats:
        console.print(f"[dim]No completed sessions in the last {days} days.[/dim]")
        return

    daily = Table(title="Daily Stats", show_header=True, header_style="bold magenta")
    daily.add_column("Date", style="cyan")
    daily.add_column("Sessions", justify="right")
    daily.add_column("Time", justify="right")
    daily.add_column("Avg WPM", justify="right")
    daily.add_column("Avg Score", justify="right")
    for day in detail.daily_stats:
        daily.add_row(
            day.date,
            str(day.sessions_count),
            format_duration(day.total_time_ms),
            str(day.average_wpm),
            f"{day.average_score}%",
        )
    console.print(daily)

    modes = Table(title="Mode Comparison", show_header=True, header_style="bold magenta")
    modes.add_column("Mode", style="cyan")
    modes.add_column("Sessions", justify="right")
    modes.add_column("Avg WPM", justify="right")
    modes.add_column("Avg Score", justify="right")
    modes.add_column("Time", justify="right")
    for row in detail.mode_comparison:
        modes.add_row(
            row.mode,
            str(row.sessions_count),
            str(row.average_wpm),
            f"{row.average_score}%",
            format_duration(row.total_time_ms),
        )
    console.print(modes)


@stats_app.command("export")
def stats_export(
    output: Path = typer.Argument(..., help="CSV file to write"),
) -> None:
    """Export completed sessions to CSV."""
    result = CSVExporter(get_database()).export_sessions(output)
    if not result.success:
        print_error(f"Export failed: {result.error}")
        raise typer.Exit(1)
    print_success(f"Exported {result.records_exported} sessions to {output}")


@stats_app.command("refresh")
def stats_refresh(
    profile: str = typer.Option("default", "--profile", help="Study log profile"),
) -> None:
    """Recompute and cache the all-time summary."""
    summary = ReadingAnalytics(get_database()).update_study_log(profile)
    print_success(f"Study log updated ({summary.sessions_count} sessions)")
