"""CSV export of completed reading sessions."""

import csv
import logging
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Optional, TextIO

from ..db.sqlite import Database

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Result of an export operation."""

    success: bool
    file_path: Optional[Path] = None
    records_exported: int = 0
    error: Optional[str] = None


class CSVExporter:
    """Exports session metrics to CSV format."""

    COLUMNS = [
        "Date",
        "Mode",
        "Duration(ms)",
        "Words Read",
        "WPM",
        "Score(%)",
    ]

    def __init__(self, db: Database):
        """Initialize exporter.

        Args:
            db: Database instance
        """
        self.db = db

    def _rows(self) -> list[list]:
        rows = []
        for session, score in self.db.get_sessions_with_scores():
            rows.append(
                [
                    session.ended_at[:10],
                    session.mode,
                    session.duration_ms,
                    session.words_read,
                    session.computed_wpm,
                    "" if score is None else score,
                ]
            )
        return rows

    def _write(self, f: TextIO, rows: list[list]) -> None:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(self.COLUMNS)
        writer.writerows(rows)

    def export_sessions(self, output_path: Path) -> ExportResult:
        """Export completed sessions to a CSV file.

        Args:
            output_path: Path for output file

        Returns:
            ExportResult with success status and details
        """
        rows = self._rows()
        try:
            with open(output_path, "w", newline="", encoding="utf-8") as f:
                self._write(f, rows)
        except OSError as e:
            logger.error("CSV export to %s failed: %s", output_path, e)
            return ExportResult(success=False, file_path=output_path, error=str(e))

        return ExportResult(success=True, file_path=output_path, records_exported=len(rows))

    def export_to_string(self) -> str:
        """Export completed sessions to a CSV string."""
        output = StringIO()
        self._write(output, self._rows())
        return output.getvalue()
