"""Data export functionality."""

from .csv_export import CSVExporter, ExportResult

__all__ = ["CSVExporter", "ExportResult"]
