"""
CsvExporter Class - Renders log entries as CSV

Metadata is never exported; the column set is fixed.
"""

import csv
import io
from typing import Iterable

from analytics_ai.errors import ExportError
from analytics_ai.models.data_models import LogEntry

CSV_HEADER = ("timestamp", "level", "message", "path", "method", "duration", "status")


class CsvExporter:
    """Writes a header row followed by one row per log entry"""

    def export(self, entries: Iterable[LogEntry]) -> bytes:
        buffer = io.StringIO()
        # Rows end with "\r\n"; fields holding "\r" or "\n" are quoted.
        writer = csv.writer(buffer)

        try:
            writer.writerow(CSV_HEADER)
            for e in entries:
                writer.writerow([
                    e.timestamp,
                    e.level,
                    e.message,
                    e.path,
                    e.method,
                    str(e.duration),
                    str(e.status),
                ])
        except csv.Error as ex:
            raise ExportError(f"error writing CSV row: {ex}") from ex

        return buffer.getvalue().encode("utf-8")
