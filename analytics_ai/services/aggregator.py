"""
Aggregator Class - Computes per-path statistics

This module groups log entries by request path and picks out the entries
worth mentioning to the model.
"""

from typing import Dict, Iterable, List

from analytics_ai.models.data_models import LogEntry, PathStatistics

SLOW_REQUEST_MS = 1000
NOTABLE_LEVELS = ("error", "warning")


class Aggregator:
    """
    Aggregates log entries into per-path statistics.
    Responsibilities:
    - Group entries by path
    - Track count, total/min/max duration and errors per path
    - Classify notable entries (errors, warnings, slow requests)
    """

    @staticmethod
    def is_error(entry: LogEntry) -> bool:
        """Check if entry counts as an error (status >= 400)"""
        return entry.status >= 400

    @classmethod
    def is_notable(cls, entry: LogEntry) -> bool:
        """Errors, error/warning levels and requests slower than one second"""
        return (
            cls.is_error(entry)
            or entry.level in NOTABLE_LEVELS
            or entry.duration > SLOW_REQUEST_MS
        )

    def group_by_path(self, entries: Iterable[LogEntry]) -> Dict[str, PathStatistics]:
        """Compute statistics for every distinct path in the batch"""
        buckets: Dict[str, PathStatistics] = {}

        for e in entries:
            stats = buckets.get(e.path)
            if stats is None:
                stats = buckets[e.path] = PathStatistics(
                    min_duration=e.duration,
                    max_duration=e.duration,
                )
            else:
                if e.duration < stats.min_duration:
                    stats.min_duration = e.duration
                if e.duration > stats.max_duration:
                    stats.max_duration = e.duration

            stats.count += 1
            stats.total_duration += e.duration
            if self.is_error(e):
                stats.error_count += 1

        return buckets

    def notable_entries(self, entries: Iterable[LogEntry]) -> List[LogEntry]:
        """Notable entries in input order"""
        return [e for e in entries if self.is_notable(e)]
