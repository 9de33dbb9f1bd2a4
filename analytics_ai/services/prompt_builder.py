"""
Prompt Builder

Renders aggregated statistics into the two prompts sent to the model. The
instructions ask for bare JSON, but replies are still cleaned afterwards.
"""

from typing import Dict, List, Optional

from analytics_ai.models.data_models import LogEntry, PathStatistics
from analytics_ai.services.aggregator import Aggregator
from analytics_ai.utils.helpers import format_rate

LOG_ANALYSIS_TEMPLATE = """Analyze this log summary and provide insights. Return ONLY a JSON object with this exact structure (no markdown, no backticks):
{{
    "popular_pages": ["page1", "page2"],
    "slow_pages": [{{"path": "/example", "avg_duration": 1000, "request_count": 10, "error_rate": 5.0}}],
    "potential_issues": [{{"type": "security", "description": "desc", "severity": "high", "path": "/example"}}],
    "insights": ["insight1", "insight2"]
}}

Log Summary:
{summary}"""

PERFORMANCE_TEMPLATE = """Analyze this performance data and provide insights. Return ONLY a JSON object with this exact structure (no markdown, no backticks):
{{
    "slow_endpoints": [{{"path": "/example", "avg_duration": 1000, "request_count": 10, "error_rate": 5.0}}],
    "performance_patterns": ["pattern1", "pattern2"],
    "resource_issues": [{{"type": "memory", "description": "High memory usage", "severity": "high"}}],
    "recommendations": ["recommendation1", "recommendation2"]
}}

Performance Data:
{summary}"""


class PromptBuilder:
    """Builds log-analysis and performance-analysis prompts"""

    def __init__(self, aggregator: Optional[Aggregator] = None):
        self.aggregator = aggregator or Aggregator()

    def log_summary(self, entries: List[LogEntry], stats: Dict[str, PathStatistics]) -> str:
        lines = ["Log Summary:", ""]

        for e in self.aggregator.notable_entries(entries):
            lines.append(
                f"- {e.timestamp} [{e.level}] {e.path} "
                f"(Duration: {e.duration}ms, Status: {e.status})"
            )

        lines.append("")
        lines.append("Path Statistics:")
        for path, s in stats.items():
            lines.append(
                f"- {path}: {s.count} requests, avg time {s.avg_duration}ms, "
                f"error rate {format_rate(s.error_rate)}%"
            )

        return "\n".join(lines) + "\n"

    @staticmethod
    def performance_summary(stats: Dict[str, PathStatistics]) -> str:
        parts = ["Performance Summary:\n\n"]

        for path, s in stats.items():
            parts.append(
                f"Endpoint: {path}\n"
                f"- Requests: {s.count}\n"
                f"- Avg Time: {s.avg_duration}ms\n"
                f"- Min Time: {s.min_duration}ms\n"
                f"- Max Time: {s.max_duration}ms\n"
                f"- Error Rate: {format_rate(s.error_rate)}%\n\n"
            )

        return "".join(parts)

    def build_log_analysis_prompt(self, entries: List[LogEntry]) -> str:
        stats = self.aggregator.group_by_path(entries)
        return LOG_ANALYSIS_TEMPLATE.format(summary=self.log_summary(entries, stats))

    def build_performance_prompt(self, entries: List[LogEntry]) -> str:
        stats = self.aggregator.group_by_path(entries)
        return PERFORMANCE_TEMPLATE.format(summary=self.performance_summary(stats))
