"""
AnalyticsService - Orchestrates the analysis pipeline

entries -> per-path statistics -> prompt -> Gemini -> cleaned JSON -> result
"""

import logging
from typing import List, Optional

from analytics_ai.models.data_models import AnalysisResult, LogEntry, PerformanceAnalysis
from analytics_ai.services.aggregator import Aggregator
from analytics_ai.services.exporter import CsvExporter
from analytics_ai.services.gemini_client import GeminiClient
from analytics_ai.services.normalizer import parse_result
from analytics_ai.services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Entry point used by the HTTP layer.
    Holds no per-request state; the client carries only the API key.
    """

    def __init__(
        self,
        client: GeminiClient,
        aggregator: Optional[Aggregator] = None,
        exporter: Optional[CsvExporter] = None,
    ):
        self.client = client
        self.aggregator = aggregator or Aggregator()
        self.prompts = PromptBuilder(self.aggregator)
        self.exporter = exporter or CsvExporter()

    def analyze_logs(self, entries: List[LogEntry]) -> AnalysisResult:
        prompt = self.prompts.build_log_analysis_prompt(entries)
        logger.info("Analyzing %d log entries (prompt %d chars)", len(entries), len(prompt))
        return parse_result(self.client.generate(prompt), AnalysisResult)

    def analyze_performance(self, entries: List[LogEntry]) -> PerformanceAnalysis:
        prompt = self.prompts.build_performance_prompt(entries)
        logger.info("Analyzing performance of %d entries (prompt %d chars)", len(entries), len(prompt))
        return parse_result(self.client.generate(prompt), PerformanceAnalysis)

    def convert_to_csv(self, entries: List[LogEntry]) -> bytes:
        return self.exporter.export(entries)

    def close(self) -> None:
        self.client.close()
