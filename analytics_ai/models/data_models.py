"""
Data Models (DTOs - Data Transfer Objects)

Request/response models are pydantic so FastAPI can validate and serialize
them; derived per-request statistics are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from analytics_ai.utils.helpers import error_rate, trunc_div


class _NullAsDefault(BaseModel):
    """JSON null decodes to the field default, as if the key were absent"""

    @field_validator("*", mode="before")
    @classmethod
    def _null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class LogEntry(_NullAsDefault):
    """One observed request/event as sent by the caller"""

    model_config = ConfigDict(frozen=True)

    timestamp: str = ""
    level: str = ""
    message: str = ""
    path: str = ""
    method: str = ""
    duration: int = 0  # milliseconds
    status: int = 0
    metadata: Optional[Dict[str, str]] = None


@dataclass
class PathStatistics:
    """Aggregated statistics for a single request path"""
    count: int = 0
    total_duration: int = 0
    min_duration: int = 0
    max_duration: int = 0
    error_count: int = 0

    @property
    def avg_duration(self) -> int:
        return trunc_div(self.total_duration, self.count)

    @property
    def error_rate(self) -> float:
        return error_rate(self.error_count, self.count)


class _ModelReply(_NullAsDefault):
    """Base for structures decoded from the remote model's reply"""

    model_config = ConfigDict(extra="ignore")


class PerformanceData(_ModelReply):
    path: str = ""
    avg_duration: int = 0
    request_count: int = 0
    error_rate: float = 0.0


class Issue(_ModelReply):
    type: str = ""
    description: str = ""
    severity: str = ""
    # Either a single path or several.
    path: Union[str, List[str], None] = None


class AnalysisResult(_ModelReply):
    """Result of the general log analysis"""
    popular_pages: List[str] = Field(default_factory=list)
    slow_pages: List[PerformanceData] = Field(default_factory=list)
    potential_issues: List[Issue] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)


class PerformanceAnalysis(_ModelReply):
    """Result of the performance analysis"""
    slow_endpoints: List[PerformanceData] = Field(default_factory=list)
    performance_patterns: List[str] = Field(default_factory=list)
    resource_issues: List[Issue] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
