"""
LogParser Class - Decodes raw JSON into log entries

Used for uploaded files; request bodies are validated by FastAPI directly.
"""

from typing import List, Union

from pydantic import TypeAdapter, ValidationError

from analytics_ai.errors import InputValidationError
from analytics_ai.models.data_models import LogEntry

_ENTRIES = TypeAdapter(List[LogEntry])


class LogParser:
    """
    Parses a JSON array of log entries.
    Raises InputValidationError on malformed JSON or mistyped fields.
    """

    @staticmethod
    def parse_entries(raw: Union[bytes, str]) -> List[LogEntry]:
        try:
            return _ENTRIES.validate_json(raw)
        except ValidationError as e:
            raise InputValidationError(f"parse json err: {e}") from e
