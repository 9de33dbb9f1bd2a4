"""
Error Types

Every failure the service can surface to an HTTP caller derives from
AnalyticsError. Errors carry the raw text needed to diagnose a mismatch with
the remote model's output.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for all service errors"""


class ConfigError(AnalyticsError):
    """Missing or invalid configuration"""


class InputValidationError(AnalyticsError):
    """Request payload is not a valid list of log entries"""


class NetworkError(AnalyticsError):
    """Transport failure or timeout reaching the generative-text endpoint"""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"error making request: {cause}")


class RemoteAPIError(AnalyticsError):
    """Generative-text endpoint answered with a non-2xx status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error (status {status_code}): {body}")


class MalformedResponseError(AnalyticsError):
    """Successful reply whose envelope lacks the generated text"""

    def __init__(self, field: str, body: str, reason: Optional[str] = None):
        self.field = field
        self.body = body
        detail = reason or f"missing or invalid '{field}'"
        super().__init__(f"{detail} in response: {body}")


class ResultParseError(AnalyticsError):
    """Candidate payload could not be decoded into the result structure"""

    def __init__(self, cause: BaseException, payload: str):
        self.cause = cause
        self.payload = payload
        super().__init__(f"error parsing analysis result: {cause}, response: {payload}")


class StorageError(AnalyticsError):
    """Uploaded file could not be written or read back"""


class ExportError(AnalyticsError):
    """CSV rendering failed"""
