"""Error types raised by the script extraction client."""

from typing import Any, Optional


class ExtractionServiceError(Exception):
    """Base class for failures talking to the document service."""


class ConfigurationError(ExtractionServiceError):
    """The client is missing configuration it needs before any request is made."""


class TransportError(ExtractionServiceError):
    """The HTTP call failed: connection error, timeout or non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseShapeError(ExtractionServiceError):
    """The service answered successfully but the payload lacks an expected field."""
