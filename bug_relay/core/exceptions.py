"""Exception types raised while relaying a bug report."""

from typing import Any


class BugRelayError(Exception):
    """Base class for errors the submit handler knows how to map."""


class ReportValidationError(BugRelayError):
    """The inbound payload is missing required fields or has the wrong shape."""

    def __init__(self, message: str = "Missing required fields", fields: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or []


class UpstreamError(BugRelayError):
    """The issue tracker call failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload
