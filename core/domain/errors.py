"""
Domain errors - raised by services and repositories,
translated into HTTP responses only at the adapter boundary.
"""

from typing import Any, List, Optional


class CalendarError(Exception):
    """Base class for all calendar domain errors"""

    status_code = 500
    code = "CALENDAR_ERROR"

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(CalendarError):
    """Malformed input: missing field, bad color, end before start, unknown recurrence"""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(CalendarError):
    """Missing, malformed or expired bearer token"""

    status_code = 401
    code = "INVALID_TOKEN"


class NotFoundError(CalendarError):
    """Event does not exist or does not belong to the caller"""

    status_code = 404
    code = "NOT_FOUND"


class StoreError(CalendarError):
    """The underlying persistence call failed"""

    status_code = 500
    code = "STORE_ERROR"
