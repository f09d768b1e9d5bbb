"""
checker_errors.py
user: vhao
date: 10-17-2026

Exceptions raised by the appointment checker.
"""

from typing import Optional


class CheckerError(RuntimeError):
    """Base class for all appointment checker errors."""


class SchedulerRequestError(CheckerError):
    """Raised when a scheduler API request fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SchedulerResponseError(CheckerError):
    """Raised when a scheduler API body is not in the expected shape."""


class AppointmentFetchError(CheckerError):
    """Raised when appointments could not be fetched for any location."""


class NotificationError(CheckerError):
    """Raised when a reporter fails to deliver a notification."""
