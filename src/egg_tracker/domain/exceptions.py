"""Exception hierarchy for egg tracking and daily aggregation failures."""

from __future__ import annotations

from typing import Any, Mapping


class EggTrackerError(Exception):
    """Base class for all domain-level errors in the egg tracker."""

    default_message = "Egg tracker error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class InvalidWindowSize(EggTrackerError):
    """Requested summary window is not a usable number of days."""

    default_message = "Window size must be a positive number of days"


class InvalidDateFormat(EggTrackerError):
    """Calendar date is not a valid YYYY-MM-DD value."""

    default_message = "Date must be in YYYY-MM-DD format"


class StorageUnavailable(EggTrackerError):
    """Record store could not be reached or rejected the query."""

    default_message = "Record storage is unavailable"


class NotFoundError(EggTrackerError):
    """Referenced registry or record entry does not exist."""

    default_message = "Requested item not found"


class ChickenNotFound(NotFoundError):
    default_message = "Chicken not found"


class EggRecordNotFound(NotFoundError):
    default_message = "Egg record not found"


class ValidationError(EggTrackerError):
    """Raised when field-level input validation fails."""

    default_message = "Input validation failed"
