"""Input validation helpers used across the tracker."""

from __future__ import annotations

import re
from datetime import date, datetime

from egg_tracker.domain.exceptions import InvalidDateFormat, InvalidWindowSize

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(value: str | date) -> date:
    """Normalize a ``YYYY-MM-DD`` string (or date) into a calendar date."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise InvalidDateFormat(context={"value": value})
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateFormat(
            "Date is not a valid calendar day", context={"value": value}
        ) from exc


def format_calendar_date(value: date) -> str:
    """Render a calendar date in the stored ``YYYY-MM-DD`` form."""

    return value.isoformat()


def validate_window_days(days: int, max_days: int | None = None) -> int:
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidWindowSize("Window size must be an integer", context={"days": days})
    if days <= 0:
        raise InvalidWindowSize(context={"days": days})
    if max_days is not None and days > max_days:
        raise InvalidWindowSize(
            f"Window size must not exceed {max_days} days",
            context={"days": days, "max_days": max_days},
        )
    return days


def validate_label(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()
