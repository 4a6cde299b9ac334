"""Trailing day-window arithmetic anchored to an explicit reference timezone."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Tuple

import pytz

from egg_tracker.summary.interfaces import Clock
from egg_tracker.utils.validators import validate_window_days

DEFAULT_WINDOW_DAYS = 7


def resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as exc:
        raise ValueError(f"Unknown timezone '{name}'") from exc


def make_clock(timezone_name: str = "UTC") -> Clock:
    """Return a callable yielding the current calendar day in ``timezone_name``."""

    tz = resolve_timezone(timezone_name)

    def today() -> date:
        return datetime.now(tz).date()

    return today


def trailing_window(today: date, days: int = DEFAULT_WINDOW_DAYS) -> Tuple[date, date]:
    """Return the inclusive ``(start, end)`` covering ``days`` days ending ``today``."""

    validate_window_days(days)
    return today - timedelta(days=days - 1), today


def in_window(day: date, window: Tuple[date, date]) -> bool:
    start, end = window
    return start <= day <= end
