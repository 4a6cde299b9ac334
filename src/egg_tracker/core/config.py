"""Tracker configuration management helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

from egg_tracker.summary.windows import DEFAULT_WINDOW_DAYS, resolve_timezone


def _str_to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value: {value}") from exc


@dataclass(frozen=True)
class TrackerConfig:
    """Immutable configuration object loaded from env or files."""

    db_path: str = "egg_tracker.db"
    default_window_days: int = DEFAULT_WINDOW_DAYS
    max_window_days: int = 30
    timezone: str = "UTC"
    log_level: str = "INFO"
    storage_retries: int = 3

    _ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        defaults = cls()
        return cls(
            db_path=os.getenv("EGG_TRACKER_DB_PATH", defaults.db_path),
            default_window_days=_str_to_int(
                os.getenv("EGG_TRACKER_DEFAULT_WINDOW_DAYS"),
                defaults.default_window_days,
            ),
            max_window_days=_str_to_int(
                os.getenv("EGG_TRACKER_MAX_WINDOW_DAYS"), defaults.max_window_days
            ),
            timezone=os.getenv("EGG_TRACKER_TIMEZONE", defaults.timezone),
            log_level=os.getenv("EGG_TRACKER_LOG_LEVEL", defaults.log_level).upper(),
            storage_retries=_str_to_int(
                os.getenv("EGG_TRACKER_STORAGE_RETRIES"), defaults.storage_retries
            ),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "TrackerConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ValueError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._merge_with_defaults(data))

    def validate(self) -> None:
        if not self.db_path:
            raise ValueError("db_path must not be empty")
        if self.default_window_days <= 0:
            raise ValueError("default_window_days must be greater than zero")
        if self.max_window_days <= 0:
            raise ValueError("max_window_days must be greater than zero")
        if self.default_window_days > self.max_window_days:
            raise ValueError("default_window_days must not exceed max_window_days")
        if self.log_level not in self._ALLOWED_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(self._ALLOWED_LOG_LEVELS)}"
            )
        if self.storage_retries < 1:
            raise ValueError("storage_retries must be at least 1")
        resolve_timezone(self.timezone)

    def apply_logging(self) -> None:
        logging.getLogger("egg_tracker").setLevel(self.log_level)

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        defaults = cls()
        known = {field.name for field in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return {name: data.get(name, getattr(defaults, name)) for name in known}

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
