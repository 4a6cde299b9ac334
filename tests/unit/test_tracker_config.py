import json
import logging
from pathlib import Path

import pytest

from egg_tracker.core.config import TrackerConfig


def test_tracker_config_defaults():
    config = TrackerConfig()
    assert config.db_path == "egg_tracker.db"
    assert config.default_window_days == 7
    assert config.max_window_days == 30
    assert config.timezone == "UTC"
    assert config.storage_retries == 3


def test_tracker_config_from_env(monkeypatch):
    monkeypatch.setenv("EGG_TRACKER_DB_PATH", "/tmp/coop.db")
    monkeypatch.setenv("EGG_TRACKER_DEFAULT_WINDOW_DAYS", "14")
    monkeypatch.setenv("EGG_TRACKER_MAX_WINDOW_DAYS", "60")
    monkeypatch.setenv("EGG_TRACKER_TIMEZONE", "utc")
    monkeypatch.setenv("EGG_TRACKER_LOG_LEVEL", "debug")
    monkeypatch.setenv("EGG_TRACKER_STORAGE_RETRIES", "5")

    config = TrackerConfig.from_env()

    assert config.db_path == "/tmp/coop.db"
    assert config.default_window_days == 14
    assert config.max_window_days == 60
    assert config.log_level == "DEBUG"
    assert config.storage_retries == 5


def test_tracker_config_from_env_rejects_bad_integer(monkeypatch):
    monkeypatch.setenv("EGG_TRACKER_MAX_WINDOW_DAYS", "lots")
    with pytest.raises(ValueError):
        TrackerConfig.from_env()


def test_tracker_config_from_file_json(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"db_path": "farm.db", "max_window_days": 10}))

    config = TrackerConfig.from_file(path)

    assert config.db_path == "farm.db"
    assert config.max_window_days == 10
    assert config.default_window_days == 7


def test_tracker_config_from_file_yaml(tmp_path: Path):
    yaml = pytest.importorskip("yaml")
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"default_window_days": 3, "log_level": "WARNING"}))

    config = TrackerConfig.from_file(str(path))

    assert config.default_window_days == 3
    assert config.log_level == "WARNING"


def test_tracker_config_from_file_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        TrackerConfig.from_file(tmp_path / "missing.json")

    ini = tmp_path / "config.ini"
    ini.write_text("[tracker]")
    with pytest.raises(ValueError):
        TrackerConfig.from_file(ini)

    unknown = tmp_path / "config.json"
    unknown.write_text(json.dumps({"flock_size": 12}))
    with pytest.raises(ValueError):
        TrackerConfig.from_file(unknown)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_window_days": 0},
        {"max_window_days": -1},
        {"default_window_days": 10, "max_window_days": 5},
        {"timezone": "Nowhere/Special"},
        {"log_level": "LOUD"},
        {"storage_retries": 0},
        {"db_path": ""},
    ],
)
def test_tracker_config_validate_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        TrackerConfig(**kwargs)


def test_apply_logging_sets_package_level():
    TrackerConfig(log_level="WARNING").apply_logging()
    assert logging.getLogger("egg_tracker").level == logging.WARNING
