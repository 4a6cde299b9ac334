"""Dependency injection container for building fully-wired EggTracker instances."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from egg_tracker.core.config import TrackerConfig
from egg_tracker.core.tracker import EggTracker
from egg_tracker.storage.sqlite_repository import SQLiteStore
from egg_tracker.summary.aggregator import DailyAggregator
from egg_tracker.summary.interfaces import Clock, IDailyAggregator
from egg_tracker.summary.service import SummaryService
from egg_tracker.summary.windows import make_clock


class DIContainer:
    """Factory helpers that assemble an EggTracker with default wiring."""

    @staticmethod
    def create_tracker(
        *,
        config: Optional[TrackerConfig] = None,
        db_path: str | Path | None = None,
        clock: Optional[Clock] = None,
        aggregator: Optional[IDailyAggregator] = None,
        logger: Optional[logging.Logger] = None,
    ) -> EggTracker:
        cfg = config or TrackerConfig.from_env()
        store = SQLiteStore(
            db_path if db_path is not None else cfg.db_path,
            retries=cfg.storage_retries,
        )
        summaries = SummaryService(
            store,
            aggregator or DailyAggregator(),
            clock=clock or make_clock(cfg.timezone),
            logger=logger,
        )
        return EggTracker(config=cfg, store=store, summaries=summaries)
