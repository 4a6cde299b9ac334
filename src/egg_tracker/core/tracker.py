"""Main tracker facade coordinating the registry, record store and summaries."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from egg_tracker.core.config import TrackerConfig
from egg_tracker.domain.models import (
    Chicken,
    CreateChickenInput,
    CreateEggRecordInput,
    DailySummary,
    DateRange,
    EggRecord,
    UpdateChickenInput,
    UpdateEggRecordInput,
)
from egg_tracker.storage.sqlite_repository import SQLiteStore
from egg_tracker.summary.interfaces import ISummaryService
from egg_tracker.summary.service import SummaryService
from egg_tracker.utils.validators import validate_window_days


class EggTracker:
    """High-level API for registering chickens, logging eggs and reading rollups."""

    def __init__(
        self,
        config: TrackerConfig,
        store: SQLiteStore,
        summaries: ISummaryService,
    ) -> None:
        self._config = config
        self._store = store
        self._summaries = summaries

    @property
    def config(self) -> TrackerConfig:
        return self._config

    # Chickens -----------------------------------------------------------
    def create_chicken(self, data: CreateChickenInput) -> Chicken:
        return self._store.create_chicken(data)

    def get_chickens(self) -> List[Chicken]:
        return self._store.list_chickens()

    def update_chicken(self, patch: UpdateChickenInput) -> Chicken:
        return self._store.update_chicken(patch)

    def delete_chicken(self, chicken_id: int) -> bool:
        return self._store.delete_chicken(chicken_id)

    # Egg records --------------------------------------------------------
    def create_egg_record(self, data: CreateEggRecordInput) -> EggRecord:
        return self._store.create_egg_record(data)

    def get_egg_records(self, date_range: Optional[DateRange] = None) -> List[EggRecord]:
        if date_range is None:
            return self._store.fetch_all()
        return self._store.fetch_by_date_range(
            date_range.start_date, date_range.end_date
        )

    def get_egg_records_by_chicken(self, chicken_id: int) -> List[EggRecord]:
        return self._store.fetch_by_chicken(chicken_id)

    def update_egg_record(self, patch: UpdateEggRecordInput) -> EggRecord:
        return self._store.update_egg_record(patch)

    def delete_egg_record(self, record_id: int) -> bool:
        return self._store.delete_egg_record(record_id)

    # Summaries ----------------------------------------------------------
    def get_daily_summary(self, day: date | str) -> DailySummary:
        return self._summaries.get_daily_summary(day)

    def get_recent_daily_summaries(self, days: Optional[int] = None) -> List[DailySummary]:
        window = self._resolve_window(days)
        return self._summaries.get_recent_summaries(window)

    def summaries_to_dataframe(self, days: Optional[int] = None) -> Any:
        return SummaryService.to_dataframe(self.get_recent_daily_summaries(days))

    def _resolve_window(self, days: Optional[int]) -> int:
        if days is None:
            return self._config.default_window_days
        return validate_window_days(days, self._config.max_window_days)
