"""Summary contracts that separate record storage from aggregation logic."""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field

from egg_tracker.domain.models import DailySummary, EggRecord

Clock = Callable[[], date]


class DailyBucket(BaseModel):
    """Running egg total and contributing chicken ids for one calendar day."""

    model_config = ConfigDict(frozen=True)

    total_eggs: int = 0
    chicken_ids: frozenset[int] = Field(default_factory=frozenset)


class IRecordStore(Protocol):
    """Minimum read contract the aggregation engine needs from storage."""

    def fetch_by_date(self, day: date) -> List[EggRecord]:
        """Return every egg record dated exactly ``day``."""

    def fetch_by_date_range(self, start: date, end: date) -> List[EggRecord]:
        """Return egg records whose dates fall within the inclusive window."""


class IDailyAggregator(Protocol):
    """Business-logic layer that derives daily rollups from fetched records."""

    def group_by_date(self, records: Sequence[EggRecord]) -> Dict[date, DailyBucket]:
        """Bucket records by calendar day in a single pass."""

    def summarize(self, records: Sequence[EggRecord]) -> List[DailySummary]:
        """Return one summary per day present in ``records``, newest first."""

    def summarize_date(
        self, day: date, records: Sequence[EggRecord]
    ) -> DailySummary:
        """Return the summary for ``day``, zero-valued when nothing matches."""


class ISummaryService(Protocol):
    """Read-only facade answering daily and recent-window summary queries."""

    def get_daily_summary(self, day: date | str) -> DailySummary:
        """Summarize a single calendar day."""

    def get_recent_summaries(self, days: int = 7) -> List[DailySummary]:
        """Summarize the trailing window ending today, newest first."""
