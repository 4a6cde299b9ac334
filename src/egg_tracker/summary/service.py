"""Summary facade that coordinates the record store and the daily aggregator."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from egg_tracker.domain.exceptions import StorageUnavailable
from egg_tracker.domain.models import DailySummary
from egg_tracker.summary.aggregator import DailyAggregator
from egg_tracker.summary.interfaces import (
    Clock,
    IDailyAggregator,
    IRecordStore,
    ISummaryService,
)
from egg_tracker.summary.windows import (
    DEFAULT_WINDOW_DAYS,
    in_window,
    make_clock,
    trailing_window,
)
from egg_tracker.utils.validators import parse_calendar_date


class SummaryService(ISummaryService):
    """Computes daily egg summaries on demand from current record state.

    Nothing is cached: every call fetches from the store and runs a single
    grouping pass over that snapshot.
    """

    def __init__(
        self,
        store: IRecordStore,
        aggregator: IDailyAggregator | None = None,
        *,
        clock: Optional[Clock] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._aggregator = aggregator or DailyAggregator()
        self._clock = clock or make_clock("UTC")
        self._logger = logger or logging.getLogger(__name__)

    def get_daily_summary(self, day: date | str) -> DailySummary:
        """Return totals for ``day``; a day without records yields zeros."""

        target = parse_calendar_date(day)
        try:
            records = self._store.fetch_by_date(target)
        except StorageUnavailable:
            self._logger.warning("storage_failure", extra={"query": "by_date"})
            raise
        summary = self._aggregator.summarize_date(target, records)
        self._logger.info(
            "daily_summary_computed",
            extra={
                "date": target.isoformat(),
                "records": len(records),
                "total_eggs": summary.total_eggs,
            },
        )
        return summary

    def get_recent_summaries(
        self, days: int = DEFAULT_WINDOW_DAYS
    ) -> List[DailySummary]:
        """Return one summary per active day in the window, newest first.

        Days without records are omitted, so the result holds at most
        ``days`` entries.
        """

        window = trailing_window(self._clock(), days)
        start, end = window
        try:
            records = self._store.fetch_by_date_range(start, end)
        except StorageUnavailable:
            self._logger.warning("storage_failure", extra={"query": "by_date_range"})
            raise
        in_range = [record for record in records if in_window(record.date, window)]
        summaries = self._aggregator.summarize(in_range)
        self._logger.info(
            "recent_summaries_computed",
            extra={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "days": days,
                "active_days": len(summaries),
            },
        )
        return summaries

    @staticmethod
    def to_dataframe(summaries: Sequence[DailySummary]) -> Any:
        """Export summaries to a pandas DataFrame."""

        try:
            import pandas as pd  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pandas is required for dataframe export") from exc

        data = [summary.model_dump() for summary in summaries]
        return pd.DataFrame(data, columns=["date", "total_eggs", "chickens_laid"])
