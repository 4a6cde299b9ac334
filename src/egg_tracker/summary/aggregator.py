"""Pure business-logic helpers for daily egg aggregation."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Sequence, Set

from egg_tracker.domain.models import DailySummary, EggRecord
from egg_tracker.summary.interfaces import DailyBucket, IDailyAggregator


class DailyAggregator(IDailyAggregator):
    """Performs read-only grouping and counting on egg records."""

    def group_by_date(self, records: Sequence[EggRecord]) -> Dict[date, DailyBucket]:
        totals: Dict[date, int] = {}
        chickens: Dict[date, Set[int]] = {}
        for record in records:
            totals[record.date] = totals.get(record.date, 0) + record.quantity
            chickens.setdefault(record.date, set()).add(record.chicken_id)
        return {
            day: DailyBucket(total_eggs=total, chicken_ids=frozenset(chickens[day]))
            for day, total in totals.items()
        }

    def summarize(self, records: Sequence[EggRecord]) -> List[DailySummary]:
        grouped = self.group_by_date(records)
        return [
            self._to_summary(day, grouped[day])
            for day in sorted(grouped, reverse=True)
        ]

    def summarize_date(
        self, day: date, records: Sequence[EggRecord]
    ) -> DailySummary:
        matching = [record for record in records if record.date == day]
        bucket = self.group_by_date(matching).get(day, DailyBucket())
        return self._to_summary(day, bucket)

    @staticmethod
    def _to_summary(day: date, bucket: DailyBucket) -> DailySummary:
        return DailySummary(
            date=day,
            total_eggs=bucket.total_eggs,
            chickens_laid=len(bucket.chicken_ids),
        )
