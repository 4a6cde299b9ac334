from datetime import date, datetime

import pytest
from pydantic import ValidationError

from egg_tracker.domain.exceptions import InvalidDateFormat
from egg_tracker.domain.models import (
    CreateChickenInput,
    CreateEggRecordInput,
    DailySummary,
    DateRange,
    EggRecord,
    UpdateChickenInput,
    UpdateEggRecordInput,
)


def test_egg_record_parses_calendar_date_and_is_immutable():
    record = EggRecord(id=1, chicken_id=2, date="2024-01-15", quantity=3)

    assert record.date == date(2024, 1, 15)
    with pytest.raises((TypeError, ValidationError)):
        record.quantity = 4  # type: ignore[misc]


def test_egg_record_drops_time_of_day():
    record = EggRecord(
        id=1, chicken_id=2, date=datetime(2024, 1, 15, 23, 59), quantity=1
    )
    assert record.date == date(2024, 1, 15)


def test_egg_record_rejects_negative_quantity():
    with pytest.raises(ValidationError):
        EggRecord(id=1, chicken_id=2, date="2024-01-15", quantity=-1)


@pytest.mark.parametrize("value", ["2024/01/15", "2024-1-15", "2024-02-30", ""])
def test_create_egg_record_rejects_malformed_dates(value):
    with pytest.raises(InvalidDateFormat):
        CreateEggRecordInput(chicken_id=1, date=value, quantity=1)


def test_create_chicken_requires_name_and_breed():
    with pytest.raises(ValidationError):
        CreateChickenInput(name="  ", breed="Leghorn")

    chicken = CreateChickenInput(name=" Henrietta ", breed="Leghorn")
    assert chicken.name == "Henrietta"


def test_update_chicken_changes_only_include_set_fields():
    patch = UpdateChickenInput(id=3, breed="Silkie")
    assert patch.changes() == {"breed": "Silkie"}
    assert UpdateChickenInput(id=3).changes() == {}


def test_update_chicken_rejects_blank_name():
    with pytest.raises(ValidationError):
        UpdateChickenInput(id=3, name="")


def test_update_egg_record_changes_normalize_date():
    patch = UpdateEggRecordInput(id=1, date="2024-01-17", quantity=0)
    assert patch.changes() == {"date": date(2024, 1, 17), "quantity": 0}


def test_date_range_accepts_open_bounds():
    window = DateRange(start_date="2024-01-01")
    assert window.start_date == date(2024, 1, 1)
    assert window.end_date is None


def test_daily_summary_defaults_to_zero():
    summary = DailySummary(date=date(2024, 1, 15))
    assert summary.total_eggs == 0
    assert summary.chickens_laid == 0
    assert summary.model_dump(mode="json")["date"] == "2024-01-15"
