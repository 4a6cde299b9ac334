"""Domain value objects representing chickens, egg records and daily rollups."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from egg_tracker.utils.validators import parse_calendar_date, validate_label

# Field names below shadow ``date``; annotations use this alias instead.
CalendarDate = date


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Chicken(BaseModel):
    """Registered producer referenced by egg records."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    breed: str
    created_at: datetime = Field(default_factory=_utcnow)


class EggRecord(BaseModel):
    """One dated egg count attributed to a chicken."""

    model_config = ConfigDict(frozen=True)

    id: int
    chicken_id: int
    date: CalendarDate
    quantity: int = Field(..., ge=0)
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> CalendarDate:
        return parse_calendar_date(value)


class DailySummary(BaseModel):
    """Derived egg total and distinct-chicken count for one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: CalendarDate
    total_eggs: int = Field(default=0, ge=0)
    chickens_laid: int = Field(default=0, ge=0)


class CreateChickenInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    breed: str

    @field_validator("name", "breed")
    @classmethod
    def require_label(cls, value: str, info: ValidationInfo) -> str:
        return validate_label(value, info.field_name)


class UpdateChickenInput(BaseModel):
    """Patch for a chicken; only explicitly provided fields are applied."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: Optional[str] = None
    breed: Optional[str] = None

    @field_validator("name", "breed")
    @classmethod
    def require_label(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None:
            return value
        return validate_label(value, info.field_name)

    def changes(self) -> dict[str, Any]:
        return _patch_changes(self)


class CreateEggRecordInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    chicken_id: int
    date: CalendarDate
    quantity: int = Field(..., ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> CalendarDate:
        return parse_calendar_date(value)


class UpdateEggRecordInput(BaseModel):
    """Patch for an egg record; only explicitly provided fields are applied."""

    model_config = ConfigDict(frozen=True)

    id: int
    chicken_id: Optional[int] = None
    date: Optional[CalendarDate] = None
    quantity: Optional[int] = Field(default=None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Optional[CalendarDate]:
        if value is None:
            return None
        return parse_calendar_date(value)

    def changes(self) -> dict[str, Any]:
        return _patch_changes(self)


class DateRange(BaseModel):
    """Optional inclusive bounds used when listing egg records."""

    model_config = ConfigDict(frozen=True)

    start_date: Optional[CalendarDate] = None
    end_date: Optional[CalendarDate] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_bound(cls, value: Any) -> Optional[CalendarDate]:
        if value is None:
            return None
        return parse_calendar_date(value)


def _patch_changes(patch: BaseModel) -> dict[str, Any]:
    return {
        name: getattr(patch, name)
        for name in patch.model_fields_set
        if name != "id" and getattr(patch, name) is not None
    }
