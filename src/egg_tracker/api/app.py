"""HTTP transport for the egg tracker.

FastAPI service providing:
- chicken registration and maintenance under ``/chickens``
- egg record CRUD under ``/egg-records``
- daily rollups under ``/summaries``
- GET /health: Health check
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from egg_tracker.core.config import TrackerConfig
from egg_tracker.core.container import DIContainer
from egg_tracker.core.tracker import EggTracker
from egg_tracker.domain.exceptions import (
    EggTrackerError,
    InvalidDateFormat,
    InvalidWindowSize,
    NotFoundError,
    StorageUnavailable,
    ValidationError,
)
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

__all__ = ["create_app"]

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (InvalidDateFormat, 422),
    (InvalidWindowSize, 422),
    (ValidationError, 422),
    (StorageUnavailable, 503),
)


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class DeleteResponse(BaseModel):
    success: bool


class ChickenPatch(BaseModel):
    name: Optional[str] = None
    breed: Optional[str] = None


class EggRecordPayload(BaseModel):
    chicken_id: int
    date: str
    quantity: int = Field(..., ge=0)


class EggRecordPatch(BaseModel):
    chicken_id: Optional[int] = None
    date: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)


def _status_for(exc: EggTrackerError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _error_details(errors: Iterable[Any]) -> List[dict]:
    # ctx/input may hold exception objects that are not JSON serialisable.
    return [
        {
            "type": error.get("type"),
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg"),
        }
        for error in errors
    ]


def create_app(
    tracker: Optional[EggTracker] = None, config: Optional[TrackerConfig] = None
) -> FastAPI:
    """Create the FastAPI app, building a default tracker when none is given."""

    if tracker is None:
        tracker = DIContainer.create_tracker(config=config)
    tracker.config.apply_logging()

    app = FastAPI(
        title="Egg Tracker",
        description="Chicken registry, egg records and daily egg summaries",
        version="0.1.0",
    )

    @app.exception_handler(EggTrackerError)
    async def tracker_error_handler(
        request: Request, exc: EggTrackerError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error(
                "request_failed",
                extra={"path": request.url.path, "error": exc.message},
            )
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": exc.message},
        )

    @app.exception_handler(PydanticValidationError)
    async def input_error_handler(
        request: Request, exc: PydanticValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "detail": _error_details(exc.errors()),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "detail": _error_details(exc.errors()),
            },
        )

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="ok", timestamp=datetime.now(timezone.utc).isoformat()
        )

    # ------------------------------------------------------------------
    # Chickens
    # ------------------------------------------------------------------
    @app.post("/chickens", response_model=Chicken, status_code=201)
    def create_chicken(payload: CreateChickenInput) -> Chicken:
        return tracker.create_chicken(payload)

    @app.get("/chickens", response_model=List[Chicken])
    def list_chickens() -> List[Chicken]:
        return tracker.get_chickens()

    @app.patch("/chickens/{chicken_id}", response_model=Chicken)
    def update_chicken(chicken_id: int, payload: ChickenPatch) -> Chicken:
        patch = UpdateChickenInput(
            id=chicken_id, **payload.model_dump(exclude_unset=True)
        )
        return tracker.update_chicken(patch)

    @app.delete("/chickens/{chicken_id}", response_model=DeleteResponse)
    def delete_chicken(chicken_id: int) -> DeleteResponse:
        return DeleteResponse(success=tracker.delete_chicken(chicken_id))

    @app.get("/chickens/{chicken_id}/egg-records", response_model=List[EggRecord])
    def list_chicken_records(chicken_id: int) -> List[EggRecord]:
        return tracker.get_egg_records_by_chicken(chicken_id)

    # ------------------------------------------------------------------
    # Egg records
    # ------------------------------------------------------------------
    @app.post("/egg-records", response_model=EggRecord, status_code=201)
    def create_egg_record(payload: EggRecordPayload) -> EggRecord:
        return tracker.create_egg_record(CreateEggRecordInput(**payload.model_dump()))

    @app.get("/egg-records", response_model=List[EggRecord])
    def list_egg_records(
        start_date: Optional[str] = Query(default=None),
        end_date: Optional[str] = Query(default=None),
    ) -> List[EggRecord]:
        if start_date is None and end_date is None:
            return tracker.get_egg_records()
        return tracker.get_egg_records(
            DateRange(start_date=start_date, end_date=end_date)
        )

    @app.patch("/egg-records/{record_id}", response_model=EggRecord)
    def update_egg_record(record_id: int, payload: EggRecordPatch) -> EggRecord:
        patch = UpdateEggRecordInput(
            id=record_id, **payload.model_dump(exclude_unset=True)
        )
        return tracker.update_egg_record(patch)

    @app.delete("/egg-records/{record_id}", response_model=DeleteResponse)
    def delete_egg_record(record_id: int) -> DeleteResponse:
        return DeleteResponse(success=tracker.delete_egg_record(record_id))

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------
    @app.get("/summaries/daily/{day}", response_model=DailySummary)
    def daily_summary(day: str) -> DailySummary:
        return tracker.get_daily_summary(day)

    @app.get("/summaries/recent", response_model=List[DailySummary])
    def recent_summaries(
        days: Optional[int] = Query(default=None),
    ) -> List[DailySummary]:
        return tracker.get_recent_daily_summaries(days)

    return app
