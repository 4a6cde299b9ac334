"""SQLite-backed chicken registry and egg record store."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from egg_tracker.domain.exceptions import (
    ChickenNotFound,
    EggRecordNotFound,
    StorageUnavailable,
    ValidationError,
)
from egg_tracker.domain.models import (
    Chicken,
    CreateChickenInput,
    CreateEggRecordInput,
    EggRecord,
    UpdateChickenInput,
    UpdateEggRecordInput,
)
from egg_tracker.summary.interfaces import IRecordStore
from egg_tracker.utils.retry import retry
from egg_tracker.utils.validators import format_calendar_date, parse_calendar_date

T = TypeVar("T")

_CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS chickens (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    breed TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS egg_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    chicken_id INTEGER NOT NULL REFERENCES chickens(id),
    date TEXT NOT NULL,
    quantity INTEGER NOT NULL CHECK (quantity >= 0),
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_egg_records_date ON egg_records (date);
CREATE INDEX IF NOT EXISTS idx_egg_records_chicken ON egg_records (chicken_id);
"""

_CHICKEN_COLUMNS = "id, name, breed, created_at"
_RECORD_COLUMNS = "id, chicken_id, date, quantity, created_at"

_INSERT_CHICKEN_SQL = "INSERT INTO chickens (name, breed, created_at) VALUES (?, ?, ?);"

_INSERT_RECORD_SQL = """
INSERT INTO egg_records (chicken_id, date, quantity, created_at)
VALUES (?, ?, ?, ?);
"""

_SELECT_CHICKENS_SQL = f"SELECT {_CHICKEN_COLUMNS} FROM chickens ORDER BY id ASC;"
_SELECT_CHICKEN_SQL = f"SELECT {_CHICKEN_COLUMNS} FROM chickens WHERE id = ?;"
_SELECT_RECORD_SQL = f"SELECT {_RECORD_COLUMNS} FROM egg_records WHERE id = ?;"

_SELECT_RECORDS_BY_CHICKEN_SQL = f"""
SELECT {_RECORD_COLUMNS}
FROM egg_records
WHERE chicken_id = ?
ORDER BY date ASC, id ASC;
"""

_SELECT_RECORDS_BY_DATE_SQL = f"""
SELECT {_RECORD_COLUMNS}
FROM egg_records
WHERE date = ?
ORDER BY id ASC;
"""

_DELETE_RECORDS_FOR_CHICKEN_SQL = "DELETE FROM egg_records WHERE chicken_id = ?;"
_DELETE_CHICKEN_SQL = "DELETE FROM chickens WHERE id = ?;"
_DELETE_RECORD_SQL = "DELETE FROM egg_records WHERE id = ?;"

_UPDATABLE_CHICKEN_COLUMNS = ("name", "breed")
_UPDATABLE_RECORD_COLUMNS = ("chicken_id", "date", "quantity")


class SQLiteStore(IRecordStore):
    """Persistence for chickens and their egg records.

    Every operation runs in its own connection and transaction. Driver errors
    surface as :class:`StorageUnavailable`; transient ``OperationalError``
    failures such as a locked database are retried first.
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        retries: int = 3,
        logger: logging.Logger | None = None,
    ) -> None:
        self._db_path = str(db_path)
        self._logger = logger or logging.getLogger(__name__)
        self._run_with_retry = retry(
            attempts=retries,
            exceptions=(sqlite3.OperationalError,),
            retry_if=_is_transient,
        )(self._run)
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Chicken registry
    # ------------------------------------------------------------------
    def create_chicken(self, data: CreateChickenInput) -> Chicken:
        created_at = _utcnow()

        def work(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                _INSERT_CHICKEN_SQL, (data.name, data.breed, created_at.isoformat())
            )
            return int(cursor.lastrowid)

        chicken_id = self._transaction("create_chicken", work)
        self._logger.info("chicken_created", extra={"chicken_id": chicken_id})
        return Chicken(
            id=chicken_id, name=data.name, breed=data.breed, created_at=created_at
        )

    def list_chickens(self) -> List[Chicken]:
        rows = self._transaction(
            "list_chickens", lambda conn: conn.execute(_SELECT_CHICKENS_SQL).fetchall()
        )
        return [self._row_to_chicken(row) for row in rows]

    def get_chicken(self, chicken_id: int) -> Optional[Chicken]:
        row = self._transaction(
            "get_chicken",
            lambda conn: conn.execute(_SELECT_CHICKEN_SQL, (chicken_id,)).fetchone(),
        )
        return self._row_to_chicken(row) if row else None

    def update_chicken(self, patch: UpdateChickenInput) -> Chicken:
        changes = patch.changes()

        def work(conn: sqlite3.Connection) -> Tuple[Any, ...]:
            self._require_chicken(conn, patch.id)
            if changes:
                self._apply_update(conn, "chickens", patch.id, changes)
            return conn.execute(_SELECT_CHICKEN_SQL, (patch.id,)).fetchone()

        row = self._transaction("update_chicken", work)
        return self._row_to_chicken(row)

    def delete_chicken(self, chicken_id: int) -> bool:
        """Remove a chicken and, first, every egg record that references it."""

        def work(conn: sqlite3.Connection) -> int:
            conn.execute(_DELETE_RECORDS_FOR_CHICKEN_SQL, (chicken_id,))
            return conn.execute(_DELETE_CHICKEN_SQL, (chicken_id,)).rowcount

        deleted = self._transaction("delete_chicken", work)
        self._logger.info(
            "chicken_deleted", extra={"chicken_id": chicken_id, "deleted": deleted > 0}
        )
        return deleted > 0

    # ------------------------------------------------------------------
    # Egg records
    # ------------------------------------------------------------------
    def create_egg_record(self, data: CreateEggRecordInput) -> EggRecord:
        created_at = _utcnow()

        def work(conn: sqlite3.Connection) -> int:
            self._require_chicken(conn, data.chicken_id)
            cursor = conn.execute(
                _INSERT_RECORD_SQL,
                (
                    data.chicken_id,
                    format_calendar_date(data.date),
                    data.quantity,
                    created_at.isoformat(),
                ),
            )
            return int(cursor.lastrowid)

        record_id = self._transaction("create_egg_record", work)
        self._logger.info(
            "egg_record_created",
            extra={
                "record_id": record_id,
                "chicken_id": data.chicken_id,
                "date": format_calendar_date(data.date),
                "quantity": data.quantity,
            },
        )
        return EggRecord(
            id=record_id,
            chicken_id=data.chicken_id,
            date=data.date,
            quantity=data.quantity,
            created_at=created_at,
        )

    def get_egg_record(self, record_id: int) -> Optional[EggRecord]:
        row = self._transaction(
            "get_egg_record",
            lambda conn: conn.execute(_SELECT_RECORD_SQL, (record_id,)).fetchone(),
        )
        return self._row_to_record(row) if row else None

    def update_egg_record(self, patch: UpdateEggRecordInput) -> EggRecord:
        changes = patch.changes()
        if not changes:
            raise ValidationError(
                "At least one field must be provided", context={"id": patch.id}
            )
        if "date" in changes:
            changes["date"] = format_calendar_date(changes["date"])

        def work(conn: sqlite3.Connection) -> Tuple[Any, ...]:
            if conn.execute(_SELECT_RECORD_SQL, (patch.id,)).fetchone() is None:
                raise EggRecordNotFound(context={"id": patch.id})
            if "chicken_id" in changes:
                self._require_chicken(conn, changes["chicken_id"])
            self._apply_update(conn, "egg_records", patch.id, changes)
            return conn.execute(_SELECT_RECORD_SQL, (patch.id,)).fetchone()

        row = self._transaction("update_egg_record", work)
        return self._row_to_record(row)

    def delete_egg_record(self, record_id: int) -> bool:
        deleted = self._transaction(
            "delete_egg_record",
            lambda conn: conn.execute(_DELETE_RECORD_SQL, (record_id,)).rowcount,
        )
        return deleted > 0

    def fetch_all(self) -> List[EggRecord]:
        return self.fetch_by_date_range(None, None)

    def fetch_by_chicken(self, chicken_id: int) -> List[EggRecord]:
        return self._select_records(
            "fetch_by_chicken", _SELECT_RECORDS_BY_CHICKEN_SQL, (chicken_id,)
        )

    def fetch_by_date(self, day: date) -> List[EggRecord]:
        return self._select_records(
            "fetch_by_date", _SELECT_RECORDS_BY_DATE_SQL, (format_calendar_date(day),)
        )

    def fetch_by_date_range(
        self, start: Optional[date], end: Optional[date]
    ) -> List[EggRecord]:
        """Return records within the inclusive bounds; ``None`` leaves a side open."""

        conditions: List[str] = []
        params: List[str] = []
        if start is not None:
            conditions.append("date >= ?")
            params.append(format_calendar_date(start))
        if end is not None:
            conditions.append("date <= ?")
            params.append(format_calendar_date(end))
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        sql = (
            f"SELECT {_RECORD_COLUMNS} FROM egg_records {where} "
            "ORDER BY date ASC, id ASC;"
        )
        return self._select_records("fetch_by_date_range", sql, tuple(params))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_schema(self) -> None:
        self._transaction(
            "ensure_schema", lambda conn: conn.executescript(_CREATE_SCHEMA_SQL)
        )

    def _select_records(
        self, operation: str, sql: str, params: Sequence[Any]
    ) -> List[EggRecord]:
        rows = self._transaction(
            operation, lambda conn: conn.execute(sql, tuple(params)).fetchall()
        )
        return [self._row_to_record(row) for row in rows]

    def _transaction(
        self, operation: str, work: Callable[[sqlite3.Connection], T]
    ) -> T:
        try:
            return self._run_with_retry(work)
        except sqlite3.Error as exc:
            self._logger.error(
                "storage_failure",
                extra={"operation": operation, "error": str(exc)},
            )
            raise StorageUnavailable(
                context={"operation": operation, "db_path": self._db_path}
            ) from exc

    def _run(self, work: Callable[[sqlite3.Connection], T]) -> T:
        conn = sqlite3.connect(self._db_path)
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
            with conn:
                return work(conn)
        finally:
            conn.close()

    @staticmethod
    def _require_chicken(conn: sqlite3.Connection, chicken_id: int) -> None:
        if conn.execute(_SELECT_CHICKEN_SQL, (chicken_id,)).fetchone() is None:
            raise ChickenNotFound(
                f"Chicken with id {chicken_id} does not exist",
                context={"chicken_id": chicken_id},
            )

    @staticmethod
    def _apply_update(
        conn: sqlite3.Connection, table: str, row_id: int, changes: Mapping[str, Any]
    ) -> None:
        allowed = (
            _UPDATABLE_CHICKEN_COLUMNS
            if table == "chickens"
            else _UPDATABLE_RECORD_COLUMNS
        )
        columns = [column for column in changes if column in allowed]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        values = [changes[column] for column in columns]
        conn.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?;", (*values, row_id)
        )

    @staticmethod
    def _row_to_chicken(row: Tuple[int, str, str, str]) -> Chicken:
        id_, name, breed, created_at = row
        return Chicken(
            id=id_,
            name=name,
            breed=breed,
            created_at=datetime.fromisoformat(created_at),
        )

    @staticmethod
    def _row_to_record(row: Tuple[int, int, str, int, str]) -> EggRecord:
        id_, chicken_id, day, quantity, created_at = row
        return EggRecord(
            id=id_,
            chicken_id=chicken_id,
            date=parse_calendar_date(day),
            quantity=quantity,
            created_at=datetime.fromisoformat(created_at),
        )


# Lock contention clears on its own; other operational errors do not.
_TRANSIENT_MARKERS = ("locked", "busy")


def _is_transient(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
