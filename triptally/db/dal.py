"""SQLite data access layer implementing `TripStore`.

Each public method opens its own connection. Writes that touch more than one
table run inside a single connection transaction and roll back together.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from triptally.core.errors import TransactionFailure
from triptally.models import Expense, Trip

from .base import UNSET, TripStore
from .schema import BASIC_UTC_NOW

logger = logging.getLogger("triptally.db")

TRIP_COLUMNS = "id, title, start_date, end_date, base_currency, created_at"
EXPENSE_COLUMNS = (
    "id, trip_id, amount, currency, category, spent_at, payer, note, created_at"
)


def _new_id() -> str:
    return uuid.uuid4().hex


def _row_to_trip(row: sqlite3.Row) -> Trip:
    return Trip(
        id=str(row["id"]),
        title=row["title"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        base_currency=row["base_currency"],
        created_at=row["created_at"],
    )


def _row_to_expense(row: sqlite3.Row) -> Expense:
    return Expense(
        id=str(row["id"]),
        trip_id=str(row["trip_id"]),
        amount=float(row["amount"]),
        currency=row["currency"],
        category=row["category"],
        spent_at=row["spent_at"],
        payer=row["payer"],
        note=row["note"],
        created_at=row["created_at"],
    )


class Database(TripStore):
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Trips
    def insert_trip(
        self, *, title: str, start_date: str, end_date: str, base_currency: str
    ) -> Trip:
        trip_id = _new_id()
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO trips (id, title, start_date, end_date, base_currency, created_at)
                VALUES (?, ?, ?, ?, ?, ({BASIC_UTC_NOW}))
                """,
                (trip_id, title, start_date, end_date, base_currency),
            )
            cur.execute(f"SELECT {TRIP_COLUMNS} FROM trips WHERE id = ?", (trip_id,))
            row = cur.fetchone()
            conn.commit()
            return _row_to_trip(row)
        finally:
            conn.close()

    def get_trip(self, trip_id: str) -> Optional[Trip]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT {TRIP_COLUMNS} FROM trips WHERE id = ?", (trip_id,))
            row = cur.fetchone()
            return _row_to_trip(row) if row else None
        finally:
            conn.close()

    def list_trips(self) -> List[Trip]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                f"SELECT {TRIP_COLUMNS} FROM trips ORDER BY created_at DESC, rowid DESC"
            )
            return [_row_to_trip(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_trip(
        self,
        trip_id: str,
        *,
        title: Any = UNSET,
        start_date: Any = UNSET,
        end_date: Any = UNSET,
        base_currency: Any = UNSET,
    ) -> Optional[Trip]:
        columns: Dict[str, Any] = {
            "title": title,
            "start_date": start_date,
            "end_date": end_date,
            "base_currency": base_currency,
        }
        updates: List[str] = []
        params: List[Any] = []
        for column, value in columns.items():
            if value is not UNSET:
                updates.append(f"{column} = ?")
                params.append(value)

        conn = self._connect()
        try:
            cur = conn.cursor()
            if updates:
                cur.execute(
                    f"UPDATE trips SET {', '.join(updates)} WHERE id = ?",
                    (*params, trip_id),
                )
            cur.execute(f"SELECT {TRIP_COLUMNS} FROM trips WHERE id = ?", (trip_id,))
            row = cur.fetchone()
            conn.commit()
            return _row_to_trip(row) if row else None
        finally:
            conn.close()

    def delete_trip_cascade(self, trip_id: str) -> int:
        conn = self._connect()
        try:
            cur = conn.cursor()
            try:
                removed = self._delete_expenses(cur, trip_id)
                self._delete_trip_row(cur, trip_id)
                conn.commit()
            except sqlite3.Error as exc:
                conn.rollback()
                logger.warning(
                    "rolled back cascade delete",
                    extra={"context": {"trip_id": trip_id}},
                )
                raise TransactionFailure(
                    f"Failed to delete trip {trip_id}; no changes were applied"
                ) from exc
            return removed
        finally:
            conn.close()

    def _delete_expenses(self, cur: sqlite3.Cursor, trip_id: str) -> int:
        cur.execute("DELETE FROM expenses WHERE trip_id = ?", (trip_id,))
        return int(cur.rowcount)

    def _delete_trip_row(self, cur: sqlite3.Cursor, trip_id: str) -> None:
        cur.execute("DELETE FROM trips WHERE id = ?", (trip_id,))

    # ------------------------------------------------------------------
    # Expenses
    def insert_expense(
        self,
        *,
        trip_id: str,
        amount: float,
        currency: str,
        category: str,
        spent_at: str,
        payer: str,
        note: Optional[str],
    ) -> Expense:
        expense_id = _new_id()
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO expenses (
                    id, trip_id, amount, currency, category, spent_at, payer, note, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ({BASIC_UTC_NOW}))
                """,
                (expense_id, trip_id, amount, currency, category, spent_at, payer, note),
            )
            cur.execute(
                f"SELECT {EXPENSE_COLUMNS} FROM expenses WHERE id = ?", (expense_id,)
            )
            row = cur.fetchone()
            conn.commit()
            return _row_to_expense(row)
        finally:
            conn.close()

    def list_expenses(self, trip_id: str) -> List[Expense]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                f"""
                SELECT {EXPENSE_COLUMNS} FROM expenses
                WHERE trip_id = ?
                ORDER BY spent_at ASC, rowid ASC
                """,
                (trip_id,),
            )
            return [_row_to_expense(r) for r in cur.fetchall()]
        finally:
            conn.close()
