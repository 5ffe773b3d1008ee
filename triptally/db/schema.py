"""Database schema DDL definitions and initialization utilities.

Tables:
  - trips: titled date ranges with a nominal base currency
  - expenses: individual expense records owned by a trip
  - metadata: key/value store (schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

TRIPS_DDL = f"""
CREATE TABLE IF NOT EXISTS trips (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    start_date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    end_date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    base_currency TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id TEXT PRIMARY KEY,
    trip_id TEXT NOT NULL,
    amount REAL NOT NULL,
    currency TEXT NOT NULL,
    category TEXT NOT NULL,
    spent_at TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    payer TEXT NOT NULL,
    note TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (trip_id) REFERENCES trips(id)
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

TRIPS_CREATED_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_trips_created ON trips(created_at);"
)
EXPENSES_TRIP_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_expenses_trip_spent ON expenses(trip_id, spent_at);"
)

DDL_ORDER: Sequence[str] = (
    TRIPS_DDL,
    EXPENSES_DDL,
    METADATA_DDL,
    TRIPS_CREATED_INDEX_DDL,
    EXPENSES_TRIP_INDEX_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables and indexes idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
