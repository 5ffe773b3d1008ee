import sqlite3

import pytest

from triptally.core.errors import TransactionFailure
from triptally.db.dal import Database
from triptally.db.migrate import CURRENT_SCHEMA_VERSION, apply_migrations


def _trip(db, title="Rome", **overrides):
    values = dict(
        title=title,
        start_date="2024-03-01",
        end_date="2024-03-05",
        base_currency="EUR",
    )
    values.update(overrides)
    return db.insert_trip(**values)


def _expense(db, trip_id, spent_at="2024-03-02", amount=10.0, **overrides):
    values = dict(
        trip_id=trip_id,
        amount=amount,
        currency="EUR",
        category="food",
        spent_at=spent_at,
        payer="ana",
        note=None,
    )
    values.update(overrides)
    return db.insert_expense(**values)


def _count(db, table):
    conn = sqlite3.connect(db.db_path)
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


def test_migrations_are_idempotent(settings):
    assert apply_migrations(settings.db_path) == CURRENT_SCHEMA_VERSION
    assert apply_migrations(settings.db_path) == CURRENT_SCHEMA_VERSION


def test_newer_schema_version_is_refused(db):
    conn = sqlite3.connect(db.db_path)
    conn.execute("UPDATE metadata SET value='99' WHERE key='schema_version'")
    conn.commit()
    conn.close()
    with pytest.raises(RuntimeError):
        apply_migrations(db.db_path)


def test_insert_and_get_trip(db):
    trip = _trip(db)
    assert db.get_trip(trip.id) == trip
    assert trip.created_at.endswith("Z")
    assert db.get_trip("nope") is None


def test_list_trips_newest_first_ties_by_insertion(db):
    trips = [_trip(db, title=str(i)) for i in range(3)]
    conn = sqlite3.connect(db.db_path)
    conn.execute("UPDATE trips SET created_at='2024-01-01T00:00:00.000Z'")
    conn.commit()
    conn.close()
    assert [t.id for t in db.list_trips()] == [t.id for t in reversed(trips)]


def test_update_trip_writes_given_columns_only(db):
    trip = _trip(db)
    updated = db.update_trip(trip.id, end_date="2024-03-09")
    assert updated.end_date == "2024-03-09"
    assert updated.title == trip.title
    assert updated.start_date == trip.start_date
    assert db.update_trip("nope", title="x") is None


def test_list_expenses_ordered_by_day_then_insertion(db):
    trip = _trip(db)
    late = _expense(db, trip.id, spent_at="2024-03-04")
    first = _expense(db, trip.id, spent_at="2024-03-02", amount=1)
    second = _expense(db, trip.id, spent_at="2024-03-02", amount=2)
    assert [e.id for e in db.list_expenses(trip.id)] == [first.id, second.id, late.id]


def test_expense_note_round_trips(db):
    trip = _trip(db)
    with_note = _expense(db, trip.id, note="taxi to hotel")
    assert with_note.note == "taxi to hotel"
    assert _expense(db, trip.id).note is None


def test_cascade_delete_removes_only_owned_rows(db):
    trip = _trip(db)
    other = _trip(db, title="other")
    for _ in range(4):
        _expense(db, trip.id)
    kept = _expense(db, other.id)
    assert db.delete_trip_cascade(trip.id) == 4
    assert db.get_trip(trip.id) is None
    assert db.list_expenses(trip.id) == []
    assert [e.id for e in db.list_expenses(other.id)] == [kept.id]


class FailingTripDelete(Database):
    def _delete_trip_row(self, cur, trip_id):
        raise sqlite3.OperationalError("disk I/O error")


def test_cascade_delete_rolls_back_on_failure(db):
    trip = _trip(db)
    for _ in range(2):
        _expense(db, trip.id)
    failing = FailingTripDelete(db.db_path)
    with pytest.raises(TransactionFailure):
        failing.delete_trip_cascade(trip.id)
    assert db.get_trip(trip.id) is not None
    assert len(db.list_expenses(trip.id)) == 2
    assert _count(db, "expenses") == 2
