import copy
import itertools
import uuid
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from triptally.core.config import Settings
from triptally.core.errors import TransactionFailure
from triptally.db.base import UNSET, TripStore
from triptally.db.dal import Database
from triptally.db.migrate import apply_migrations
from triptally.main import create_app
from triptally.models import Expense, Trip
from triptally.services.expense_service import ExpenseService
from triptally.services.trip_service import TripService


class InMemoryStore(TripStore):
    """TripStore double keeping rows in dicts.

    ``created_at`` comes from a fixed clock so tests can force ties.
    Set ``fail_cascade`` to make the cascade delete fail after the expense
    rows are gone; the snapshot taken beforehand is restored.
    """

    def __init__(self, clock: Optional[List[str]] = None):
        self.trips: Dict[str, Dict[str, Any]] = {}
        self.expenses: Dict[str, Dict[str, Any]] = {}
        self._clock = iter(clock) if clock else None
        self._seq = itertools.count(1)
        self.fail_cascade = False

    def _now(self) -> str:
        if self._clock is not None:
            return next(self._clock)
        return f"2024-01-01T00:00:{next(self._seq):02d}.000Z"

    def insert_trip(self, *, title, start_date, end_date, base_currency) -> Trip:
        trip_id = uuid.uuid4().hex
        self.trips[trip_id] = dict(
            id=trip_id,
            title=title,
            start_date=start_date,
            end_date=end_date,
            base_currency=base_currency,
            created_at=self._now(),
        )
        return Trip(**self.trips[trip_id])

    def get_trip(self, trip_id) -> Optional[Trip]:
        row = self.trips.get(trip_id)
        return Trip(**row) if row else None

    def list_trips(self) -> List[Trip]:
        rows = list(reversed(list(self.trips.values())))
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [Trip(**r) for r in rows]

    def update_trip(
        self,
        trip_id,
        *,
        title=UNSET,
        start_date=UNSET,
        end_date=UNSET,
        base_currency=UNSET,
    ) -> Optional[Trip]:
        row = self.trips.get(trip_id)
        if row is None:
            return None
        changes = dict(
            title=title,
            start_date=start_date,
            end_date=end_date,
            base_currency=base_currency,
        )
        row.update({k: v for k, v in changes.items() if v is not UNSET})
        return Trip(**row)

    def delete_trip_cascade(self, trip_id) -> int:
        snapshot = (copy.deepcopy(self.trips), copy.deepcopy(self.expenses))
        owned = [eid for eid, e in self.expenses.items() if e["trip_id"] == trip_id]
        for eid in owned:
            del self.expenses[eid]
        if self.fail_cascade:
            self.trips, self.expenses = snapshot
            raise TransactionFailure(f"Failed to delete trip {trip_id}")
        self.trips.pop(trip_id, None)
        return len(owned)

    def insert_expense(
        self, *, trip_id, amount, currency, category, spent_at, payer, note
    ) -> Expense:
        expense_id = uuid.uuid4().hex
        self.expenses[expense_id] = dict(
            id=expense_id,
            trip_id=trip_id,
            amount=amount,
            currency=currency,
            category=category,
            spent_at=spent_at,
            payer=payer,
            note=note,
            created_at=self._now(),
        )
        return Expense(**self.expenses[expense_id])

    def list_expenses(self, trip_id) -> List[Expense]:
        rows = [e for e in self.expenses.values() if e["trip_id"] == trip_id]
        rows.sort(key=lambda r: r["spent_at"])
        return [Expense(**r) for r in rows]


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def trip_service(memory_store):
    return TripService(memory_store)


@pytest.fixture
def expense_service(memory_store, trip_service):
    return ExpenseService(memory_store, trip_service)


@pytest.fixture
def settings(tmp_path):
    s = Settings(data_dir=tmp_path, db_filename="test.sqlite3")
    s.init_post_load()
    return s


@pytest.fixture
def db(settings):
    apply_migrations(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture
def client(settings):
    app = create_app(settings_override=settings)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def make_trip(client):
    def _make(**overrides):
        body = {
            "title": "Lisbon",
            "startDate": "2024-05-01",
            "endDate": "2024-05-10",
            "baseCurrency": "EUR",
        }
        body.update(overrides)
        resp = client.post("/api/trips", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
