"""Storage abstraction used by the services.

The services only talk to a `TripStore`; `dal.Database` is the SQLite
implementation and tests plug in an in-memory double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from triptally.models import Expense, Trip

UNSET: Any = object()


class TripStore(ABC):
    # Trips
    @abstractmethod
    def insert_trip(
        self, *, title: str, start_date: str, end_date: str, base_currency: str
    ) -> Trip:
        """Persist a new trip; the store assigns id and created_at."""
        raise NotImplementedError

    @abstractmethod
    def get_trip(self, trip_id: str) -> Optional[Trip]:
        raise NotImplementedError

    @abstractmethod
    def list_trips(self) -> List[Trip]:
        """Return all trips, newest first; ties keep reverse insertion order."""
        raise NotImplementedError

    @abstractmethod
    def update_trip(
        self,
        trip_id: str,
        *,
        title: Any = UNSET,
        start_date: Any = UNSET,
        end_date: Any = UNSET,
        base_currency: Any = UNSET,
    ) -> Optional[Trip]:
        """Write only the given columns; return the updated trip or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def delete_trip_cascade(self, trip_id: str) -> int:
        """Delete a trip and its expenses in one transaction.

        Returns the number of expenses removed. Raises TransactionFailure after
        rolling back when the store cannot complete the write set.
        """
        raise NotImplementedError

    # Expenses
    @abstractmethod
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
        raise NotImplementedError

    @abstractmethod
    def list_expenses(self, trip_id: str) -> List[Expense]:
        """Return a trip's expenses by spent_at ascending, ties in insertion order."""
        raise NotImplementedError
