from __future__ import annotations

import logging
from typing import Any, List

from triptally.core.errors import ValidationError
from triptally.db.base import TripStore
from triptally.models import Expense
from triptally.services.trip_service import TripService
from triptally.services.validators import (
    is_calendar_date,
    is_finite_number,
    is_non_empty_string,
    trim,
)

logger = logging.getLogger("triptally.services.expenses")


class ExpenseService:
    def __init__(self, store: TripStore, trips: TripService | None = None):
        self.store = store
        self.trips = trips or TripService(store)

    def create(
        self,
        trip_id: str,
        *,
        amount: Any,
        currency: Any,
        category: Any,
        spent_at: Any,
        payer: Any,
        note: Any = None,
    ) -> Expense:
        """Record an expense against an existing trip.

        The parent trip is looked up before any field is validated, so an
        unknown trip reports NotFoundError even when the fields are invalid too.
        """
        self.trips.require(trip_id)

        if not is_finite_number(amount):
            raise ValidationError("amount must be a number", field="amount")
        if not is_non_empty_string(currency):
            raise ValidationError("currency is required", field="currency")
        if not is_non_empty_string(category):
            raise ValidationError("category is required", field="category")
        if not is_calendar_date(spent_at):
            raise ValidationError("spentAt must be YYYY-MM-DD", field="spentAt")
        if not is_non_empty_string(payer):
            raise ValidationError("payer is required", field="payer")
        if not (note is None or isinstance(note, str)):
            raise ValidationError("note must be a string or null", field="note")

        expense = self.store.insert_expense(
            trip_id=trip_id,
            amount=float(amount),
            currency=trim(currency),
            category=trim(category),
            spent_at=spent_at,
            payer=trim(payer),
            note=note,
        )
        logger.info(
            "expense created",
            extra={"context": {"trip_id": trip_id, "expense_id": expense.id}},
        )
        return expense

    def list_for_trip(self, trip_id: str) -> List[Expense]:
        self.trips.require(trip_id)
        return self.store.list_expenses(trip_id)
