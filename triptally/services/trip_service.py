"""Trip orchestration: validation, partial-update merge, cascading delete.

Validation short-circuits at the first failing field, checked in the order
title, startDate, endDate, baseCurrency, then the start <= end ordering.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Tuple

from triptally.core.errors import NotFoundError, ValidationError
from triptally.db.base import TripStore
from triptally.models import Trip, TripDeleted, TripDetail, TripPatch
from triptally.services.stats import compute_trip_stats
from triptally.services.validators import (
    date_less_or_equal,
    is_calendar_date,
    is_non_empty_string,
    trim,
)

logger = logging.getLogger("triptally.services.trips")

TRIP_NOT_FOUND = "Trip not found"

# (attribute, api field, predicate, message)
TRIP_FIELD_RULES: Tuple[Tuple[str, str, Callable[[Any], bool], str], ...] = (
    ("title", "title", is_non_empty_string, "title is required"),
    ("start_date", "startDate", is_calendar_date, "startDate must be YYYY-MM-DD"),
    ("end_date", "endDate", is_calendar_date, "endDate must be YYYY-MM-DD"),
    ("base_currency", "baseCurrency", is_non_empty_string, "baseCurrency is required"),
)
TRIMMED_FIELDS = ("title", "base_currency")


def _validate_fields(values: Dict[str, Any]) -> None:
    for attr, field, check, message in TRIP_FIELD_RULES:
        if attr in values and not check(values[attr]):
            raise ValidationError(message, field=field)


def _validate_order(start_date: str, end_date: str) -> None:
    if not date_less_or_equal(start_date, end_date):
        raise ValidationError("startDate must be <= endDate", field="endDate")


def _normalize(values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        attr: trim(value) if attr in TRIMMED_FIELDS else value
        for attr, value in values.items()
    }


class TripService:
    def __init__(self, store: TripStore):
        self.store = store

    def create(
        self, *, title: Any, start_date: Any, end_date: Any, base_currency: Any
    ) -> Trip:
        values = {
            "title": title,
            "start_date": start_date,
            "end_date": end_date,
            "base_currency": base_currency,
        }
        _validate_fields(values)
        _validate_order(start_date, end_date)
        trip = self.store.insert_trip(**_normalize(values))
        logger.info("trip created", extra={"context": {"trip_id": trip.id}})
        return trip

    def list(self) -> List[Trip]:
        return self.store.list_trips()

    def require(self, trip_id: str) -> Trip:
        """Return the trip or raise NotFoundError."""
        trip = self.store.get_trip(trip_id)
        if trip is None:
            raise NotFoundError(TRIP_NOT_FOUND)
        return trip

    def get_with_expenses(self, trip_id: str) -> TripDetail:
        trip = self.require(trip_id)
        expenses = self.store.list_expenses(trip_id)
        return TripDetail(
            trip=trip, expenses=expenses, stats=compute_trip_stats(expenses)
        )

    def update(self, trip_id: str, patch: TripPatch) -> Trip:
        """Apply a partial update.

        Only supplied fields are validated and written. The date ordering is
        re-checked against the effective range, so a new endDate is compared
        with the stored startDate when startDate is not part of the patch.
        """
        if patch.is_empty():
            raise ValidationError("no fields to update")
        existing = self.require(trip_id)
        changes = patch.supplied()
        _validate_fields(changes)
        _validate_order(
            changes.get("start_date", existing.start_date),
            changes.get("end_date", existing.end_date),
        )
        updated = self.store.update_trip(trip_id, **_normalize(changes))
        if updated is None:
            raise NotFoundError(TRIP_NOT_FOUND)
        logger.info(
            "trip updated",
            extra={"context": {"trip_id": trip_id, "fields": sorted(changes)}},
        )
        return updated

    def delete(self, trip_id: str) -> TripDeleted:
        self.require(trip_id)
        removed = self.store.delete_trip_cascade(trip_id)
        logger.info(
            "trip deleted",
            extra={"context": {"trip_id": trip_id, "expenses_deleted": removed}},
        )
        return TripDeleted(id=trip_id, expenses_deleted=removed)
