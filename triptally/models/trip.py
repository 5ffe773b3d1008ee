from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

from .base import ApiModel
from .expense import Expense
from .stats import TripStats


class Trip(ApiModel):
    id: str
    title: str
    start_date: str
    end_date: str
    base_currency: str
    created_at: str


class TripDetail(ApiModel):
    trip: Trip
    expenses: List[Expense]
    stats: TripStats


class TripDeleted(ApiModel):
    id: str
    deleted: bool = True
    expenses_deleted: int


@dataclass(frozen=True)
class Supplied:
    """A value the caller explicitly provided, possibly None."""

    value: Any


# API field name -> TripPatch attribute / trips column, in validation order.
PATCH_FIELDS: Dict[str, str] = {
    "title": "title",
    "startDate": "start_date",
    "endDate": "end_date",
    "baseCurrency": "base_currency",
}


@dataclass(frozen=True)
class TripPatch:
    """Partial trip update: one optional wrapper per updatable field.

    A field left as None was not part of the request and keeps its persisted
    value; ``Supplied(None)`` means the caller sent an explicit null.
    """

    title: Optional[Supplied] = None
    start_date: Optional[Supplied] = None
    end_date: Optional[Supplied] = None
    base_currency: Optional[Supplied] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TripPatch":
        """Build a patch from a request body, ignoring unknown keys."""
        return cls(
            **{
                attr: Supplied(payload[key])
                for key, attr in PATCH_FIELDS.items()
                if key in payload
            }
        )

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def supplied(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            wrapped = getattr(self, f.name)
            if wrapped is not None:
                out[f.name] = wrapped.value
        return out
