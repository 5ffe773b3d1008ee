"""Pydantic domain models for trips, expenses and spending summaries."""

from .expense import Expense
from .stats import TripStats
from .trip import PATCH_FIELDS, Supplied, Trip, TripDeleted, TripDetail, TripPatch

__all__ = [
    "Expense",
    "TripStats",
    "Trip",
    "TripDetail",
    "TripDeleted",
    "TripPatch",
    "Supplied",
    "PATCH_FIELDS",
]
