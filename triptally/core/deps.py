"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import Depends, Request

from triptally.core.config import Settings, get_settings
from triptally.core.errors import ValidationError
from triptally.db.base import TripStore
from triptally.db.dal import Database
from triptally.services.expense_service import ExpenseService
from triptally.services.trip_service import TripService

BODY_NOT_OBJECT = "request body must be a JSON object"


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with (falls back to the cached environment settings)."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_db(settings: Settings = Depends(get_app_settings)) -> TripStore:
    return Database(settings.db_path)


def get_trip_service(db: TripStore = Depends(get_db)) -> TripService:
    return TripService(db)


def get_expense_service(
    db: TripStore = Depends(get_db),
    trips: TripService = Depends(get_trip_service),
) -> ExpenseService:
    return ExpenseService(db, trips)


async def json_object_body(request: Request) -> Dict[str, Any]:
    """Parse the request body, rejecting anything that is not a JSON object."""
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except ValueError as exc:
        raise ValidationError(BODY_NOT_OBJECT) from exc
    if not isinstance(payload, dict):
        raise ValidationError(BODY_NOT_OBJECT)
    return payload
