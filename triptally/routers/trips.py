from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from triptally.core.deps import get_trip_service, json_object_body
from triptally.models import Trip, TripDeleted, TripDetail, TripPatch
from triptally.services.trip_service import TripService

router = APIRouter(prefix="/api/trips", tags=["trips"])


@router.post(
    "",
    response_model=Trip,
    status_code=status.HTTP_201_CREATED,
    summary="Create trip",
)
async def create_trip(
    payload: Dict[str, Any] = Depends(json_object_body),
    service: TripService = Depends(get_trip_service),
):
    return service.create(
        title=payload.get("title"),
        start_date=payload.get("startDate"),
        end_date=payload.get("endDate"),
        base_currency=payload.get("baseCurrency"),
    )


@router.get("", response_model=List[Trip], summary="List trips, newest first")
async def list_trips(service: TripService = Depends(get_trip_service)):
    return service.list()


@router.get(
    "/{trip_id}",
    response_model=TripDetail,
    summary="Get trip with its expenses and spending totals",
)
async def get_trip(trip_id: str, service: TripService = Depends(get_trip_service)):
    return service.get_with_expenses(trip_id)


@router.patch("/{trip_id}", response_model=Trip, summary="Update trip (partial)")
async def update_trip(
    trip_id: str,
    payload: Dict[str, Any] = Depends(json_object_body),
    service: TripService = Depends(get_trip_service),
):
    return service.update(trip_id, TripPatch.from_payload(payload))


@router.delete(
    "/{trip_id}",
    response_model=TripDeleted,
    summary="Delete trip and all of its expenses",
)
async def delete_trip(trip_id: str, service: TripService = Depends(get_trip_service)):
    return service.delete(trip_id)
