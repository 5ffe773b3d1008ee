from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from triptally.core.deps import get_expense_service, json_object_body
from triptally.models import Expense
from triptally.services.expense_service import ExpenseService

router = APIRouter(prefix="/api/trips/{trip_id}/expenses", tags=["expenses"])


@router.post(
    "",
    response_model=Expense,
    status_code=status.HTTP_201_CREATED,
    summary="Record an expense against a trip",
)
async def create_expense(
    trip_id: str,
    payload: Dict[str, Any] = Depends(json_object_body),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.create(
        trip_id,
        amount=payload.get("amount"),
        currency=payload.get("currency"),
        category=payload.get("category"),
        spent_at=payload.get("spentAt"),
        payer=payload.get("payer"),
        note=payload.get("note"),
    )


@router.get("", response_model=List[Expense], summary="List a trip's expenses by day")
async def list_expenses(
    trip_id: str, service: ExpenseService = Depends(get_expense_service)
):
    return service.list_for_trip(trip_id)
