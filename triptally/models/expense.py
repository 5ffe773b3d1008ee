from __future__ import annotations

from typing import Optional

from .base import ApiModel


class Expense(ApiModel):
    id: str
    trip_id: str
    amount: float
    currency: str
    category: str
    spent_at: str
    payer: str
    note: Optional[str] = None
    created_at: str
