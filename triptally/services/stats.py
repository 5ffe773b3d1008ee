from __future__ import annotations

from typing import Dict, Iterable

from triptally.models import Expense, TripStats


def _add(totals: Dict[str, float], key: str, amount: float) -> None:
    totals[key] = totals.get(key, 0.0) + amount


def compute_trip_stats(expenses: Iterable[Expense]) -> TripStats:
    """Sum expense amounts by currency, category and day in a single pass.

    Keys appear in first-occurrence order. Amounts in different currencies are
    never combined; a mixed-currency trip yields one total per currency.
    """
    by_currency: Dict[str, float] = {}
    by_category: Dict[str, float] = {}
    by_day: Dict[str, float] = {}
    for expense in expenses:
        _add(by_currency, expense.currency, expense.amount)
        _add(by_category, expense.category, expense.amount)
        _add(by_day, expense.spent_at, expense.amount)
    return TripStats(
        total_by_currency=by_currency,
        total_by_category=by_category,
        total_by_day=by_day,
    )
