from __future__ import annotations

from typing import Dict

from pydantic import Field

from .base import ApiModel


class TripStats(ApiModel):
    total_by_currency: Dict[str, float] = Field(default_factory=dict)
    total_by_category: Dict[str, float] = Field(default_factory=dict)
    total_by_day: Dict[str, float] = Field(default_factory=dict)
