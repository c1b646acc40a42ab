from __future__ import annotations

from datetime import date
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

WarningType = Literal["gap", "overlap", "future", "past-lease-end"]


class RentPeriod(BaseModel):
    """Historical rent at a fixed monthly amount, both endpoints inclusive."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    start_date: date | None
    end_date: date | None
    monthly_rent: float


class ValidationWarning(BaseModel):
    type: WarningType
    message: str
    period_indices: list[int]


class MonthlyRentRecord(BaseModel):
    payment_date: date
    expected_amount: float
    paid_amount: float
    notes: str = "Historical rent payment"
