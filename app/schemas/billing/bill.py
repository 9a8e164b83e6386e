# --- File: app/schemas/billing/bill.py ---
"""
Bill request and response schemas used by the bill service.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, model_validator

from app.schemas.billing.bill_calculation import BillCalculation
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from app.schemas.common.enums import HistoryAction

__all__ = [
    "BillCreate",
    "BillReadingsUpdate",
    "BillPaymentUpdate",
    "BillFeeResponse",
    "BillResponse",
    "BillMutationResult",
    "OpeningReadings",
]


class BillCreate(BaseCreateSchema):
    """Monthly bill creation request."""

    room_id: str = Field(..., min_length=1)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)

    old_electric_reading: int = Field(..., ge=0)
    new_electric_reading: int = Field(..., ge=0)
    old_water_reading: Optional[int] = Field(default=None, ge=0)
    new_water_reading: Optional[int] = Field(default=None, ge=0)

    notes: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def check_water_pair(self) -> "BillCreate":
        """Water readings come as a pair or not at all."""
        if (self.old_water_reading is None) != (self.new_water_reading is None):
            raise ValueError("old_water_reading and new_water_reading must be given together")
        return self


class BillReadingsUpdate(BaseUpdateSchema):
    """Correction of meter readings or notes. Omitted fields stay unchanged."""

    old_electric_reading: Optional[int] = Field(default=None, ge=0)
    new_electric_reading: Optional[int] = Field(default=None, ge=0)
    old_water_reading: Optional[int] = Field(default=None, ge=0)
    new_water_reading: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=1000)


class BillPaymentUpdate(BaseUpdateSchema):
    """Payment status change."""

    is_paid: bool
    paid_amount: Optional[Decimal] = Field(
        default=None,
        description="Amount received; defaults to the full total when marking paid",
    )
    paid_at: Optional[datetime] = None


class BillFeeResponse(BaseResponseSchema):
    id: str
    name: str
    amount: Decimal
    fee_type_id: Optional[str] = None


class BillResponse(BaseResponseSchema):
    """Bill as stored, after the latest recomputation."""

    id: str
    room_id: str
    owner_id: Optional[str] = None
    month: int
    year: int

    old_electric_reading: int
    new_electric_reading: int
    electricity_usage: int
    electricity_rollover: bool
    old_water_reading: Optional[int] = None
    new_water_reading: Optional[int] = None
    water_usage: Optional[int] = None
    water_rollover: Optional[bool] = None

    room_price: Decimal
    electricity_cost: Decimal
    water_cost: Decimal
    fees_total: Decimal
    total_cost: Decimal
    total_cost_text: str

    is_paid: bool
    paid_amount: Optional[Decimal] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    version: int

    fees: List[BillFeeResponse] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BillMutationResult(BaseSchema):
    """
    Outcome of a bill mutation.

    audit_recorded is False when the history entry could not be written;
    the bill change itself is committed either way.
    """

    bill_id: str
    action: HistoryAction
    bill: Optional[BillResponse] = None
    calculation: Optional[BillCalculation] = None
    history_id: Optional[str] = None
    audit_recorded: bool = False


class OpeningReadings(BaseSchema):
    """Readings to prefill a new bill with, taken from the room's latest bill."""

    room_id: str
    old_electric_reading: int = 0
    old_water_reading: Optional[int] = None
    source_bill_id: Optional[str] = None
