# --- File: app/schemas/billing/bill_calculation.py ---
"""
Bill calculation schemas.

BillInputs is the complete input set of one bill computation and
BillCalculation its result. Both are immutable, so the same inputs always
produce an identical calculation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Tuple

from pydantic import Field

from app.schemas.billing.fee import Fee
from app.schemas.billing.meter import MeterPair
from app.schemas.billing.rate_config import RateConfig
from app.schemas.common.base import ValueSchema

__all__ = [
    "ChargeLine",
    "ElectricityCharge",
    "WaterCharge",
    "BillInputs",
    "BillCalculation",
]


class ChargeLine(ValueSchema):
    """One line of a cost breakdown."""

    label: str
    quantity: int
    unit: str
    unit_price: Decimal
    amount: Decimal


class ElectricityCharge(ValueSchema):
    usage: int
    cost: Decimal
    breakdown: Tuple[ChargeLine, ...] = ()


class WaterCharge(ValueSchema):
    """Water cost. usage/rollover are None for headcount billing."""

    usage: Optional[int] = None
    rollover: Optional[bool] = None
    cost: Decimal
    breakdown: Tuple[ChargeLine, ...] = ()


class BillInputs(ValueSchema):
    """Everything a bill total depends on."""

    electricity: MeterPair
    water: Optional[MeterPair] = Field(
        default=None,
        description="Water meter readings, not needed for headcount billing",
    )
    rate_config: RateConfig
    occupant_count: int = Field(default=1, description="Primary tenant plus occupants")
    fees: Tuple[Fee, ...] = ()
    room_price: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))


class BillCalculation(ValueSchema):
    """Result of composing all bill components."""

    electricity_usage: int
    electricity_rollover: bool
    electricity_cost: Decimal
    electricity_breakdown: Tuple[ChargeLine, ...] = ()

    water_usage: Optional[int] = None
    water_rollover: Optional[bool] = None
    water_cost: Decimal
    water_breakdown: Tuple[ChargeLine, ...] = ()

    fees_total: Decimal
    room_price: Decimal = Decimal("0")
    total_cost: Decimal
    total_cost_text: str
