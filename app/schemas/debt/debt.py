# --- File: app/schemas/debt/debt.py ---
"""
Debt tracking schemas.

BillLedgerEntry is the minimal view of a stored bill the debt fold needs;
DebtRecord and DebtWarning are derived results and are never persisted.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from pydantic import Field

from app.schemas.common.base import ValueSchema
from app.schemas.common.enums import BillDebtState

__all__ = [
    "BillLedgerEntry",
    "UnpaidBill",
    "DebtRecord",
    "DebtWarning",
]


class BillLedgerEntry(ValueSchema):
    bill_id: str
    month: int = Field(..., ge=1, le=12)
    year: int
    total_cost: Decimal
    paid_amount: Optional[Decimal] = None
    is_paid: bool = False
    created_at: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def period_index(self) -> int:
        """Months since year 0, so consecutive months differ by one."""
        return self.year * 12 + (self.month - 1)


class UnpaidBill(ValueSchema):
    """A bill with an outstanding shortfall."""

    bill_id: str
    month: int
    year: int
    total_cost: Decimal
    paid_amount: Decimal
    remaining_debt: Decimal
    state: BillDebtState
    is_paid: bool
    created_at: Optional[datetime] = None
    notes: Optional[str] = None


class DebtRecord(ValueSchema):
    """Outstanding debt of one room."""

    room_id: str
    total_debt: Decimal = Decimal("0")
    unpaid_bills: Tuple[UnpaidBill, ...] = ()
    consecutive_months_at_risk: int = 0
    has_debt_warning: bool = False


class DebtWarning(ValueSchema):
    """Room owing money across consecutive months."""

    room_id: str
    room_code: Optional[str] = None
    room_name: Optional[str] = None
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    consecutive_months: int
    total_debt: Decimal
    unpaid_bills: Tuple[UnpaidBill, ...] = ()
