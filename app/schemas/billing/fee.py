# --- File: app/schemas/billing/fee.py ---
"""
Bill fee schemas.

Fees are a tagged variant: an AdHocFee is typed in by hand for a single
bill, a TypedFee comes from a configured fee type (usually a recurring
room fee copied into each new bill).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from app.schemas.common.base import BaseCreateSchema, BaseUpdateSchema, ValueSchema
from app.schemas.common.enums import FeeKind

__all__ = [
    "AdHocFee",
    "TypedFee",
    "Fee",
    "make_fee",
    "BillFeeCreate",
    "BillFeeUpdate",
]


class AdHocFee(ValueSchema):
    """One-off fee entered for a single bill."""

    kind: Literal[FeeKind.AD_HOC] = FeeKind.AD_HOC
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal


class TypedFee(ValueSchema):
    """Fee linked to a configured fee type."""

    kind: Literal[FeeKind.TYPED] = FeeKind.TYPED
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal
    fee_type_id: str


Fee = Annotated[Union[AdHocFee, TypedFee], Field(discriminator="kind")]


def make_fee(
    name: str,
    amount: Decimal,
    fee_type_id: Optional[str] = None,
    fee_id: Optional[str] = None,
) -> Union[AdHocFee, TypedFee]:
    """Build the right fee variant for a stored fee row."""
    if fee_type_id:
        return TypedFee(id=fee_id, name=name, amount=amount, fee_type_id=fee_type_id)
    return AdHocFee(id=fee_id, name=name, amount=amount)


class BillFeeCreate(BaseCreateSchema):
    """Request to attach a fee to a bill. The amount is checked by the service."""

    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal
    fee_type_id: Optional[str] = None


class BillFeeUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[Decimal] = None
