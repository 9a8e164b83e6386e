# app/services/billing/fee_aggregator.py
"""Fee totals."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from app.core.exceptions import InvalidFeeAmountError
from app.schemas.billing import Fee


def validate_fee_amount(name: str, amount: Any) -> Decimal:
    """
    Check a fee amount before it is stored or summed.

    Returns:
        The amount as Decimal

    Raises:
        InvalidFeeAmountError: If the amount is negative or not a finite number
    """
    if isinstance(amount, bool):
        raise InvalidFeeAmountError(name, amount)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidFeeAmountError(name, amount) from exc

    if not value.is_finite() or value < 0:
        raise InvalidFeeAmountError(name, amount)
    return value


def aggregate_fees(fees: Iterable[Fee]) -> Decimal:
    """Sum of fee amounts, 0 for no fees."""
    total = Decimal("0")
    for fee in fees:
        total += validate_fee_amount(fee.name, fee.amount)
    return total
