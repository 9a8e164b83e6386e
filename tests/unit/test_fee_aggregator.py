from decimal import Decimal

import pytest

from app.core.exceptions import InvalidFeeAmountError
from app.schemas.billing import AdHocFee, TypedFee, make_fee
from app.services.billing.fee_aggregator import aggregate_fees, validate_fee_amount


def test_no_fees_sum_to_zero() -> None:
    assert aggregate_fees([]) == Decimal("0")


def test_fees_of_both_kinds_are_summed() -> None:
    fees = [
        AdHocFee(name="Repair", amount=Decimal("50000")),
        TypedFee(name="Internet", amount=Decimal("100000"), fee_type_id="ft-1"),
    ]

    assert aggregate_fees(fees) == Decimal("150000")


def test_zero_fee_is_allowed() -> None:
    assert aggregate_fees([AdHocFee(name="Waived", amount=Decimal("0"))]) == 0


def test_negative_fee_is_rejected() -> None:
    with pytest.raises(InvalidFeeAmountError) as exc_info:
        aggregate_fees([AdHocFee(name="Refund", amount=Decimal("-1"))])

    assert exc_info.value.fee_name == "Refund"


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "abc", True])
def test_non_numeric_amounts_are_rejected(amount) -> None:
    with pytest.raises(InvalidFeeAmountError):
        validate_fee_amount("Internet", amount)


def test_string_amount_is_converted() -> None:
    assert validate_fee_amount("Internet", "100000.50") == Decimal("100000.50")


def test_make_fee_picks_variant() -> None:
    assert isinstance(make_fee("Internet", Decimal("1"), fee_type_id="ft-1"), TypedFee)
    assert isinstance(make_fee("Repair", Decimal("1")), AdHocFee)
