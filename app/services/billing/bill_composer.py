# app/services/billing/bill_composer.py
"""
Bill composition.

compute_bill is the only place a bill total is produced. It is a pure
function of its inputs: callers rebuild the complete BillInputs after
every change and run it again.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from app.core.exceptions import InvalidPaymentAmountError, OverpaymentRejectedError
from app.schemas.billing import BillCalculation, BillInputs
from app.services.billing.electricity_calculator import calculate_electricity_cost
from app.services.billing.fee_aggregator import aggregate_fees
from app.services.billing.meter_reading import process_meter_pair
from app.services.billing.water_calculator import calculate_water_cost
from app.utils.formatters import amount_to_words


def compute_bill(
    inputs: BillInputs,
    *,
    inclusive_rollover: bool = False,
    locale: str = "vi",
) -> BillCalculation:
    """
    Compute every derived amount of a bill.

    total_cost = room_price + electricity_cost + water_cost + fees_total

    Args:
        inputs: Readings, rate configuration, occupant count, fees and rent
        inclusive_rollover: Meter wrap convention, see process_meter_reading
        locale: Language of total_cost_text

    Returns:
        BillCalculation

    Raises:
        InvalidMeterConfigError, InvalidTierConfigError, InvalidFeeAmountError,
        InvalidOccupantCountError, ConfigurationMissingError
    """
    electricity_reading = process_meter_pair(
        inputs.electricity,
        inclusive_rollover=inclusive_rollover,
        meter="electricity",
    )
    electricity = calculate_electricity_cost(electricity_reading.usage, inputs.rate_config)

    water = calculate_water_cost(
        inputs.rate_config,
        meter=inputs.water,
        occupant_count=inputs.occupant_count,
        inclusive_rollover=inclusive_rollover,
    )

    fees_total = aggregate_fees(inputs.fees)
    total_cost = inputs.room_price + electricity.cost + water.cost + fees_total

    return BillCalculation(
        electricity_usage=electricity_reading.usage,
        electricity_rollover=electricity_reading.rollover,
        electricity_cost=electricity.cost,
        electricity_breakdown=electricity.breakdown,
        water_usage=water.usage,
        water_rollover=water.rollover,
        water_cost=water.cost,
        water_breakdown=water.breakdown,
        fees_total=fees_total,
        room_price=inputs.room_price,
        total_cost=total_cost,
        total_cost_text=amount_to_words(total_cost, locale),
    )


def validate_payment(total_cost: Decimal, paid_amount: Optional[Any]) -> Optional[Decimal]:
    """
    Check a paid amount against a freshly computed total.

    Returns:
        The paid amount as Decimal, or None when nothing was paid

    Raises:
        InvalidPaymentAmountError: If the amount is negative or not a number
        OverpaymentRejectedError: If it exceeds total_cost
    """
    if paid_amount is None:
        return None
    try:
        value = paid_amount if isinstance(paid_amount, Decimal) else Decimal(str(paid_amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidPaymentAmountError(paid_amount) from exc

    if not value.is_finite() or value < 0:
        raise InvalidPaymentAmountError(paid_amount)
    if value > total_cost:
        raise OverpaymentRejectedError(total_cost, value)
    return value
