# app/services/billing/water_calculator.py
"""
Water cost calculation, either metered or per occupant.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from app.core.exceptions import (
    ConfigurationMissingError,
    InvalidMeterConfigError,
    InvalidOccupantCountError,
)
from app.schemas.billing import ChargeLine, MeterPair, RateConfig, WaterCharge
from app.schemas.common.enums import WaterMethod
from app.services.billing.meter_reading import process_meter_pair


def calculate_water_cost(
    rate_config: RateConfig,
    *,
    meter: Optional[MeterPair] = None,
    occupant_count: int = 1,
    inclusive_rollover: bool = False,
) -> WaterCharge:
    """
    Water cost for the configured water method.

    BY_METER charges usage x unit price and needs the meter readings.
    BY_HEADCOUNT charges occupant_count x price per person and reports no
    usage or rollover.

    Raises:
        InvalidMeterConfigError: Metered billing without readings
        InvalidOccupantCountError: Headcount billing with fewer than one occupant
        ConfigurationMissingError: Price for the method is not configured
    """
    if rate_config.water_method == WaterMethod.BY_HEADCOUNT:
        return _water_by_headcount(rate_config, occupant_count)
    return _water_by_meter(rate_config, meter, inclusive_rollover)


def _water_by_meter(
    rate_config: RateConfig,
    meter: Optional[MeterPair],
    inclusive_rollover: bool,
) -> WaterCharge:
    if meter is None:
        raise InvalidMeterConfigError(
            "Water readings are required for metered water billing",
            field="water",
        )
    if rate_config.water_unit_price is None:
        raise ConfigurationMissingError(
            "Water unit price is not configured",
            config_key="water_unit_price",
            room_id=rate_config.room_id,
        )

    reading = process_meter_pair(meter, inclusive_rollover=inclusive_rollover, meter="water")
    price = rate_config.water_unit_price
    cost = price * reading.usage
    line = ChargeLine(label="water", quantity=reading.usage, unit="m3", unit_price=price, amount=cost)
    return WaterCharge(usage=reading.usage, rollover=reading.rollover, cost=cost, breakdown=(line,))


def _water_by_headcount(rate_config: RateConfig, occupant_count: int) -> WaterCharge:
    if occupant_count < 1:
        raise InvalidOccupantCountError(occupant_count)
    if rate_config.water_price_per_person is None:
        raise ConfigurationMissingError(
            "Water price per person is not configured",
            config_key="water_price_per_person",
            room_id=rate_config.room_id,
        )

    price = rate_config.water_price_per_person
    cost: Decimal = price * occupant_count
    line = ChargeLine(label="water", quantity=occupant_count, unit="person", unit_price=price, amount=cost)
    return WaterCharge(usage=None, rollover=None, cost=cost, breakdown=(line,))
