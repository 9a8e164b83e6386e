# app/services/billing/electricity_calculator.py
"""
Electricity cost calculation.

Tiered pricing walks the bands in ascending order, filling each band up to
its width before moving on, so every kWh is priced by the band it falls in.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Tuple

from app.core.exceptions import (
    ConfigurationMissingError,
    InvalidMeterConfigError,
    InvalidTierConfigError,
)
from app.schemas.billing import ChargeLine, ElectricityCharge, RateConfig, TierBand

KWH = "kWh"


def validate_tier_bands(bands: Iterable[TierBand]) -> Tuple[TierBand, ...]:
    """
    Sort bands and check they cover [0, inf) without gaps or overlaps.

    Returns:
        Bands ordered by min_usage

    Raises:
        InvalidTierConfigError: Naming the first offending band
    """
    ordered = tuple(sorted(bands, key=lambda band: band.min_usage))
    if not ordered:
        raise InvalidTierConfigError("At least one electricity tier band is required")

    if ordered[0].min_usage != 0:
        raise InvalidTierConfigError(
            f"First tier band must start at 0, starts at {ordered[0].min_usage}",
            band_index=0,
        )

    last = len(ordered) - 1
    for index, band in enumerate(ordered):
        if band.price_per_unit < 0:
            raise InvalidTierConfigError(
                f"Tier band {band.label} has a negative price",
                band_index=index,
            )

        if band.max_usage is None:
            if index != last:
                raise InvalidTierConfigError(
                    f"Only the last tier band may be unbounded, band {band.label} is not last",
                    band_index=index,
                )
            continue

        if band.max_usage <= band.min_usage:
            raise InvalidTierConfigError(
                f"Tier band {band.label} must end after it starts",
                band_index=index,
            )

        if index == last:
            raise InvalidTierConfigError(
                f"Last tier band must be unbounded, ends at {band.max_usage}",
                band_index=index,
            )

        following = ordered[index + 1]
        if following.min_usage > band.max_usage:
            raise InvalidTierConfigError(
                f"Gap between tier bands {band.label} and {following.label}",
                band_index=index + 1,
            )
        if following.min_usage < band.max_usage:
            raise InvalidTierConfigError(
                f"Tier bands {band.label} and {following.label} overlap",
                band_index=index + 1,
            )

    return ordered


def calculate_tiered_electricity_cost(usage: int, bands: Iterable[TierBand]) -> ElectricityCharge:
    """
    Progressive electricity cost.

    Example:
        Bands 0-50 @1678, 50-100 @1734, 100-200 @2014, 200+ @2536 and
        usage 120 give 50*1678 + 50*1734 + 20*2014 = 210880.

    Raises:
        InvalidMeterConfigError: If usage is negative
        InvalidTierConfigError: If the bands are invalid
    """
    if usage < 0:
        raise InvalidMeterConfigError(f"Electricity usage must not be negative, got {usage}", field="electricity")

    ordered = validate_tier_bands(bands)

    remaining = usage
    cost = Decimal("0")
    breakdown: List[ChargeLine] = []
    for band in ordered:
        if remaining == 0:
            break
        width = band.width
        consumed = remaining if width is None else min(remaining, width)
        amount = band.price_per_unit * consumed
        cost += amount
        remaining -= consumed
        breakdown.append(
            ChargeLine(
                label=band.label,
                quantity=consumed,
                unit=KWH,
                unit_price=band.price_per_unit,
                amount=amount,
            )
        )

    return ElectricityCharge(usage=usage, cost=cost, breakdown=tuple(breakdown))


def calculate_flat_electricity_cost(usage: int, unit_price: Decimal) -> ElectricityCharge:
    if usage < 0:
        raise InvalidMeterConfigError(f"Electricity usage must not be negative, got {usage}", field="electricity")
    amount = unit_price * usage
    line = ChargeLine(label="flat", quantity=usage, unit=KWH, unit_price=unit_price, amount=amount)
    return ElectricityCharge(usage=usage, cost=amount, breakdown=(line,) if usage else ())


def calculate_electricity_cost(usage: int, rate_config: RateConfig) -> ElectricityCharge:
    """
    Electricity cost under a rate configuration.

    Tiered pricing is used when enabled and bands exist; otherwise every
    kWh costs electricity_unit_price.

    Raises:
        ConfigurationMissingError: If flat pricing applies without a unit price
    """
    if rate_config.use_tiered_pricing and rate_config.tier_bands:
        return calculate_tiered_electricity_cost(usage, rate_config.tier_bands)

    if rate_config.electricity_unit_price is None:
        raise ConfigurationMissingError(
            "Electricity unit price is not configured",
            config_key="electricity_unit_price",
            room_id=rate_config.room_id,
        )
    return calculate_flat_electricity_cost(usage, rate_config.electricity_unit_price)
