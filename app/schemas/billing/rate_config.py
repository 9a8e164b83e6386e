# --- File: app/schemas/billing/rate_config.py ---
"""
Utility rate configuration schemas.

A rate configuration is either property-wide (global) or attached to a
single room. It carries the water billing method with its prices and the
progressive electricity tier bands.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Tuple

from pydantic import Field, field_validator

from app.schemas.common.base import ValueSchema
from app.schemas.common.enums import RateScope, WaterMethod

__all__ = [
    "TierBand",
    "RateConfig",
]


class TierBand(ValueSchema):
    """
    One electricity price band covering the half-open range
    [min_usage, max_usage). A band without max_usage is unbounded.

    Bounds are not constrained here; coverage and ordering are checked
    when the bands are used for a calculation.
    """

    min_usage: int = Field(..., description="First kWh of the band")
    max_usage: Optional[int] = Field(
        default=None,
        description="End of the band (exclusive), None for unbounded",
    )
    price_per_unit: Decimal = Field(..., description="Price per kWh inside the band")

    @property
    def is_unbounded(self) -> bool:
        return self.max_usage is None

    @property
    def width(self) -> Optional[int]:
        """Number of kWh the band can absorb, None when unbounded."""
        if self.max_usage is None:
            return None
        return self.max_usage - self.min_usage

    @property
    def label(self) -> str:
        if self.max_usage is None:
            return f"{self.min_usage}+"
        return f"{self.min_usage}-{self.max_usage}"


class RateConfig(ValueSchema):
    """
    Effective utility rate configuration for a room.

    Electricity is priced through tier_bands unless use_tiered_pricing is
    off, in which case electricity_unit_price applies to every kWh.
    """

    id: Optional[str] = Field(default=None, description="Storage identifier")
    scope: RateScope = Field(default=RateScope.GLOBAL)
    room_id: Optional[str] = Field(
        default=None,
        description="Owning room for room-specific configurations",
    )

    # Electricity
    use_tiered_pricing: bool = Field(default=True)
    electricity_unit_price: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    tier_bands: Tuple[TierBand, ...] = Field(
        default=(),
        description="Tier bands, kept sorted by min_usage",
    )

    # Water
    water_method: WaterMethod = Field(default=WaterMethod.BY_METER)
    water_unit_price: Optional[Decimal] = Field(
        default=None,
        ge=Decimal("0"),
        description="Price per cubic metre for BY_METER billing",
    )
    water_price_per_person: Optional[Decimal] = Field(
        default=None,
        ge=Decimal("0"),
        description="Monthly price per occupant for BY_HEADCOUNT billing",
    )

    @field_validator("tier_bands")
    @classmethod
    def sort_bands(cls, v: Tuple[TierBand, ...]) -> Tuple[TierBand, ...]:
        """Keep bands in ascending order of min_usage."""
        return tuple(sorted(v, key=lambda band: band.min_usage))

    @property
    def is_global(self) -> bool:
        return self.scope == RateScope.GLOBAL
