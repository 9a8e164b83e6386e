"""
Meter reading value types.
"""

from __future__ import annotations

from pydantic import Field

from app.schemas.common.base import ValueSchema

__all__ = ["MeterPair", "MeterUsage"]


class MeterPair(ValueSchema):
    """Opening and closing reading of one meter with its dial capacity."""

    old_reading: int = Field(..., description="Reading at the start of the period")
    new_reading: int = Field(..., description="Reading at the end of the period")
    max_capacity: int = Field(..., description="Highest value the dial shows before wrapping")


class MeterUsage(ValueSchema):
    """Consumption derived from a MeterPair."""

    usage: int = Field(..., ge=0)
    rollover: bool = Field(default=False, description="True when the dial wrapped past its maximum")
