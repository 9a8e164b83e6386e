"""Utility rate models."""

from app.models.utility.utility_rate import ElectricityTier, UtilityRate

__all__ = ["UtilityRate", "ElectricityTier"]
