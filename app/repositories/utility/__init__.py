"""Utility rate repositories."""

from app.repositories.utility.utility_rate_repository import UtilityRateRepository

__all__ = ["UtilityRateRepository"]
