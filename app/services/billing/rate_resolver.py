# app/services/billing/rate_resolver.py
"""
Utility rate resolution.

A room is billed with its own rate configuration when it has one, otherwise
with the property-wide (global) configuration.
"""
from __future__ import annotations

from typing import Optional

from app.config.logging import get_logger
from app.core.exceptions import ConfigurationMissingError
from app.models.utility import UtilityRate
from app.repositories.utility import UtilityRateRepository
from app.schemas.billing import RateConfig, TierBand
from app.schemas.common.enums import RateScope

logger = get_logger(__name__)


def rate_config_from_model(rate: UtilityRate) -> RateConfig:
    """Convert a stored UtilityRate and its tiers into a RateConfig."""
    bands = tuple(
        TierBand(
            min_usage=tier.min_usage,
            max_usage=tier.max_usage,
            price_per_unit=tier.price_per_unit,
        )
        for tier in rate.electricity_tiers
    )
    return RateConfig(
        id=rate.id,
        scope=RateScope.GLOBAL if rate.is_global else RateScope.ROOM,
        room_id=rate.room_id,
        use_tiered_pricing=rate.use_tiered_pricing,
        electricity_unit_price=rate.electricity_price,
        tier_bands=bands,
        water_method=rate.water_method,
        water_unit_price=rate.water_price,
        water_price_per_person=rate.water_price_per_person,
    )


def resolve_rate_config(repository: UtilityRateRepository, room_id: str) -> RateConfig:
    """
    Resolve the effective rate configuration of a room.

    Args:
        repository: Utility rate repository bound to an open session
        room_id: Room being billed

    Returns:
        Room-specific configuration, else the global one

    Raises:
        ConfigurationMissingError: If neither exists
    """
    rate: Optional[UtilityRate] = repository.get_room_rate(room_id)
    if rate is None:
        rate = repository.get_global_rate()

    if rate is None:
        raise ConfigurationMissingError(
            f"No utility rate configured for room {room_id} and no global rate exists",
            config_key="utility_rate",
            room_id=room_id,
        )

    config = rate_config_from_model(rate)
    logger.debug(
        "Resolved utility rate",
        extra={"room_id": room_id, "scope": config.scope.value, "rate_id": config.id},
    )
    return config
