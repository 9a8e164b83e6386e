"""
Utility rate models.

A UtilityRate holds electricity and water pricing either for the whole
property (is_global) or for a single room. Tiered electricity prices live in
ElectricityTier rows ordered by their lower bound.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.schemas.common.enums import WaterMethod

if TYPE_CHECKING:
    from app.models.room.room import Room


class UtilityRate(TimestampModel):
    """
    Utility pricing configuration.

    Exactly one row is expected to have is_global set; room rows override
    it entirely for their room.
    """

    __tablename__ = "utility_rates"

    room_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
        index=True,
    )
    is_global: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )

    # Electricity
    use_tiered_pricing: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    electricity_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
        comment="Flat price per kWh when tiered pricing is off",
    )

    # Water
    water_method: Mapped[WaterMethod] = mapped_column(
        Enum(WaterMethod, name="water_method_enum"),
        nullable=False,
        default=WaterMethod.BY_METER,
    )
    water_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
        comment="Price per cubic meter",
    )
    water_price_per_person: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
    )

    # Relationships
    room: Mapped[Optional["Room"]] = relationship(
        "Room",
        back_populates="utility_rate",
        lazy="select",
    )
    electricity_tiers: Mapped[List["ElectricityTier"]] = relationship(
        "ElectricityTier",
        back_populates="utility_rate",
        cascade="all, delete-orphan",
        order_by="ElectricityTier.min_usage",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "electricity_price IS NULL OR electricity_price >= 0",
            name="ck_utility_rate_electricity_price_positive",
        ),
        CheckConstraint(
            "water_price IS NULL OR water_price >= 0",
            name="ck_utility_rate_water_price_positive",
        ),
        CheckConstraint(
            "water_price_per_person IS NULL OR water_price_per_person >= 0",
            name="ck_utility_rate_water_per_person_positive",
        ),
    )


class ElectricityTier(TimestampModel):
    """One band of a tiered electricity tariff, half-open [min_usage, max_usage)."""

    __tablename__ = "electricity_tiers"

    utility_rate_id: Mapped[str] = mapped_column(
        ForeignKey("utility_rates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tier_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    min_usage: Mapped[int] = mapped_column(Integer, nullable=False)
    max_usage: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Exclusive upper bound, NULL for the last band",
    )
    price_per_unit: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )

    utility_rate: Mapped["UtilityRate"] = relationship(
        "UtilityRate",
        back_populates="electricity_tiers",
    )
