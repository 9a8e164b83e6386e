"""
Fee type models.

FeeType is a reusable fee definition (internet, parking, cleaning...).
RoomFee attaches a fee type to a room; active room fees are copied onto
every new bill of that room.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.models.base.mixins import ActiveMixin

if TYPE_CHECKING:
    from app.models.room.room import Room


class FeeType(TimestampModel, ActiveMixin):
    __tablename__ = "fee_types"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    default_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )

    __table_args__ = (
        CheckConstraint(
            "default_amount >= 0",
            name="ck_fee_type_default_amount_positive",
        ),
    )


class RoomFee(TimestampModel, ActiveMixin):
    """Recurring fee of a room. amount overrides the fee type default."""

    __tablename__ = "room_fees"

    room_id: Mapped[str] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fee_type_id: Mapped[str] = mapped_column(
        ForeignKey("fee_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
    )

    room: Mapped["Room"] = relationship("Room", back_populates="room_fees")
    fee_type: Mapped["FeeType"] = relationship("FeeType", lazy="joined")

    __table_args__ = (
        UniqueConstraint("room_id", "fee_type_id", name="uq_room_fee_room_fee_type"),
        CheckConstraint(
            "amount IS NULL OR amount >= 0",
            name="ck_room_fee_amount_positive",
        ),
    )

    @property
    def effective_amount(self) -> Decimal:
        if self.amount is not None:
            return self.amount
        return self.fee_type.default_amount
