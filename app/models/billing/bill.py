# --- File: app/models/billing/bill.py ---
"""
Bill models.

A Bill is the monthly statement of one room. Every derived amount
(usages, costs, total, amount in words) is stored alongside the readings
and recomputed whenever an input changes. The version column guards
against lost updates: SQLAlchemy adds it to the WHERE clause of every
UPDATE and raises StaleDataError when another writer got there first.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from app.models.room.room import Room


class Bill(TimestampModel):
    """Monthly bill of a room."""

    __tablename__ = "bills"

    room_id: Mapped[str] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="Room owner at bill creation",
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Electricity
    old_electric_reading: Mapped[int] = mapped_column(Integer, nullable=False)
    new_electric_reading: Mapped[int] = mapped_column(Integer, nullable=False)
    electricity_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    electricity_rollover: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    electricity_cost: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )

    # Water
    old_water_reading: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    new_water_reading: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    water_usage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    water_rollover: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    water_cost: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )

    # Totals
    room_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    fees_total: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    total_cost: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    total_cost_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Payment
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    paid_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=True,
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    room: Mapped["Room"] = relationship("Room", lazy="joined")
    fees: Mapped[List["BillFee"]] = relationship(
        "BillFee",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillFee.id",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("room_id", "month", "year", name="uq_bill_room_period"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_bill_month_range"),
        CheckConstraint("old_electric_reading >= 0", name="ck_bill_old_electric_positive"),
        CheckConstraint("new_electric_reading >= 0", name="ck_bill_new_electric_positive"),
        CheckConstraint(
            "paid_amount IS NULL OR paid_amount >= 0",
            name="ck_bill_paid_amount_positive",
        ),
    )

    @property
    def period_label(self) -> str:
        return f"{self.month:02d}/{self.year}"


class BillFee(TimestampModel):
    """Fee line of a bill, either ad-hoc or copied from a room fee type."""

    __tablename__ = "bill_fees"

    bill_id: Mapped[str] = mapped_column(
        ForeignKey("bills.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fee_type_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("fee_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=14, scale=2), nullable=False)

    bill: Mapped["Bill"] = relationship("Bill", back_populates="fees")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_bill_fee_amount_positive"),
    )
