"""
Tenant model.

The primary tenant renting a room.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.models.base.mixins import ContactMixin

if TYPE_CHECKING:
    from app.models.room.room import Room
    from app.models.tenant.occupant import Occupant


class Tenant(TimestampModel, ContactMixin):
    """Primary tenant. A room has at most one current tenant."""

    __tablename__ = "tenants"

    room_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
        index=True,
        comment="Room currently rented, None after checkout",
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    id_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    room: Mapped[Optional["Room"]] = relationship("Room", back_populates="tenant")
    occupants: Mapped[List["Occupant"]] = relationship(
        "Occupant",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )
