"""
Room model.

A rentable room with its monthly price and optional meter capacity
overrides.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.schemas.common.enums import RoomStatus

if TYPE_CHECKING:
    from app.models.fee_structure.fee_type import RoomFee
    from app.models.tenant.tenant import Tenant
    from app.models.utility.utility_rate import UtilityRate


class Room(TimestampModel):
    """Room of the boarding house."""

    __tablename__ = "rooms"

    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    owner_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="User managing the room",
    )

    status: Mapped[RoomStatus] = mapped_column(
        Enum(RoomStatus, name="room_status_enum"),
        nullable=False,
        default=RoomStatus.VACANT,
        index=True,
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Monthly rent",
    )

    max_electric_meter: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Overrides the property electric meter capacity",
    )
    max_water_meter: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Overrides the property water meter capacity",
    )

    # ==================== Relationships ====================
    tenant: Mapped[Optional["Tenant"]] = relationship(
        "Tenant",
        back_populates="room",
        uselist=False,
    )
    utility_rate: Mapped[Optional["UtilityRate"]] = relationship(
        "UtilityRate",
        back_populates="room",
        uselist=False,
    )
    room_fees: Mapped[List["RoomFee"]] = relationship(
        "RoomFee",
        back_populates="room",
        cascade="all, delete-orphan",
    )

    @property
    def is_occupied(self) -> bool:
        return self.status == RoomStatus.OCCUPIED
