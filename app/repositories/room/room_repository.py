# app/repositories/room/room_repository.py
"""
Room repository.

Loads the per-room inputs of a bill computation: occupant count, property
settings and recurring fees.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models.fee_structure import RoomFee
from app.models.hostel import PropertyInfo
from app.models.room import Room
from app.models.tenant import Tenant
from app.repositories.base import BaseRepository
from app.schemas.common.enums import RoomStatus


class RoomRepository(BaseRepository[Room]):
    """
    Repository for Room entity and related models.

    Handles:
    - Occupant counting for headcount water billing
    - Property settings lookup
    - Active room fees
    - Occupied room listing for debt warnings
    """

    def __init__(self, session: Session):
        super().__init__(Room, session)

    def get_with_tenant(self, room_id: str) -> Optional[Room]:
        stmt = (
            select(Room)
            .options(selectinload(Room.tenant).selectinload(Tenant.occupants))
            .where(Room.id == room_id)
        )
        return self.db.execute(stmt).scalars().first()

    def load_occupant_count(self, room_id: str) -> int:
        """
        Primary tenant plus additional occupants.

        A room without a current tenant still counts as one person.
        """
        room = self.get_with_tenant(room_id)
        if room is None or room.tenant is None:
            return 1
        return 1 + len(room.tenant.occupants)

    def get_property_info(self) -> Optional[PropertyInfo]:
        return self.db.execute(select(PropertyInfo).limit(1)).scalars().first()

    def get_active_room_fees(self, room_id: str) -> List[RoomFee]:
        stmt = (
            select(RoomFee)
            .where(RoomFee.room_id == room_id, RoomFee.is_active.is_(True))
            .order_by(RoomFee.created_at, RoomFee.id)
        )
        return list(self.db.execute(stmt).unique().scalars().all())

    def list_occupied_rooms(self) -> List[Room]:
        stmt = (
            select(Room)
            .options(selectinload(Room.tenant))
            .where(Room.status == RoomStatus.OCCUPIED)
            .order_by(Room.code)
        )
        return list(self.db.execute(stmt).scalars().all())
