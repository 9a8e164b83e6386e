# app/repositories/utility/utility_rate_repository.py
"""
Utility rate repository.

Lookups are kept as two separate queries so the room-over-global
precedence is decided by the caller, not by the query.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.utility import UtilityRate
from app.repositories.base import BaseRepository


class UtilityRateRepository(BaseRepository[UtilityRate]):
    def __init__(self, session: Session):
        super().__init__(UtilityRate, session)

    def get_room_rate(self, room_id: str) -> Optional[UtilityRate]:
        stmt = select(UtilityRate).where(
            UtilityRate.room_id == room_id,
            UtilityRate.is_global.is_(False),
        )
        return self.db.execute(stmt).scalars().first()

    def get_global_rate(self) -> Optional[UtilityRate]:
        stmt = (
            select(UtilityRate)
            .where(UtilityRate.is_global.is_(True))
            .order_by(UtilityRate.created_at)
        )
        return self.db.execute(stmt).scalars().first()
