# app/repositories/billing/bill_history_repository.py
"""
Bill history repository.

History rows are append-only. The only update ever issued is clearing
bill_id when the bill itself is deleted.
"""

from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from app.models.billing import BillHistory
from app.repositories.base import BaseRepository


class BillHistoryRepository(BaseRepository[BillHistory]):
    def __init__(self, session: Session):
        super().__init__(BillHistory, session)

    def list_for_bill(
        self,
        bill_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[BillHistory]:
        """
        History of a bill, newest first.

        Matches the live bill id as well as the permanent original id, so
        entries of a deleted bill are still found.
        """
        stmt = (
            select(BillHistory)
            .where(
                or_(
                    BillHistory.bill_id == bill_id,
                    BillHistory.original_bill_id == bill_id,
                )
            )
            .order_by(BillHistory.created_at.desc(), BillHistory.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def list_for_owner(
        self,
        owner_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[BillHistory]:
        stmt = (
            select(BillHistory)
            .where(BillHistory.owner_id == owner_id)
            .order_by(BillHistory.created_at.desc(), BillHistory.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def list_for_room(
        self,
        room_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[BillHistory]:
        stmt = (
            select(BillHistory)
            .where(BillHistory.room_id == room_id)
            .order_by(BillHistory.created_at.desc(), BillHistory.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def detach_bill(self, bill_id: str) -> int:
        """Clear bill_id on every entry of a bill about to be deleted."""
        result = self.db.execute(
            update(BillHistory)
            .where(BillHistory.bill_id == bill_id)
            .values(bill_id=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
