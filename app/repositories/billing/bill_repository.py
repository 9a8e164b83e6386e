# app/repositories/billing/bill_repository.py
"""
Bill repository.

Besides plain bill access it produces BillLedgerEntry values, the
detached view of stored bills that the debt fold works on.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.billing import Bill, BillFee
from app.repositories.base import BaseRepository
from app.schemas.debt import BillLedgerEntry


def _to_ledger_entry(bill: Bill) -> BillLedgerEntry:
    return BillLedgerEntry(
        bill_id=bill.id,
        month=bill.month,
        year=bill.year,
        total_cost=bill.total_cost,
        paid_amount=bill.paid_amount,
        is_paid=bill.is_paid,
        created_at=bill.created_at,
        notes=bill.notes,
    )


class BillRepository(BaseRepository[Bill]):
    """
    Repository for Bill and BillFee.

    Handles:
    - Lookup by id and by (room, month, year)
    - Latest bill of a room for reading prefill
    - Ledger entries for debt computation
    """

    def __init__(self, session: Session):
        super().__init__(Bill, session)

    def find_by_period(self, room_id: str, month: int, year: int) -> Optional[Bill]:
        stmt = select(Bill).where(
            Bill.room_id == room_id,
            Bill.month == month,
            Bill.year == year,
        )
        return self.db.execute(stmt).unique().scalars().first()

    def get_latest_for_room(self, room_id: str) -> Optional[Bill]:
        stmt = (
            select(Bill)
            .where(Bill.room_id == room_id)
            .order_by(Bill.year.desc(), Bill.month.desc())
            .limit(1)
        )
        return self.db.execute(stmt).unique().scalars().first()

    def get_fee(self, bill: Bill, fee_id: str) -> Optional[BillFee]:
        for fee in bill.fees:
            if fee.id == fee_id:
                return fee
        return None

    # ==================== Ledger ====================

    def load_bills_for_room(self, room_id: str) -> List[BillLedgerEntry]:
        """All bills of a room as ledger entries, ordered by (year, month)."""
        stmt = (
            select(Bill)
            .where(Bill.room_id == room_id)
            .order_by(Bill.year, Bill.month)
        )
        return [_to_ledger_entry(bill) for bill in self.db.execute(stmt).unique().scalars()]

    def load_ledgers(self, room_ids: Iterable[str]) -> Dict[str, List[BillLedgerEntry]]:
        """
        Ledger entries for several rooms in one query.

        Every requested room gets a key, with an empty list when it has
        no bills.
        """
        room_ids = list(room_ids)
        ledgers: Dict[str, List[BillLedgerEntry]] = defaultdict(list)
        for room_id in room_ids:
            ledgers[room_id] = []
        if not room_ids:
            return dict(ledgers)

        stmt = (
            select(Bill)
            .where(Bill.room_id.in_(room_ids))
            .order_by(Bill.room_id, Bill.year, Bill.month)
        )
        for bill in self.db.execute(stmt).unique().scalars():
            ledgers[bill.room_id].append(_to_ledger_entry(bill))
        return dict(ledgers)
