"""
Bill history response schema.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from app.schemas.audit.bill_snapshot import BillSnapshot, SnapshotDiff
from app.schemas.common.base import BaseResponseSchema
from app.schemas.common.enums import HistoryAction

__all__ = ["HistoryRecord"]


class HistoryRecord(BaseResponseSchema):
    """One entry of a bill's audit trail."""

    id: str
    bill_id: Optional[str] = None
    original_bill_id: str
    room_id: Optional[str] = None
    owner_id: Optional[str] = None
    action: HistoryAction
    changed_by: Optional[str] = None
    old_snapshot: Optional[BillSnapshot] = None
    new_snapshot: Optional[BillSnapshot] = None
    diff: Optional[SnapshotDiff] = None
    description: Optional[str] = None
    created_at: datetime

    @property
    def bill_deleted(self) -> bool:
        return self.bill_id is None

    @classmethod
    def from_model(cls, row: Any) -> "HistoryRecord":
        """Decode the stored JSON columns of a BillHistory row."""
        return cls(
            id=row.id,
            bill_id=row.bill_id,
            original_bill_id=row.original_bill_id,
            room_id=row.room_id,
            owner_id=row.owner_id,
            action=row.action,
            changed_by=row.changed_by,
            old_snapshot=BillSnapshot.from_storage(row.old_data),
            new_snapshot=BillSnapshot.from_storage(row.new_data),
            diff=SnapshotDiff.from_storage(row.changes),
            description=row.description,
            created_at=row.created_at,
        )
