# --- File: app/models/billing/bill_history.py ---
"""
Bill history model.

Append-only audit trail of bill changes. bill_id is cleared when the bill
is deleted; original_bill_id, room_id and owner_id are kept so the trail
stays queryable and access-checked afterwards.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base.base_model import BaseModel
from app.schemas.common.enums import HistoryAction


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BillHistory(BaseModel):
    """One recorded change of a bill."""

    __tablename__ = "bill_history"

    bill_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("bills.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    original_bill_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
        comment="Bill id, kept after deletion",
    )
    room_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    action: Mapped[HistoryAction] = mapped_column(
        Enum(HistoryAction, name="history_action_enum"),
        nullable=False,
    )
    changed_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    old_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    new_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    changes: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True,
    )

    __table_args__ = (
        Index("ix_bill_history_original_created", "original_bill_id", "created_at"),
    )
