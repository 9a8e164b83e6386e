# --- File: app/schemas/audit/bill_snapshot.py ---
"""
Bill snapshot and diff value types.

A BillSnapshot is an immutable point-in-time copy of a bill. It carries the
room and owner identifiers so access checks keep working after the bill
itself has been deleted. Snapshots are converted to JSON only when they are
written to or read from storage.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import Field

from app.schemas.common.base import ValueSchema
from app.schemas.common.enums import ChangeType

__all__ = [
    "SNAPSHOT_SCHEMA_VERSION",
    "FeeSnapshot",
    "BillSnapshot",
    "FieldChange",
    "SnapshotDiff",
]

SNAPSHOT_SCHEMA_VERSION = 1


class FeeSnapshot(ValueSchema):
    id: Optional[str] = None
    name: str
    amount: Decimal
    fee_type_id: Optional[str] = None


class BillSnapshot(ValueSchema):
    """Immutable copy of every auditable bill field."""

    schema_version: Literal[1] = SNAPSHOT_SCHEMA_VERSION

    # Identity and access context
    bill_id: str
    room_id: str
    owner_id: Optional[str] = None
    room_code: Optional[str] = None
    room_name: Optional[str] = None
    month: int
    year: int

    # Readings
    old_electric_reading: int
    new_electric_reading: int
    electricity_usage: int
    electricity_rollover: bool
    old_water_reading: Optional[int] = None
    new_water_reading: Optional[int] = None
    water_usage: Optional[int] = None
    water_rollover: Optional[bool] = None

    # Amounts
    room_price: Decimal
    electricity_cost: Decimal
    water_cost: Decimal
    fees_total: Decimal
    total_cost: Decimal
    total_cost_text: str

    # Payment
    is_paid: bool
    paid_amount: Optional[Decimal] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None

    fees: Tuple[FeeSnapshot, ...] = Field(default=(), description="Fees ordered by id")

    def to_storage(self) -> Dict[str, Any]:
        """JSON-compatible form for the history table."""
        return self.model_dump(mode="json")

    @classmethod
    def from_storage(cls, data: Optional[Dict[str, Any]]) -> Optional["BillSnapshot"]:
        if not data:
            return None
        return cls.model_validate(data)


class FieldChange(ValueSchema):
    old: Any = None
    new: Any = None


class SnapshotDiff(ValueSchema):
    """Field-level difference between two snapshots."""

    change_type: ChangeType
    fields: Dict[str, FieldChange] = Field(default_factory=dict)

    @property
    def changed_fields(self) -> List[str]:
        return list(self.fields)

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_storage(cls, data: Optional[Dict[str, Any]]) -> Optional["SnapshotDiff"]:
        if not data:
            return None
        return cls.model_validate(data)
