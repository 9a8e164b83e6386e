# app/services/audit/bill_auditor.py
"""
Bill snapshots and change detection.

Snapshots are taken from ORM rows and compared field by field. Money is
normalized to two decimals and datetimes to UTC so a value read back from
storage compares equal to the value that was written.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from app.models.billing import Bill
from app.schemas.audit import BillSnapshot, FeeSnapshot, FieldChange, SnapshotDiff
from app.schemas.common.enums import ChangeType, HistoryAction

CENT = Decimal("0.01")

ACTION_LABELS: Dict[HistoryAction, str] = {
    HistoryAction.CREATE: "Created bill",
    HistoryAction.UPDATE: "Updated bill",
    HistoryAction.DELETE: "Deleted bill",
    HistoryAction.STATUS_CHANGE: "Changed payment status",
    HistoryAction.ADD_FEE: "Added fee",
    HistoryAction.UPDATE_FEE: "Updated fee",
    HistoryAction.REMOVE_FEE: "Removed fee",
}

# Collection fields compared as a whole through their JSON form
COLLECTION_FIELDS = frozenset({"fees"})

_IGNORED_FIELDS = frozenset({"schema_version"})


def _money(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value).quantize(CENT)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def snapshot_bill(bill: Bill) -> BillSnapshot:
    """Immutable copy of a bill, fees ordered by id."""
    room = bill.room
    fees = tuple(
        FeeSnapshot(
            id=fee.id,
            name=fee.name,
            amount=_money(fee.amount),
            fee_type_id=fee.fee_type_id,
        )
        for fee in sorted(bill.fees, key=lambda f: f.id or "")
    )
    return BillSnapshot(
        bill_id=bill.id,
        room_id=bill.room_id,
        owner_id=bill.owner_id,
        room_code=room.code if room is not None else None,
        room_name=room.name if room is not None else None,
        month=bill.month,
        year=bill.year,
        old_electric_reading=bill.old_electric_reading,
        new_electric_reading=bill.new_electric_reading,
        electricity_usage=bill.electricity_usage,
        electricity_rollover=bill.electricity_rollover,
        old_water_reading=bill.old_water_reading,
        new_water_reading=bill.new_water_reading,
        water_usage=bill.water_usage,
        water_rollover=bill.water_rollover,
        room_price=_money(bill.room_price),
        electricity_cost=_money(bill.electricity_cost),
        water_cost=_money(bill.water_cost),
        fees_total=_money(bill.fees_total),
        total_cost=_money(bill.total_cost),
        total_cost_text=bill.total_cost_text,
        is_paid=bill.is_paid,
        paid_amount=_money(bill.paid_amount),
        paid_at=_utc(bill.paid_at),
        notes=bill.notes,
        fees=fees,
    )


def _field_values(snapshot: BillSnapshot) -> Dict[str, Any]:
    data = snapshot.to_storage()
    return {key: value for key, value in data.items() if key not in _IGNORED_FIELDS}


def _collection_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def diff_snapshots(
    old: Optional[BillSnapshot],
    new: Optional[BillSnapshot],
) -> Optional[SnapshotDiff]:
    """
    Field-level difference between two snapshots.

    Returns:
        CREATED diff when there is no old snapshot, DELETED when there is no
        new one, UPDATED with the changed fields otherwise, and None when
        nothing changed
    """
    if old is None and new is None:
        return None

    if old is None:
        return SnapshotDiff(
            change_type=ChangeType.CREATED,
            fields={key: FieldChange(old=None, new=value) for key, value in _field_values(new).items()},
        )

    if new is None:
        return SnapshotDiff(
            change_type=ChangeType.DELETED,
            fields={key: FieldChange(old=value, new=None) for key, value in _field_values(old).items()},
        )

    old_values = _field_values(old)
    new_values = _field_values(new)
    changes: Dict[str, FieldChange] = {}
    for key in old_values.keys() | new_values.keys():
        before = old_values.get(key)
        after = new_values.get(key)
        if key in COLLECTION_FIELDS:
            changed = _collection_key(before) != _collection_key(after)
        else:
            changed = before != after
        if changed:
            changes[key] = FieldChange(old=before, new=after)

    if not changes:
        return None

    ordered = {key: changes[key] for key in new_values if key in changes}
    return SnapshotDiff(change_type=ChangeType.UPDATED, fields=ordered)


def describe_change(
    action: HistoryAction,
    diff: Optional[SnapshotDiff] = None,
    detail: Optional[str] = None,
) -> str:
    """
    Human readable summary of a history entry.

    Example:
        "Added fee Internet: fees_total, total_cost, total_cost_text, fees"
    """
    description = ACTION_LABELS.get(action, "Changed bill")
    if detail:
        description += f" {detail}"
    if diff is not None and diff.change_type == ChangeType.UPDATED and diff.fields:
        description += f": {', '.join(diff.changed_fields)}"
    return description
