"""
Audit schemas package.

Bill snapshots, snapshot diffs and history records.
"""

from app.schemas.audit.bill_history import HistoryRecord
from app.schemas.audit.bill_snapshot import (
    SNAPSHOT_SCHEMA_VERSION,
    BillSnapshot,
    FeeSnapshot,
    FieldChange,
    SnapshotDiff,
)

__all__ = [
    "SNAPSHOT_SCHEMA_VERSION",
    "BillSnapshot",
    "FeeSnapshot",
    "FieldChange",
    "SnapshotDiff",
    "HistoryRecord",
]
