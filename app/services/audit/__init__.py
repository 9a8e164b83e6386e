# app/services/audit/__init__.py
"""
Bill audit services.

- bill_auditor: snapshots, snapshot diffs and change descriptions.
- BillHistoryService: history recording and access-checked lookups.
"""

from .bill_auditor import describe_change, diff_snapshots, snapshot_bill
from .bill_history_service import BillHistoryService

__all__ = [
    "BillHistoryService",
    "describe_change",
    "diff_snapshots",
    "snapshot_bill",
]
