"""Debt tracking services."""

from .debt_aggregator import (
    aggregate_debt_warnings,
    classify_bill,
    fold_all_rooms,
    fold_room_debt,
    longest_debt_run,
    shortfall,
)
from .debt_service import DebtService

__all__ = [
    "DebtService",
    "aggregate_debt_warnings",
    "classify_bill",
    "fold_all_rooms",
    "fold_room_debt",
    "longest_debt_run",
    "shortfall",
]
