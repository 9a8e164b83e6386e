# app/services/debt/debt_aggregator.py
"""
Debt computation over bill ledgers.

Everything here is pure: a room's DebtRecord is a fold over its ledger
entries, and rooms are independent of each other, so the per-room folds
are spread over a thread pool and joined at the end.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Iterable, List, Mapping, Sequence, Tuple

from app.schemas.common.enums import BillDebtState
from app.schemas.debt import BillLedgerEntry, DebtRecord, UnpaidBill

ZERO = Decimal("0")


def _paid(entry: BillLedgerEntry) -> Decimal:
    return entry.paid_amount if entry.paid_amount is not None else ZERO


def shortfall(entry: BillLedgerEntry) -> Decimal:
    """Outstanding amount of a bill, never negative."""
    return max(ZERO, entry.total_cost - _paid(entry))


def classify_bill(entry: BillLedgerEntry) -> BillDebtState:
    if shortfall(entry) <= ZERO:
        return BillDebtState.PAID
    if _paid(entry) > ZERO:
        return BillDebtState.PARTIALLY_PAID
    return BillDebtState.UNPAID


def longest_debt_run(entries: Iterable[BillLedgerEntry]) -> int:
    """
    Length of the longest run of consecutive calendar months with debt.

    A month without a bill breaks the run, as does a fully paid one.
    """
    periods = sorted({entry.period_index for entry in entries if shortfall(entry) > ZERO})

    longest = 0
    current = 0
    previous = None
    for period in periods:
        current = current + 1 if previous is not None and period == previous + 1 else 1
        longest = max(longest, current)
        previous = period
    return longest


def _unpaid_bill(entry: BillLedgerEntry, remaining: Decimal) -> UnpaidBill:
    return UnpaidBill(
        bill_id=entry.bill_id,
        month=entry.month,
        year=entry.year,
        total_cost=entry.total_cost,
        paid_amount=_paid(entry),
        remaining_debt=remaining,
        state=classify_bill(entry),
        is_paid=entry.is_paid,
        created_at=entry.created_at,
        notes=entry.notes,
    )


def fold_room_debt(
    room_id: str,
    entries: Sequence[BillLedgerEntry],
    warning_threshold: int = 2,
) -> DebtRecord:
    """
    Debt of one room.

    Args:
        room_id: Room the entries belong to
        entries: All bills of the room, in any order
        warning_threshold: Run length that raises a debt warning

    Returns:
        DebtRecord with unpaid bills newest first
    """
    total_debt = ZERO
    unpaid: List[UnpaidBill] = []
    for entry in sorted(entries, key=lambda e: e.period_index, reverse=True):
        remaining = shortfall(entry)
        if remaining > ZERO:
            total_debt += remaining
            unpaid.append(_unpaid_bill(entry, remaining))

    run = longest_debt_run(entries)
    return DebtRecord(
        room_id=room_id,
        total_debt=total_debt,
        unpaid_bills=tuple(unpaid),
        consecutive_months_at_risk=run,
        has_debt_warning=run >= warning_threshold,
    )


def fold_all_rooms(
    ledgers: Mapping[str, Sequence[BillLedgerEntry]],
    *,
    max_workers: int = 4,
    warning_threshold: int = 2,
) -> List[DebtRecord]:
    """DebtRecord of every room, in the iteration order of ledgers."""
    items: List[Tuple[str, Sequence[BillLedgerEntry]]] = list(ledgers.items())
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items)))) as pool:
        return list(
            pool.map(
                lambda item: fold_room_debt(item[0], item[1], warning_threshold),
                items,
            )
        )


def aggregate_debt_warnings(
    ledgers: Mapping[str, Sequence[BillLedgerEntry]],
    *,
    max_workers: int = 4,
    warning_threshold: int = 2,
) -> List[DebtRecord]:
    """
    Rooms owing money for at least warning_threshold consecutive months.

    Sorted by consecutive months, then total debt, both descending.
    """
    records = fold_all_rooms(
        ledgers,
        max_workers=max_workers,
        warning_threshold=warning_threshold,
    )
    flagged = [record for record in records if record.has_debt_warning]
    flagged.sort(key=lambda r: (-r.consecutive_months_at_risk, -r.total_debt, r.room_id))
    return flagged
