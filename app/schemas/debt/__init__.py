"""Debt tracking schemas."""

from app.schemas.debt.debt import BillLedgerEntry, DebtRecord, DebtWarning, UnpaidBill

__all__ = ["BillLedgerEntry", "DebtRecord", "DebtWarning", "UnpaidBill"]
