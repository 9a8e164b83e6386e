"""Billing repositories."""

from app.repositories.billing.bill_history_repository import BillHistoryRepository
from app.repositories.billing.bill_repository import BillRepository

__all__ = ["BillRepository", "BillHistoryRepository"]
