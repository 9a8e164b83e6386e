"""Billing models."""

from app.models.billing.bill import Bill, BillFee
from app.models.billing.bill_history import BillHistory

__all__ = ["Bill", "BillFee", "BillHistory"]
