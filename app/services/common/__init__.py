# app/services/common/__init__.py
"""
Shared service-layer infrastructure.

- **UnitOfWork**: Transaction boundary & repository factory
- **permissions**: Owner/admin access checks

Example usage:
    >>> from app.services.common import UnitOfWork
    >>> with UnitOfWork(session_factory) as uow:
    ...     bill = uow.get_repo(BillRepository).get_or_raise(bill_id)
"""
from __future__ import annotations

from . import permissions
from .unit_of_work import UnitOfWork

__all__ = [
    "permissions",
    "UnitOfWork",
]
