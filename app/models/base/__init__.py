# --- File: app/models/base/__init__.py ---
"""
Base models package.

Provides the declarative base, abstract base classes and mixins
for all database models.
"""

from app.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    generate_uuid,
)
from app.models.base.mixins import ActiveMixin, ContactMixin

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "generate_uuid",
    "ActiveMixin",
    "ContactMixin",
]
