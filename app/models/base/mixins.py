# --- File: app/models/base/mixins.py ---
"""
SQLAlchemy model mixins for reusable functionality.
"""

from sqlalchemy import Boolean, Column, String


class ContactMixin:
    """
    Mixin for contact information fields.

    Provides phone and email for people attached to a room.
    """

    phone = Column(
        String(20),
        nullable=True,
        comment="Primary phone number"
    )
    email = Column(
        String(255),
        nullable=True,
        comment="Email address"
    )


class ActiveMixin:
    """
    Mixin for enable/disable flag.

    Inactive records are kept for history but ignored by calculations.
    """

    is_active = Column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the record is in effect"
    )
