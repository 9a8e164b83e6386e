"""
Occupant model.

Additional residents living with a tenant. They count towards headcount
water billing.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from app.models.tenant.tenant import Tenant


class Occupant(TimestampModel):
    __tablename__ = "occupants"

    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="occupants")
