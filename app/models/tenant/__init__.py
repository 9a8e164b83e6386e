"""Tenant models."""

from app.models.tenant.occupant import Occupant
from app.models.tenant.tenant import Tenant

__all__ = ["Tenant", "Occupant"]
