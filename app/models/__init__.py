# app/models/__init__.py
"""
Database models.

Importing this package registers every table on Base.metadata.
"""

from app.models.base import Base, BaseModel, TimestampModel
from app.models.billing import Bill, BillFee, BillHistory
from app.models.fee_structure import FeeType, RoomFee
from app.models.hostel import PropertyInfo
from app.models.room import Room
from app.models.tenant import Occupant, Tenant
from app.models.utility import ElectricityTier, UtilityRate

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "Bill",
    "BillFee",
    "BillHistory",
    "FeeType",
    "RoomFee",
    "PropertyInfo",
    "Room",
    "Occupant",
    "Tenant",
    "ElectricityTier",
    "UtilityRate",
]
