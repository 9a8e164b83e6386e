# --- File: app/schemas/common/enums.py ---
"""
All enumeration types used across the billing engine.

These enums represent the core domain concepts for boarding-house
billing (rooms, utility rates, fees, bill history, debt states).
"""

from enum import Enum

__all__ = [
    "RoomStatus",
    "RateScope",
    "WaterMethod",
    "FeeKind",
    "HistoryAction",
    "ChangeType",
    "BillDebtState",
]


class RoomStatus(str, Enum):
    """Occupancy status of a room."""

    VACANT = "VACANT"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"


class RateScope(str, Enum):
    """Whether a rate configuration is property-wide or room-specific."""

    GLOBAL = "GLOBAL"
    ROOM = "ROOM"


class WaterMethod(str, Enum):
    """Water billing strategy."""

    BY_METER = "BY_METER"
    BY_HEADCOUNT = "BY_HEADCOUNT"


class FeeKind(str, Enum):
    """Discriminator for bill fee variants."""

    AD_HOC = "ad_hoc"
    TYPED = "typed"


class HistoryAction(str, Enum):
    """Bill mutations recorded in the history trail."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    STATUS_CHANGE = "STATUS_CHANGE"
    ADD_FEE = "ADD_FEE"
    UPDATE_FEE = "UPDATE_FEE"
    REMOVE_FEE = "REMOVE_FEE"


class ChangeType(str, Enum):
    """Kind of difference between two bill snapshots."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class BillDebtState(str, Enum):
    """Payment state of a bill as seen by debt tracking."""

    UNPAID = "UNPAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"
