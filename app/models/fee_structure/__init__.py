"""Fee type models."""

from app.models.fee_structure.fee_type import FeeType, RoomFee

__all__ = ["FeeType", "RoomFee"]
