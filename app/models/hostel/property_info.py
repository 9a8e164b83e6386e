"""
Property information model.

Property-wide settings shared by every room of the boarding house.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base.base_model import TimestampModel


class PropertyInfo(TimestampModel):
    """
    Boarding-house level information.

    A single row is expected; its meter capacities apply to rooms that do
    not override them.
    """

    __tablename__ = "property_info"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    max_electric_meter: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Electric meter capacity for all rooms",
    )
    max_water_meter: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Water meter capacity for all rooms",
    )
