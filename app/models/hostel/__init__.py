# app/models/hostel/__init__.py
"""Property-level models."""

from app.models.hostel.property_info import PropertyInfo

__all__ = ["PropertyInfo"]
