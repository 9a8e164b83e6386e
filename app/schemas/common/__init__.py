"""Common schema building blocks."""

from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    ValueSchema,
)

__all__ = [
    "BaseSchema",
    "ValueSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
]
