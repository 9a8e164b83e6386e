"""Core application modules."""

from .exceptions import (
    BaseAppException,
    ConcurrencyError,
    ConfigurationError,
    ErrorCode,
    InputError,
)

__all__ = [
    "BaseAppException",
    "ConcurrencyError",
    "ConfigurationError",
    "ErrorCode",
    "InputError",
]
