"""
Custom Exceptions for the Boarding House Billing Engine

This module defines the exception taxonomy used by the calculators and
services:

- ConfigurationError: setup problems, always surfaced, never retried
- InputError: caller-supplied data is invalid, rejected before any write
- ConcurrencyError: a stale write, recoverable by one retry
- Service errors: lookups, duplicates, business rules, storage failures
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    MISSING_CONFIGURATION = "MISSING_CONFIGURATION"
    INVALID_TIER_CONFIG = "INVALID_TIER_CONFIG"

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_METER_CONFIG = "INVALID_METER_CONFIG"
    INVALID_FEE_AMOUNT = "INVALID_FEE_AMOUNT"
    INVALID_PAYMENT_AMOUNT = "INVALID_PAYMENT_AMOUNT"
    INVALID_OCCUPANT_COUNT = "INVALID_OCCUPANT_COUNT"
    OVERPAYMENT_REJECTED = "OVERPAYMENT_REJECTED"

    # Concurrency and storage errors
    STALE_WRITE_CONFLICT = "STALE_WRITE_CONFLICT"
    DATABASE_ERROR = "DATABASE_ERROR"
    AUDIT_TRAIL_ERROR = "AUDIT_TRAIL_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


def _amount(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


# ========================================
# Configuration Errors
# ========================================

class ConfigurationError(BaseAppException):
    """Exception raised when configuration is invalid"""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = {
            "config_key": config_key,
            "config_value": str(config_value) if config_value is not None else None
        }
        merged.update(details or {})
        super().__init__(message, error_code, merged, 500)


class ConfigurationMissingError(ConfigurationError):
    """Exception raised when required rate configuration is missing"""

    def __init__(
        self,
        message: str = "Utility rate configuration is missing",
        config_key: Optional[str] = None,
        room_id: Optional[str] = None,
    ):
        super().__init__(
            message,
            config_key=config_key,
            error_code=ErrorCode.MISSING_CONFIGURATION,
            details={"room_id": room_id},
        )
        self.room_id = room_id


class InvalidTierConfigError(ConfigurationError):
    """Exception raised when tier bands do not cover [0, inf) contiguously"""

    def __init__(self, message: str, band_index: Optional[int] = None):
        super().__init__(
            message,
            config_key="tier_bands",
            error_code=ErrorCode.INVALID_TIER_CONFIG,
            details={"band_index": band_index},
        )
        self.band_index = band_index


# ========================================
# Input Errors
# ========================================

class InputError(BaseAppException):
    """Exception raised when caller-supplied data is invalid"""

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = {"field": field}
        merged.update(details or {})
        super().__init__(message, error_code, merged, 422)
        self.field = field


class InvalidMeterConfigError(InputError):
    """Exception raised for readings that do not fit the meter"""

    def __init__(
        self,
        message: str,
        old_reading: Optional[int] = None,
        new_reading: Optional[int] = None,
        max_capacity: Optional[int] = None,
        field: Optional[str] = None,
    ):
        super().__init__(
            message,
            field=field,
            error_code=ErrorCode.INVALID_METER_CONFIG,
            details={
                "old_reading": old_reading,
                "new_reading": new_reading,
                "max_capacity": max_capacity,
            },
        )


class InvalidFeeAmountError(InputError):
    """Exception raised when a fee amount is negative or not a number"""

    def __init__(self, name: str, amount: Any):
        super().__init__(
            f"Fee '{name}' must have a non-negative amount, got {amount}",
            field="amount",
            error_code=ErrorCode.INVALID_FEE_AMOUNT,
            details={"fee_name": name, "amount": _amount(amount)},
        )
        self.fee_name = name
        self.amount = amount


class InvalidPaymentAmountError(InputError):
    """Exception raised when a paid amount is negative"""

    def __init__(self, paid_amount: Any):
        super().__init__(
            f"Paid amount must not be negative, got {paid_amount}",
            field="paid_amount",
            error_code=ErrorCode.INVALID_PAYMENT_AMOUNT,
            details={"paid_amount": _amount(paid_amount)},
        )


class InvalidOccupantCountError(InputError):
    """Exception raised when headcount billing gets fewer than one occupant"""

    def __init__(self, occupant_count: int):
        super().__init__(
            f"Occupant count must be at least 1, got {occupant_count}",
            field="occupant_count",
            error_code=ErrorCode.INVALID_OCCUPANT_COUNT,
            details={"occupant_count": occupant_count},
        )


class OverpaymentRejectedError(InputError):
    """Exception raised when a paid amount exceeds the bill total"""

    def __init__(self, total_cost: Decimal, paid_amount: Decimal):
        super().__init__(
            f"Paid amount {paid_amount} exceeds bill total {total_cost}",
            field="paid_amount",
            error_code=ErrorCode.OVERPAYMENT_REJECTED,
            details={
                "total_cost": _amount(total_cost),
                "paid_amount": _amount(paid_amount),
            },
        )
        self.total_cost = total_cost
        self.paid_amount = paid_amount


# ========================================
# Concurrency Errors
# ========================================

class ConcurrencyError(BaseAppException):
    """Exception raised when concurrent writes collide"""

    def __init__(
        self,
        message: str = "Concurrent modification detected",
        error_code: ErrorCode = ErrorCode.STALE_WRITE_CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details, 409)


class StaleWriteConflictError(ConcurrencyError):
    """Exception raised when a bill was changed after it was read"""

    def __init__(self, entity_id: Optional[str] = None, attempts: int = 1):
        super().__init__(
            f"Bill {entity_id} was modified concurrently" if entity_id else "Stale write rejected",
            details={"entity_id": entity_id, "attempts": attempts},
        )
        self.entity_id = entity_id
        self.attempts = attempts


# ========================================
# Service Errors
# ========================================

class EntityNotFoundError(BaseAppException):
    """Exception raised when a requested resource does not exist"""

    def __init__(self, entity_type: str, identifier: Any):
        super().__init__(
            f"{entity_type} with identifier '{identifier}' not found",
            ErrorCode.RESOURCE_NOT_FOUND,
            {"entity_type": entity_type, "identifier": str(identifier)},
            404,
        )
        self.entity_type = entity_type
        self.identifier = identifier


class DuplicateBillError(BaseAppException):
    """Exception raised when a room already has a bill for the month"""

    def __init__(self, room_id: str, month: int, year: int):
        super().__init__(
            f"A bill for {month:02d}/{year} already exists for room {room_id}",
            ErrorCode.DUPLICATE_ENTRY,
            {"room_id": room_id, "month": month, "year": year},
            409,
        )


class BusinessRuleViolationError(BaseAppException):
    """Exception raised when a business rule is violated"""

    def __init__(self, rule_name: str, message: str, details: Optional[Dict[str, Any]] = None):
        merged = {"rule": rule_name}
        merged.update(details or {})
        super().__init__(message, ErrorCode.BUSINESS_RULE_VIOLATION, merged, 400)
        self.rule_name = rule_name


class BillAlreadyPaidError(BusinessRuleViolationError):
    """Exception raised when a paid bill would be modified"""

    def __init__(self, bill_id: str, operation: str):
        super().__init__(
            "bill_already_paid",
            f"Cannot {operation} on paid bill {bill_id}",
            {"bill_id": bill_id, "operation": operation},
        )


class AuthorizationError(BaseAppException):
    """Exception raised when a user lacks access to a resource"""

    def __init__(self, message: str = "Authorization failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.AUTHORIZATION_FAILED, details, 403)


class TransactionError(BaseAppException):
    """Exception raised when a database transaction fails"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            {"error_type": type(original_error).__name__ if original_error else None},
            500,
        )
        self.original_error = original_error


class AuditTrailError(BaseAppException):
    """Exception raised when a bill history entry cannot be stored"""

    def __init__(self, bill_id: Optional[str], action: str, original_error: Optional[Exception] = None):
        super().__init__(
            f"Failed to record '{action}' history for bill {bill_id}",
            ErrorCode.AUDIT_TRAIL_ERROR,
            {
                "bill_id": bill_id,
                "action": action,
                "error_type": type(original_error).__name__ if original_error else None,
            },
            500,
        )
        self.original_error = original_error
