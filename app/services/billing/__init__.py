"""
Billing services.

Pure calculators (meter readings, electricity tiers, water, fees, bill
composition) plus the BillService that stores and audits bills.
"""

from .bill_composer import compute_bill, validate_payment
from .bill_service import BillService
from .electricity_calculator import (
    calculate_electricity_cost,
    calculate_tiered_electricity_cost,
    validate_tier_bands,
)
from .fee_aggregator import aggregate_fees, validate_fee_amount
from .meter_reading import process_meter_reading, resolve_meter_capacity
from .rate_resolver import resolve_rate_config
from .water_calculator import calculate_water_cost

__all__ = [
    "BillService",
    "aggregate_fees",
    "calculate_electricity_cost",
    "calculate_tiered_electricity_cost",
    "calculate_water_cost",
    "compute_bill",
    "process_meter_reading",
    "resolve_meter_capacity",
    "resolve_rate_config",
    "validate_fee_amount",
    "validate_payment",
    "validate_tier_bands",
]
