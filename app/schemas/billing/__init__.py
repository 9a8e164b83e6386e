"""
Billing schemas package.

Value types for rate configuration, meter readings, fees, bill
calculations, and bill requests/responses.
"""

from app.schemas.billing.bill import (
    BillCreate,
    BillFeeResponse,
    BillMutationResult,
    BillPaymentUpdate,
    BillReadingsUpdate,
    BillResponse,
    OpeningReadings,
)
from app.schemas.billing.bill_calculation import (
    BillCalculation,
    BillInputs,
    ChargeLine,
    ElectricityCharge,
    WaterCharge,
)
from app.schemas.billing.fee import (
    AdHocFee,
    BillFeeCreate,
    BillFeeUpdate,
    Fee,
    TypedFee,
    make_fee,
)
from app.schemas.billing.meter import MeterPair, MeterUsage
from app.schemas.billing.rate_config import RateConfig, TierBand

__all__ = [
    # Rates
    "RateConfig",
    "TierBand",

    # Meters
    "MeterPair",
    "MeterUsage",

    # Fees
    "AdHocFee",
    "TypedFee",
    "Fee",
    "make_fee",
    "BillFeeCreate",
    "BillFeeUpdate",

    # Calculation
    "BillInputs",
    "BillCalculation",
    "ChargeLine",
    "ElectricityCharge",
    "WaterCharge",

    # Bills
    "BillCreate",
    "BillReadingsUpdate",
    "BillPaymentUpdate",
    "BillFeeResponse",
    "BillResponse",
    "BillMutationResult",
    "OpeningReadings",
]
