# app/services/billing/meter_reading.py
"""
Meter reading processing.

Turns an opening and closing reading into consumption, detecting meters
that wrapped past their maximum during the period.
"""
from __future__ import annotations

from typing import Optional

from app.core.exceptions import InvalidMeterConfigError
from app.schemas.billing import MeterPair, MeterUsage


def process_meter_reading(
    old_reading: int,
    new_reading: int,
    max_capacity: int,
    *,
    inclusive_rollover: bool = False,
    meter: str = "meter",
) -> MeterUsage:
    """
    Compute usage from two readings.

    When the new reading is lower than the old one the dial is assumed to
    have wrapped once: usage = (max_capacity - old_reading) + new_reading.
    With inclusive_rollover the maximum itself counts as a dial position
    and one more unit is added.

    Args:
        old_reading: Reading at the start of the period
        new_reading: Reading at the end of the period
        max_capacity: Highest value of the dial
        inclusive_rollover: Count the maximum as a reachable position
        meter: Meter name used in error messages

    Returns:
        MeterUsage with usage >= 0 and the rollover flag

    Raises:
        InvalidMeterConfigError: If readings are negative or do not fit the dial
    """
    def _invalid(message: str) -> InvalidMeterConfigError:
        return InvalidMeterConfigError(
            message,
            old_reading=old_reading,
            new_reading=new_reading,
            max_capacity=max_capacity,
            field=meter,
        )

    if old_reading < 0 or new_reading < 0:
        raise _invalid(f"{meter} readings must not be negative")

    if inclusive_rollover:
        if max_capacity < old_reading:
            raise _invalid(f"{meter} old reading {old_reading} exceeds capacity {max_capacity}")
    elif max_capacity <= old_reading:
        raise _invalid(
            f"{meter} capacity {max_capacity} must be greater than old reading {old_reading}"
        )

    if new_reading > max_capacity:
        raise _invalid(f"{meter} new reading {new_reading} exceeds capacity {max_capacity}")

    if new_reading >= old_reading:
        return MeterUsage(usage=new_reading - old_reading, rollover=False)

    usage = (max_capacity - old_reading) + new_reading
    if inclusive_rollover:
        usage += 1
    return MeterUsage(usage=usage, rollover=True)


def process_meter_pair(
    pair: MeterPair,
    *,
    inclusive_rollover: bool = False,
    meter: str = "meter",
) -> MeterUsage:
    return process_meter_reading(
        pair.old_reading,
        pair.new_reading,
        pair.max_capacity,
        inclusive_rollover=inclusive_rollover,
        meter=meter,
    )


def resolve_meter_capacity(
    room_override: Optional[int],
    property_value: Optional[int],
    default: int,
) -> int:
    """Room override, else property setting, else the configured default."""
    if room_override is not None:
        return room_override
    if property_value is not None:
        return property_value
    return default
