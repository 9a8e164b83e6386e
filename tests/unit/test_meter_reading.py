import pytest

from app.core.exceptions import InvalidMeterConfigError
from app.services.billing.meter_reading import process_meter_reading, resolve_meter_capacity


def test_forward_reading_is_plain_difference() -> None:
    result = process_meter_reading(1200, 1350, 9999)

    assert result.usage == 150
    assert result.rollover is False


def test_unchanged_reading_has_zero_usage() -> None:
    result = process_meter_reading(500, 500, 9999)

    assert result.usage == 0
    assert result.rollover is False


def test_rollover_scenario() -> None:
    result = process_meter_reading(9990, 50, 9999)

    assert result.usage == 59
    assert result.rollover is True


def test_rollover_usage_is_distance_to_max_plus_new_reading() -> None:
    max_capacity = 99999
    for k in (1, 7, 250):
        for r in (0, 3, 40):
            result = process_meter_reading(max_capacity - k, r, max_capacity)
            assert result.usage == k + r
            assert result.rollover is True


def test_inclusive_rollover_counts_the_maximum() -> None:
    result = process_meter_reading(9990, 50, 9999, inclusive_rollover=True)

    assert result.usage == 60
    assert result.rollover is True


def test_inclusive_rollover_accepts_old_reading_at_maximum() -> None:
    result = process_meter_reading(9999, 5, 9999, inclusive_rollover=True)

    assert result.usage == 6


def test_capacity_must_exceed_old_reading() -> None:
    with pytest.raises(InvalidMeterConfigError):
        process_meter_reading(9999, 10, 9999)

    with pytest.raises(InvalidMeterConfigError):
        process_meter_reading(12000, 10, 9999)


def test_negative_readings_are_rejected() -> None:
    with pytest.raises(InvalidMeterConfigError) as exc_info:
        process_meter_reading(-1, 10, 9999, meter="water")

    assert exc_info.value.details["field"] == "water"


def test_new_reading_above_capacity_is_rejected() -> None:
    with pytest.raises(InvalidMeterConfigError):
        process_meter_reading(10, 10000, 9999)


def test_meter_capacity_precedence() -> None:
    assert resolve_meter_capacity(500, 9999, 999999) == 500
    assert resolve_meter_capacity(None, 9999, 999999) == 9999
    assert resolve_meter_capacity(None, None, 999999) == 999999
