"""Tests for the rate schedule and the slot-based pricing calculator."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from dateutil import tz

from workspace_booking.services.pricing import calculate_price, iter_slots
from workspace_booking.services.rates import is_peak

UTC = timezone.utc
KOLKATA = tz.gettz("Asia/Kolkata")


def _monday(hour: int, minute: int = 0) -> datetime:
    # 2026-06-01 is a Monday
    return datetime(2026, 6, 1, hour, minute, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Rate schedule
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (9, 59, False),
        (10, 0, True),
        (12, 59, True),
        (13, 0, False),
        (15, 59, False),
        (16, 0, True),
        (18, 59, True),
        (19, 0, False),
    ],
)
def test_weekday_peak_windows(hour, minute, expected):
    assert is_peak(_monday(hour, minute), UTC) is expected


def test_weekend_is_always_off_peak():
    saturday = datetime(2026, 6, 6, 11, 0, tzinfo=UTC)
    sunday = datetime(2026, 6, 7, 17, 0, tzinfo=UTC)
    assert is_peak(saturday, UTC) is False
    assert is_peak(sunday, UTC) is False


def test_peak_uses_business_timezone_wall_clock():
    """05:00 UTC on a Monday is 10:30 in Kolkata."""
    instant = _monday(5)
    assert is_peak(instant, UTC) is False
    assert is_peak(instant, KOLKATA) is True


def test_peak_uses_business_timezone_weekday():
    """Sunday evening in UTC is already Monday morning at UTC+14."""
    instant = datetime(2026, 6, 7, 20, 30, tzinfo=UTC)
    assert is_peak(instant, UTC) is False
    assert is_peak(instant, tz.gettz("Pacific/Kiritimati")) is True


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


def test_booking_spanning_peak_boundary_is_billed_proportionally():
    """09:30-10:30 Monday at 500: half off-peak, half peak."""
    price = calculate_price(_monday(9, 30), _monday(10, 30), Decimal(500), UTC)
    assert price == Decimal("625.00")


def test_slot_boundaries_follow_local_clock_hours():
    """Same 09:30-10:30 booking expressed in UTC for a half-hour-offset zone."""
    start = datetime(2026, 6, 1, 4, 0, tzinfo=UTC)
    end = datetime(2026, 6, 1, 5, 0, tzinfo=UTC)
    assert calculate_price(start, end, Decimal(500), KOLKATA) == Decimal("625.00")

    slots = list(iter_slots(start, end, KOLKATA))
    assert [s.peak for s in slots] == [False, True]
    assert slots[0].end == datetime(2026, 6, 1, 4, 30, tzinfo=UTC)


def test_weekend_booking_prices_at_base_rate():
    start = datetime(2026, 6, 6, 9, 15, tzinfo=UTC)
    end = start + timedelta(hours=7, minutes=30)
    assert calculate_price(start, end, Decimal(800), UTC) == Decimal("6000.00")


def test_evening_peak_end():
    friday = datetime(2026, 6, 5, 18, 30, tzinfo=UTC)
    price = calculate_price(friday, friday + timedelta(hours=1), Decimal(200), UTC)
    assert price == Decimal("250.00")


def test_price_is_additive_over_a_split():
    start, end = _monday(9, 15), _monday(11, 45)
    split = _monday(10, 20)
    whole = calculate_price(start, end, Decimal(100), UTC)
    parts = calculate_price(start, split, Decimal(100), UTC) + calculate_price(
        split, end, Decimal(100), UTC
    )
    assert whole == Decimal("337.50")
    assert parts == whole


def test_rounding_is_half_up():
    saturday = datetime(2026, 6, 6, 9, 0, tzinfo=UTC)
    price = calculate_price(saturday, saturday + timedelta(minutes=30), Decimal("0.25"), UTC)
    assert price == Decimal("0.13")


def test_fractional_rates_round_to_cents():
    saturday = datetime(2026, 6, 6, 9, 0, tzinfo=UTC)
    price = calculate_price(saturday, saturday + timedelta(minutes=10), Decimal(1), UTC)
    assert price == Decimal("0.17")


def test_zero_length_interval_is_free():
    assert calculate_price(_monday(10), _monday(10), Decimal(500), UTC) == Decimal("0.00")


def test_slots_cover_interval_without_gaps():
    start, end = _monday(9, 40), _monday(13, 5)
    slots = list(iter_slots(start, end, UTC))
    assert slots[0].start == start
    assert slots[-1].end == end
    for previous, current in zip(slots, slots[1:]):
        assert previous.end == current.start
    micro = Decimal("0.000001")
    total = sum(s.hours for s in slots)
    assert total.quantize(micro) == (Decimal(205) / Decimal(60)).quantize(micro)


def test_slots_at_end_of_calendar_stay_in_range():
    start = datetime(9999, 12, 31, 22, 15, tzinfo=UTC)
    end = datetime(9999, 12, 31, 23, 59, tzinfo=UTC)
    slots = list(iter_slots(start, end, UTC))
    assert [s.end for s in slots] == [datetime(9999, 12, 31, 23, 0, tzinfo=UTC), end]
    assert calculate_price(start, end, Decimal(60), UTC) == Decimal("104.00")
