"""Service for pricing a booking interval against the rate schedule.

The interval is split into slots that end on clock-hour boundaries of the
business timezone (the last slot may be a fraction of an hour). Each slot is
billed at the rate in force at its start instant, and the sum is rounded once,
half-up, to two decimal places.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from workspace_booking.services.rates import hourly_rate, is_peak

CENTS = Decimal("0.01")
_ONE_HOUR = timedelta(hours=1)
_MICROS_PER_HOUR = Decimal(3_600_000_000)


@dataclass(frozen=True)
class PriceSlot:
    start: datetime
    end: datetime
    peak: bool

    @property
    def hours(self) -> Decimal:
        return duration_hours(self.start, self.end)


def duration_hours(start: datetime, end: datetime) -> Decimal:
    """Exact length of ``[start, end)`` in hours as a Decimal."""
    micros = (end - start) // timedelta(microseconds=1)
    return Decimal(micros) / _MICROS_PER_HOUR


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def _time_left_in_hour(instant: datetime, zone: tzinfo) -> timedelta:
    # Arithmetic stays in UTC; only the position inside the local hour is read
    # from the wall clock, so DST jumps and half-hour offsets are handled.
    local = instant.astimezone(zone)
    into_hour = timedelta(
        minutes=local.minute, seconds=local.second, microseconds=local.microsecond
    )
    return _ONE_HOUR - into_hour


def iter_slots(start: datetime, end: datetime, zone: tzinfo) -> Iterator[PriceSlot]:
    """Yield the hour-aligned slots covering ``[start, end)``."""
    current = start
    while current < end:
        # Compare durations first so no instant past ``end`` is ever built.
        left = _time_left_in_hour(current, zone)
        slot_end = end if end - current <= left else current + left
        yield PriceSlot(start=current, end=slot_end, peak=is_peak(current, zone))
        current = slot_end


def calculate_price(
    start: datetime, end: datetime, base_rate: Decimal, zone: tzinfo
) -> Decimal:
    """Return the price of ``[start, end)`` for a room with ``base_rate`` per hour.

    A zero-length (or inverted) interval prices at 0.00; the lifecycle manager
    rejects such bookings before pricing.
    """
    total = sum(
        (hourly_rate(base_rate, slot.peak) * slot.hours for slot in iter_slots(start, end, zone)),
        Decimal(0),
    )
    return round_money(total)
