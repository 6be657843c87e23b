"""Time-of-day rate schedule."""

from __future__ import annotations

from datetime import datetime, tzinfo
from decimal import Decimal

PEAK_MULTIPLIER = Decimal("1.5")

# Half-open [start_hour, end_hour) windows, Monday to Friday only.
PEAK_WINDOWS = ((10, 13), (16, 19))


def is_peak(instant: datetime, zone: tzinfo) -> bool:
    """Classify ``instant`` as peak using the wall clock in ``zone``.

    Weekends are always off-peak.
    """
    local = instant.astimezone(zone)
    if local.weekday() >= 5:
        return False
    return any(start <= local.hour < end for start, end in PEAK_WINDOWS)


def hourly_rate(base_rate: Decimal, peak: bool) -> Decimal:
    return base_rate * PEAK_MULTIPLIER if peak else base_rate
