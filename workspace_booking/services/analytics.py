"""Service for per-room usage and revenue rollups."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal

from workspace_booking.domain.errors import ValidationError
from workspace_booking.domain.models import BookingStatus, RoomAnalytics
from workspace_booking.repos.base import BookingStore
from workspace_booking.services.pricing import duration_hours, round_money


def _day_start(day: date, zone: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=zone).astimezone(timezone.utc)


def room_analytics(
    store: BookingStore, date_from: date, date_to: date, zone: tzinfo
) -> list[RoomAnalytics]:
    """Return booked hours and revenue per room for ``[date_from, date_to]``.

    Both dates are inclusive calendar days in ``zone``. Only confirmed
    bookings whose start falls inside the range are counted; every room gets
    a row, even with nothing booked.
    """
    if date_from > date_to:
        raise ValidationError('"from" date must be before or equal to "to" date')

    try:
        window_start = _day_start(date_from, zone)
        window_end = _day_start(date_to + timedelta(days=1), zone)
    except OverflowError:
        raise ValidationError("date range is out of range") from None

    hours: dict[str, Decimal] = {}
    revenue: dict[str, Decimal] = {}
    for booking in store.list_bookings():
        if booking.status != BookingStatus.CONFIRMED:
            continue
        if not window_start <= booking.start_time < window_end:
            continue
        hours[booking.room_id] = hours.get(booking.room_id, Decimal(0)) + duration_hours(
            booking.start_time, booking.end_time
        )
        revenue[booking.room_id] = revenue.get(booking.room_id, Decimal(0)) + booking.total_price

    return [
        RoomAnalytics(
            room_id=room.id,
            room_name=room.name,
            total_hours=round_money(hours.get(room.id, Decimal(0))),
            total_revenue=round_money(revenue.get(room.id, Decimal(0))),
        )
        for room in sorted(store.list_rooms(), key=lambda r: r.id)
    ]
