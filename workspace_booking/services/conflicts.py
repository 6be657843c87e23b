"""Service for detecting scheduling conflicts between bookings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, tzinfo

from workspace_booking.domain.models import Booking, BookingStatus


def overlaps(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Return True if the half-open ranges [start_a, end_a) and [start_b, end_b) overlap.

    Exact boundary touches (end == start) are NOT considered overlaps, so
    back-to-back bookings are allowed.
    """
    return start_a < end_b and end_a > start_b


def find_conflict(
    room_id: str,
    new_start: datetime,
    new_end: datetime,
    existing_bookings: Iterable[Booking],
) -> Booking | None:
    """Return the first confirmed booking for ``room_id`` overlapping the range.

    Bookings for other rooms and cancelled bookings are skipped, so callers may
    pass an unfiltered list.
    """
    for booking in existing_bookings:
        if booking.room_id != room_id or booking.status != BookingStatus.CONFIRMED:
            continue
        if overlaps(new_start, new_end, booking.start_time, booking.end_time):
            return booking
    return None


def format_conflict_message(booking: Booking, zone: tzinfo) -> str:
    start = booking.start_time.astimezone(zone)
    end = booking.end_time.astimezone(zone)
    return (
        f"room {booking.room_id} already booked from "
        f"{start:%Y-%m-%d %H:%M} to {end:%Y-%m-%d %H:%M} ({start:%Z})"
    )
