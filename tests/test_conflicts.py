"""Tests for the overlap rule and conflict-detection service."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from workspace_booking.domain.models import Booking, BookingStatus
from workspace_booking.services.conflicts import (
    find_conflict,
    format_conflict_message,
    overlaps,
)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 6, 2, hour, minute, tzinfo=timezone.utc)


def _make_booking(
    start: datetime,
    end: datetime,
    room_id: str = "101",
    booking_id: str = "b1",
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> Booking:
    return Booking(
        booking_id=booking_id,
        room_id=room_id,
        user_name="Existing",
        start_time=start,
        end_time=end,
        total_price=Decimal("100.00"),
        status=status,
    )


@pytest.mark.parametrize(
    "a, b",
    [
        ((_at(9), _at(10)), (_at(10), _at(11))),
        ((_at(9), _at(11)), (_at(10), _at(12))),
        ((_at(9), _at(12)), (_at(10), _at(11))),
        ((_at(8), _at(9)), (_at(10), _at(11))),
        ((_at(9), _at(10)), (_at(9), _at(10))),
    ],
)
def test_overlap_is_symmetric(a, b):
    assert overlaps(*a, *b) == overlaps(*b, *a)


def test_touching_intervals_do_not_overlap():
    """When one range ends exactly where the other starts there is no overlap."""
    assert overlaps(_at(9), _at(10), _at(10), _at(11)) is False
    assert overlaps(_at(10), _at(11), _at(9), _at(10)) is False


def test_partial_and_contained_overlap():
    assert overlaps(_at(10), _at(11, 30), _at(11), _at(12)) is True
    assert overlaps(_at(9), _at(17), _at(12), _at(13)) is True


def test_no_conflict_for_disjoint_booking():
    existing = [_make_booking(_at(8), _at(9))]
    assert find_conflict("101", _at(10), _at(11), existing) is None


def test_partial_overlap_returns_conflicting_booking():
    existing = [_make_booking(_at(9), _at(10, 30))]
    conflict = find_conflict("101", _at(10), _at(11), existing)
    assert conflict is not None
    assert conflict.start_time == _at(9)


def test_exact_boundary_no_conflict():
    existing = [_make_booking(_at(9), _at(10))]
    assert find_conflict("101", _at(10), _at(11), existing) is None


def test_returns_first_of_several_conflicts():
    existing = [
        _make_booking(_at(9), _at(10, 30), booking_id="b1"),
        _make_booking(_at(10, 30), _at(12), booking_id="b2"),
    ]
    conflict = find_conflict("101", _at(10), _at(11), existing)
    assert conflict is not None
    assert conflict.booking_id == "b1"


def test_cancelled_and_other_room_bookings_are_ignored():
    existing = [
        _make_booking(_at(10), _at(11), status=BookingStatus.CANCELLED),
        _make_booking(_at(10), _at(11), room_id="102", booking_id="b2"),
    ]
    assert find_conflict("101", _at(10), _at(11), existing) is None


def test_conflict_message_names_the_window():
    booking = _make_booking(_at(10), _at(11, 30))
    message = format_conflict_message(booking, timezone.utc)
    assert "room 101" in message
    assert "2026-06-02 10:00" in message
    assert "2026-06-02 11:30" in message
