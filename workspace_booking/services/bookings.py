"""Booking lifecycle: validation, conflict checking, pricing, creation and cancellation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from workspace_booking.config import Settings
from workspace_booking.domain.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from workspace_booking.domain.models import (
    Booking,
    BookingResult,
    BookingStatus,
    CreateBookingRequest,
    Room,
)
from workspace_booking.repos.base import BookingStore
from workspace_booking.services.conflicts import find_conflict, format_conflict_message
from workspace_booking.services.pricing import calculate_price

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError("timestamps must include a UTC offset")
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise ValidationError("time is out of range") from None


class BookingEngine:
    """Orchestrates the booking state machine against a store.

    CONFIRMED -> CANCELLED is the only transition. The engine holds no state of
    its own; everything shared lives in the store.
    """

    def __init__(
        self,
        store: BookingStore,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.zone = settings.zone
        self.clock = clock or _utcnow
        self.max_duration = timedelta(hours=settings.max_booking_hours)
        self.cancellation_window = timedelta(hours=settings.cancellation_window_hours)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _validate_times(
        self, start: datetime, end: datetime, *, check_past: bool = True
    ) -> tuple[datetime, datetime]:
        start = _as_utc(start)
        end = _as_utc(end)
        if start >= end:
            raise ValidationError("start time must be before end time")
        if check_past and start < self.clock():
            raise ValidationError("start time cannot be in the past")
        if end - start > self.max_duration:
            raise ValidationError(
                f"duration exceeds maximum of {self.settings.max_booking_hours:g} hours"
            )
        try:
            # Pricing reads both ends on the business-zone wall clock.
            start.astimezone(self.zone)
            end.astimezone(self.zone)
        except OverflowError:
            raise ValidationError("time is out of range") from None
        return start, end

    def _require_room(self, room_id: str) -> Room:
        room = self.store.get_room(room_id)
        if room is None:
            raise NotFoundError(f"room {room_id} not found")
        return room

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_booking(self, request: CreateBookingRequest) -> BookingResult:
        """Validate, check for conflicts, price and persist a new booking."""
        try:
            start, end = self._validate_times(request.start_time, request.end_time)
            room = self._require_room(request.room_id)

            # Check-then-insert must not interleave with another create for this room.
            with self.store.room_lock(room.id):
                existing = self.store.find_confirmed_bookings(room.id)
                conflict = find_conflict(room.id, start, end, existing)
                if conflict is not None:
                    raise ConflictError(format_conflict_message(conflict, self.zone))

                booking = Booking(
                    booking_id=self.store.next_booking_id(),
                    room_id=room.id,
                    user_name=request.user_name,
                    start_time=start,
                    end_time=end,
                    total_price=calculate_price(start, end, room.base_hourly_rate, self.zone),
                    status=BookingStatus.CONFIRMED,
                    created_at=self.clock(),
                )
                self.store.insert_booking(booking)
        except (ValidationError, NotFoundError, ConflictError) as exc:
            logger.info("Rejected booking for room %s: %s", request.room_id, exc)
            raise
        except StoreError:
            logger.exception("Store failure creating booking for room %s", request.room_id)
            raise

        logger.info(
            "Created booking %s for room %s (%s - %s), total %s",
            booking.booking_id,
            booking.room_id,
            booking.start_time.isoformat(),
            booking.end_time.isoformat(),
            booking.total_price,
        )
        return booking.to_result()

    def cancel_booking(self, booking_id: str) -> BookingResult:
        """Cancel a confirmed booking more than the cancellation window before it starts."""
        booking = self.store.find_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundError(f"booking {booking_id} not found")
        if booking.status == BookingStatus.CANCELLED:
            raise ConflictError(f"booking {booking_id} is already cancelled")

        now = self.clock()
        if booking.start_time - now <= self.cancellation_window:
            raise ValidationError(
                f"cannot cancel booking {booking_id}, less than "
                f"{self.settings.cancellation_window_hours:g} hours remaining before start time"
            )

        matched = self.store.update_booking_status(
            booking_id,
            BookingStatus.CANCELLED,
            cancelled_at=now,
            expected_status=BookingStatus.CONFIRMED,
        )
        if matched == 0:
            # Lost a race with another cancel.
            raise ConflictError(f"booking {booking_id} is already cancelled")

        logger.info("Cancelled booking %s for room %s", booking_id, booking.room_id)
        cancelled = booking.model_copy(
            update={"status": BookingStatus.CANCELLED, "cancelled_at": now}
        )
        return cancelled.to_result()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def quote_price(self, room_id: str, start: datetime, end: datetime) -> Decimal:
        """Price an interval without booking it."""
        start, end = self._validate_times(start, end, check_past=False)
        room = self._require_room(room_id)
        return calculate_price(start, end, room.base_hourly_rate, self.zone)

    def list_bookings(self) -> list[Booking]:
        return sorted(self.store.list_bookings(), key=lambda b: b.created_at)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.store.find_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundError(f"booking {booking_id} not found")
        return booking

    def list_rooms(self) -> list[Room]:
        return self.store.list_rooms()

    def get_room(self, room_id: str) -> Room:
        return self._require_room(room_id)
