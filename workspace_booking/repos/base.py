"""Store interface the booking engine depends on."""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from workspace_booking.domain.models import Booking, BookingStatus, Room


class BookingStore(Protocol):
    """Persistence boundary for rooms and bookings.

    Implementations must make ``next_booking_id`` atomic, reject duplicate ids
    in ``insert_booking`` with ``DuplicateBookingError``, apply
    ``update_booking_status`` only when the stored status equals
    ``expected_status``, and serialize callers holding ``room_lock`` for the
    same room. Failures surface as ``StoreError``.
    """

    def get_room(self, room_id: str) -> Room | None: ...

    def list_rooms(self) -> list[Room]: ...

    def add_room(self, room: Room) -> None: ...

    def find_confirmed_bookings(self, room_id: str) -> list[Booking]: ...

    def list_bookings(self) -> list[Booking]: ...

    def insert_booking(self, booking: Booking) -> None: ...

    def find_booking_by_id(self, booking_id: str) -> Booking | None: ...

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        cancelled_at: datetime | None,
        expected_status: BookingStatus,
    ) -> int: ...

    def next_booking_id(self) -> str: ...

    def room_lock(self, room_id: str) -> AbstractContextManager[None]: ...
