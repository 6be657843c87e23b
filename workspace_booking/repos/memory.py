"""In-memory store for rooms and bookings."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal

from workspace_booking.domain.errors import DuplicateBookingError, StoreError
from workspace_booking.domain.models import Booking, BookingStatus, Room

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Dict-backed store for Room and Booking instances.

    A single data lock guards the dicts; per-room locks serialize the
    conflict-check-then-insert sequence of the engine. Stored bookings are
    copied on the way in and out so callers never mutate shared state.
    """

    def __init__(self, lock_timeout: float = 5.0) -> None:
        self._rooms: dict[str, Room] = {}
        self._bookings: dict[str, Booking] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._room_locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._lock_timeout = lock_timeout

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------

    def add_room(self, room: Room) -> None:
        with self._lock:
            self._rooms[room.id] = room

    def get_room(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return sorted(self._rooms.values(), key=lambda r: r.id)

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def find_confirmed_bookings(self, room_id: str) -> list[Booking]:
        with self._lock:
            return [
                b.model_copy()
                for b in self._bookings.values()
                if b.room_id == room_id and b.status == BookingStatus.CONFIRMED
            ]

    def list_bookings(self) -> list[Booking]:
        with self._lock:
            return [b.model_copy() for b in self._bookings.values()]

    def find_booking_by_id(self, booking_id: str) -> Booking | None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return booking.model_copy() if booking is not None else None

    def insert_booking(self, booking: Booking) -> None:
        with self._lock:
            if booking.booking_id in self._bookings:
                raise DuplicateBookingError(booking.booking_id)
            self._bookings[booking.booking_id] = booking.model_copy()

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        cancelled_at: datetime | None,
        expected_status: BookingStatus,
    ) -> int:
        """Conditionally set the status; returns the number of records changed (0 or 1)."""
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None or booking.status != expected_status:
                return 0
            self._bookings[booking_id] = booking.model_copy(
                update={"status": status, "cancelled_at": cancelled_at}
            )
            return 1

    def next_booking_id(self) -> str:
        with self._lock:
            return f"b{next(self._ids)}"

    @contextmanager
    def room_lock(self, room_id: str) -> Iterator[None]:
        with self._lock:
            lock = self._room_locks[room_id]
        if not lock.acquire(timeout=self._lock_timeout):
            raise StoreError(f"timed out waiting for room {room_id}", retryable=True)
        try:
            yield
        finally:
            lock.release()


# ---------------------------------------------------------------------------
# Seed data – the rooms available out of the box
# ---------------------------------------------------------------------------

DEFAULT_ROOMS = (
    Room(id="101", name="Cabin 1", base_hourly_rate=Decimal(500), capacity=4),
    Room(id="102", name="Cabin 2", base_hourly_rate=Decimal(600), capacity=6),
    Room(id="103", name="Conference Room A", base_hourly_rate=Decimal(800), capacity=10),
    Room(id="104", name="Conference Room B", base_hourly_rate=Decimal(1000), capacity=15),
    Room(id="105", name="Meeting Pod", base_hourly_rate=Decimal(300), capacity=2),
)


def seed_rooms(store: InMemoryStore) -> int:
    """Load the default rooms if the store has none. Returns how many were added."""
    existing = store.list_rooms()
    if existing:
        logger.info("Rooms already exist (%d rooms), skipping seed", len(existing))
        return 0
    for room in DEFAULT_ROOMS:
        store.add_room(room)
    logger.info("Seeded %d rooms", len(DEFAULT_ROOMS))
    return len(DEFAULT_ROOMS)


def create_store(lock_timeout: float = 5.0, seed: bool = True) -> InMemoryStore:
    """Return an InMemoryStore, pre-loaded with the default rooms unless ``seed`` is False."""
    store = InMemoryStore(lock_timeout=lock_timeout)
    if seed:
        seed_rooms(store)
    return store
