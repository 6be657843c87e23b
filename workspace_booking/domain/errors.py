"""Typed errors raised by the booking engine.

Every error carries an explicit ``kind`` so callers can map failures without
parsing text, and a stable message prefix so logs stay greppable.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORE = "store"


class BookingError(Exception):
    """Base class for every failure the engine reports."""

    kind: ErrorKind
    prefix: str

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(BookingError):
    """Malformed or policy-violating input. Never retried."""

    kind = ErrorKind.VALIDATION
    prefix = "validation error"


class NotFoundError(BookingError):
    kind = ErrorKind.NOT_FOUND
    prefix = "not found"


class ConflictError(BookingError):
    """Overlapping booking or an invalid state transition."""

    kind = ErrorKind.CONFLICT
    prefix = "conflict"


class StoreError(BookingError):
    """Persistence failure. ``retryable`` tells the caller whether to try again."""

    kind = ErrorKind.STORE
    prefix = "store error"

    def __init__(self, detail: str, *, retryable: bool = True) -> None:
        self.retryable = retryable
        super().__init__(detail)


class DuplicateBookingError(StoreError):
    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__(f"booking id {booking_id} already exists", retryable=False)
