"""Domain models for the room booking engine."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import Annotated

from pydantic import (
    AwareDatetime,
    BaseModel,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

# Decimals go over the wire as JSON numbers, not strings.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]

# Booked durations, in hours to two decimal places.
Hours = Annotated[
    Decimal,
    Field(ge=0, decimal_places=2),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class BookingStatus(StrEnum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Room(BaseModel, frozen=True):
    id: str = Field(min_length=1)
    name: str
    base_hourly_rate: Money = Field(gt=0)
    capacity: int = Field(gt=0)


class Booking(BaseModel):
    booking_id: str
    room_id: str
    user_name: str
    start_time: datetime
    end_time: datetime
    total_price: Money = Field(ge=0)
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime = Field(default_factory=_utcnow)
    cancelled_at: datetime | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> Booking:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    def to_result(self) -> BookingResult:
        return BookingResult(
            booking_id=self.booking_id,
            room_id=self.room_id,
            user_name=self.user_name,
            total_price=self.total_price,
            status=self.status,
        )


class RoomAnalytics(BaseModel):
    room_id: str
    room_name: str
    total_hours: Hours
    total_revenue: Money


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateBookingRequest(BaseModel):
    room_id: str = Field(min_length=1)
    user_name: str = Field(min_length=1)
    start_time: AwareDatetime
    end_time: AwareDatetime

    @field_validator("user_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("user_name must not be blank")
        return value


class QuoteRequest(BaseModel):
    room_id: str = Field(min_length=1)
    start_time: AwareDatetime
    end_time: AwareDatetime


class QuoteResponse(BaseModel):
    room_id: str
    total_price: Money


class BookingResult(BaseModel):
    """Public projection of a booking returned by create and cancel."""

    booking_id: str
    room_id: str
    user_name: str
    total_price: Money
    status: BookingStatus


class CancelBookingResponse(BaseModel):
    booking_id: str
    status: BookingStatus
    message: str = "Booking cancelled successfully"
