"""FastAPI application: entry point for the room booking service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from time import perf_counter

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workspace_booking.config import Settings, get_settings
from workspace_booking.domain.errors import BookingError, ErrorKind, StoreError
from workspace_booking.domain.models import (
    Booking,
    BookingResult,
    CancelBookingResponse,
    CreateBookingRequest,
    QuoteRequest,
    QuoteResponse,
    Room,
    RoomAnalytics,
)
from workspace_booking.logging_config import configure_logging
from workspace_booking.repos.base import BookingStore
from workspace_booking.repos.memory import create_store
from workspace_booking.services.analytics import room_analytics
from workspace_booking.services.bookings import BookingEngine

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
}


def get_engine(request: Request) -> BookingEngine:
    return request.app.state.engine


async def _handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    if isinstance(exc, StoreError):
        status_code = 503 if exc.retryable else 500
    else:
        status_code = _STATUS_BY_KIND[exc.kind]
    return JSONResponse(
        status_code=status_code, content={"error": exc.message, "kind": exc.kind}
    )


def create_app(
    settings: Settings | None = None,
    store: BookingStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Build the app with its engine constructed once and held on ``app.state``."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if store is None:
        store = create_store(
            lock_timeout=settings.store_timeout_seconds, seed=settings.seed_rooms
        )
    engine = BookingEngine(store, settings, clock=clock)

    app = FastAPI(title=settings.app_name)
    app.state.engine = engine
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BookingError, _handle_booking_error)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s | status=%s | duration=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            (perf_counter() - start) * 1000,
        )
        return response

    # ── Routes ────────────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "message": f"{settings.app_name} is running"}

    @app.get("/api/rooms", response_model=list[Room])
    def list_rooms(engine: BookingEngine = Depends(get_engine)) -> list[Room]:
        """Return every bookable room."""
        return engine.list_rooms()

    @app.get("/api/bookings", response_model=list[Booking])
    def list_bookings(engine: BookingEngine = Depends(get_engine)) -> list[Booking]:
        """Return all bookings, cancelled ones included."""
        return engine.list_bookings()

    @app.post("/api/bookings", response_model=BookingResult, status_code=201)
    def create_booking(
        payload: CreateBookingRequest, engine: BookingEngine = Depends(get_engine)
    ) -> BookingResult:
        return engine.create_booking(payload)

    @app.post("/api/bookings/quote", response_model=QuoteResponse)
    def quote_booking(
        payload: QuoteRequest, engine: BookingEngine = Depends(get_engine)
    ) -> QuoteResponse:
        """Price an interval for a room without reserving it."""
        price = engine.quote_price(payload.room_id, payload.start_time, payload.end_time)
        return QuoteResponse(room_id=payload.room_id, total_price=price)

    @app.get("/api/bookings/{booking_id}", response_model=Booking)
    def get_booking(booking_id: str, engine: BookingEngine = Depends(get_engine)) -> Booking:
        return engine.get_booking(booking_id)

    @app.post("/api/bookings/{booking_id}/cancel", response_model=CancelBookingResponse)
    def cancel_booking(
        booking_id: str, engine: BookingEngine = Depends(get_engine)
    ) -> CancelBookingResponse:
        result = engine.cancel_booking(booking_id)
        return CancelBookingResponse(booking_id=result.booking_id, status=result.status)

    @app.get("/api/analytics", response_model=list[RoomAnalytics])
    def analytics(
        date_from: date = Query(alias="from"),
        date_to: date = Query(alias="to"),
        engine: BookingEngine = Depends(get_engine),
    ) -> list[RoomAnalytics]:
        """Booked hours and revenue per room over an inclusive date range."""
        return room_analytics(engine.store, date_from, date_to, engine.zone)

    return app


app = create_app()
