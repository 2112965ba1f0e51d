import logging
from typing import List, Optional

from fastapi import HTTPException

from database_connector import DatabaseConnector, DatabaseError
from endpoint_handlers.bus_handlers import fetch_bus
from models.pydantic_models import SeatAvailability, SeatReservationResponse
from utils.error_handling import error_handler, ErrorCode
from utils.seat_layout import SEAT_COLUMNS, SEAT_ROWS
from utils.validation import validate_seat_numbers, SeatValidationError

logger = logging.getLogger(__name__)


def _reserved_seats(db: DatabaseConnector, bus_id: str) -> List[str]:
    rows = db.execute(
        "SELECT seat_number FROM seat_reservations WHERE bus_id = ? ORDER BY rowid",
        [bus_id]
    )
    return [row[0] for row in rows]


def _layout() -> List[List[str]]:
    return [[f"{col}{row}" for col in SEAT_COLUMNS] for row in range(1, SEAT_ROWS + 1)]


def get_seat_availability_handler(db: DatabaseConnector, bus_id: str) -> SeatAvailability:
    """
    Seat map for a bus: the full layout plus every reserved seat.
    """
    try:
        bus = fetch_bus(db, bus_id)
        return SeatAvailability(
            bus_id=bus.bus_id,
            total_seats=bus.total_seats,
            available_seats=bus.available_seats,
            reserved_seats=_reserved_seats(db, bus_id),
            layout=_layout()
        )
    except HTTPException:
        raise
    except DatabaseError as e:
        error_handler.handle_database_error("seat availability", e)


def reserve_seats(
    db: DatabaseConnector,
    bus_id: str,
    seats: List[str],
    booking_id: Optional[str] = None
) -> List[str]:
    """
    Reserve seats on a bus, all or nothing.

    Availability is recomputed as total seats minus reserved seats, so it
    can never drift from the reservation table.

    Args:
        db: Database connector instance
        bus_id: Bus to reserve on
        seats: Requested seat numbers
        booking_id: Booking that owns the seats, if any

    Returns:
        All reserved seats on the bus after the reservation

    Raises:
        HTTPException: 400 for malformed seats, 404 for an unknown bus,
            409 if any seat is already taken
    """
    try:
        seats = validate_seat_numbers(seats)
    except SeatValidationError as e:
        error_handler.handle_validation_error("seats", seats, str(e), code=ErrorCode.INVALID_SEAT)

    with db.transaction():
        bus = fetch_bus(db, bus_id)
        reserved = _reserved_seats(db, bus_id)

        taken = [s for s in seats if s in reserved]
        if taken:
            error_handler.handle_conflict(
                ErrorCode.SEAT_UNAVAILABLE,
                f"Seats already reserved: {', '.join(taken)}",
                {"bus_id": bus_id, "unavailable_seats": taken}
            )

        for seat in seats:
            db.execute(
                "INSERT INTO seat_reservations (bus_id, seat_number, booking_id) VALUES (?, ?, ?)",
                [bus_id, seat, booking_id]
            )

        reserved.extend(seats)
        db.execute(
            "UPDATE buses SET available_seats = ? WHERE bus_id = ?",
            [max(0, bus.total_seats - len(reserved)), bus_id]
        )

    logger.info(f"Reserved {len(seats)} seats on bus {bus_id}: {', '.join(seats)}")
    return reserved


def reserve_seats_handler(db: DatabaseConnector, bus_id: str, seats: List[str]) -> SeatReservationResponse:
    try:
        reserved = reserve_seats(db, bus_id, seats)
        bus = fetch_bus(db, bus_id)
        return SeatReservationResponse(
            success=True,
            bus_id=bus_id,
            reserved_seats=reserved,
            available_seats=bus.available_seats
        )
    except HTTPException:
        raise
    except DatabaseError as e:
        error_handler.handle_database_error("seat reservation", e)
