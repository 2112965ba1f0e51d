import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException

from database_connector import DatabaseConnector, DatabaseError
from endpoint_handlers.bus_handlers import fetch_bus
from endpoint_handlers.seat_handlers import reserve_seats
from models.pydantic_models import (
    Booking, BookingRequest, PassengerInfo, PaymentRequest, PaymentResult
)
from utils.error_handling import error_handler, ErrorCode
from utils.validation import (
    validate_payment_details, validate_seat_numbers, PaymentValidationError, SeatValidationError
)

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending_payment"
STATUS_CONFIRMED = "confirmed"

BOOKING_COLUMNS = """
    b.booking_id, b.bus_id, bus.operator, b.from_stop, b.to_stop, b.travel_date,
    b.seats, b.passengers, b.total_amount, b.status, b.payment_method, b.created_at
"""


def _new_booking_id() -> str:
    return "SY" + uuid.uuid4().hex[:8].upper()


def _fetch_booking(db: DatabaseConnector, booking_id: str) -> Booking:
    df = db.execute_df(
        f"""
        SELECT {BOOKING_COLUMNS}
        FROM bookings b
        LEFT JOIN buses bus ON bus.bus_id = b.bus_id
        WHERE b.booking_id = ?
        """,
        [booking_id]
    )
    if df.empty:
        error_handler.handle_not_found("booking", booking_id)

    row = df.iloc[0]
    payment_method = row['payment_method'] if isinstance(row['payment_method'], str) else None
    operator = row['operator'] if isinstance(row['operator'], str) else None
    return Booking(
        booking_id=row['booking_id'],
        bus_id=row['bus_id'],
        operator=operator,
        from_stop=row['from_stop'],
        to_stop=row['to_stop'],
        travel_date=row['travel_date'],
        seats=json.loads(row['seats']),
        passengers=[PassengerInfo(**p) for p in json.loads(row['passengers'])],
        total_amount=int(row['total_amount']),
        status=row['status'],
        payment_method=payment_method,
        created_at=row['created_at']
    )


def _assign_passenger_seats(seats: List[str], passengers: List[PassengerInfo]) -> List[PassengerInfo]:
    """
    Give every passenger one of the booked seats.

    Passengers that name a seat keep it; the rest take the remaining seats
    in order. A named seat must be one of the booked seats and may only be
    claimed once.
    """
    claimed = [p.seat_number.strip().upper() for p in passengers if p.seat_number]
    foreign = [s for s in claimed if s not in seats]
    if foreign or len(set(claimed)) != len(claimed):
        error_handler.handle_validation_error(
            "passengers",
            claimed,
            "passenger seat numbers must be distinct seats from this booking",
            code=ErrorCode.INVALID_SEAT
        )

    free = iter(s for s in seats if s not in claimed)
    return [
        passenger.model_copy(update={
            "seat_number": passenger.seat_number.strip().upper() if passenger.seat_number else next(free)
        })
        for passenger in passengers
    ]


def create_booking_handler(db: DatabaseConnector, request: BookingRequest) -> Booking:
    """
    Create a booking for one passenger per seat.

    The seats are reserved as part of the booking, and the booking waits
    in pending_payment until a payment is made.

    Args:
        db: Database connector instance
        request: Bus, trip, seats and passenger details

    Returns:
        The stored Booking
    """
    if len(request.passengers) != len(request.seats):
        error_handler.handle_validation_error(
            "passengers",
            len(request.passengers),
            f"must list exactly one passenger per seat ({len(request.seats)} seats selected)"
        )

    try:
        seats = validate_seat_numbers(request.seats)
    except SeatValidationError as e:
        error_handler.handle_validation_error("seats", request.seats, str(e), code=ErrorCode.INVALID_SEAT)
    passengers = _assign_passenger_seats(seats, request.passengers)

    booking_id = _new_booking_id()
    try:
        with db.transaction():
            bus = fetch_bus(db, request.bus_id)
            reserve_seats(db, request.bus_id, seats, booking_id)

            db.execute(
                """
                INSERT INTO bookings (
                    booking_id, bus_id, from_stop, to_stop, travel_date, seats,
                    passengers, total_amount, status, payment_method, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    booking_id,
                    request.bus_id,
                    request.from_stop.strip(),
                    request.to_stop.strip(),
                    request.travel_date,
                    json.dumps(seats),
                    json.dumps([p.model_dump() for p in passengers]),
                    bus.price * len(seats),
                    STATUS_PENDING,
                    None,
                    datetime.now(timezone.utc).isoformat(),
                ]
            )

        logger.info(f"Created booking {booking_id} on bus {request.bus_id} for {len(seats)} seats")
        return _fetch_booking(db, booking_id)
    except HTTPException:
        raise
    except DatabaseError as e:
        error_handler.handle_database_error("booking creation", e)


def get_booking_handler(db: DatabaseConnector, booking_id: str) -> Booking:
    try:
        return _fetch_booking(db, booking_id)
    except HTTPException:
        raise
    except DatabaseError as e:
        error_handler.handle_database_error("booking lookup", e)


async def process_payment_handler(
    db: DatabaseConnector,
    booking_id: str,
    payment: PaymentRequest,
    delay_seconds: float = 2.0
) -> PaymentResult:
    """
    Simulate a payment and confirm the booking.

    No money moves: after a short processing delay every valid payment
    succeeds. A booking can only be paid once.

    Args:
        db: Database connector instance
        booking_id: Booking to pay for
        payment: Chosen method and its details
        delay_seconds: Simulated processing time

    Returns:
        PaymentResult for the confirmed booking
    """
    try:
        method = validate_payment_details(payment.method, payment.upi_id)
    except PaymentValidationError as e:
        error_handler.handle_validation_error("method", payment.method, str(e), code=ErrorCode.INVALID_PAYMENT)

    try:
        booking = _fetch_booking(db, booking_id)
        if booking.status != STATUS_PENDING:
            error_handler.handle_conflict(
                ErrorCode.BOOKING_STATE_CONFLICT,
                f"Booking {booking_id} is already {booking.status}",
                {"booking_id": booking_id, "status": booking.status}
            )

        if delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

        with db.transaction():
            # Another payment may have completed while this one was processing
            current = _fetch_booking(db, booking_id)
            if current.status != STATUS_PENDING:
                error_handler.handle_conflict(
                    ErrorCode.BOOKING_STATE_CONFLICT,
                    f"Booking {booking_id} is already {current.status}",
                    {"booking_id": booking_id, "status": current.status}
                )
            db.execute(
                "UPDATE bookings SET status = ?, payment_method = ? WHERE booking_id = ?",
                [STATUS_CONFIRMED, method, booking_id]
            )

        logger.info(f"Booking {booking_id} paid via {method}, amount {booking.total_amount}")
        return PaymentResult(
            booking_id=booking_id,
            status=STATUS_CONFIRMED,
            method=method,
            amount_paid=booking.total_amount,
            message=f"Payment of ₹{booking.total_amount} received. Booking confirmed."
        )
    except HTTPException:
        raise
    except DatabaseError as e:
        error_handler.handle_database_error("payment processing", e)
