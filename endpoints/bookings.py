from fastapi import APIRouter, Depends, Path, Request

from database_connector import get_db, DatabaseConnector
from endpoint_handlers.booking_handlers import (
    create_booking_handler,
    get_booking_handler,
    process_payment_handler
)
from models.pydantic_models import Booking, BookingRequest, PaymentRequest, PaymentResult

booking_routes = APIRouter(prefix="/bookings", tags=["bookings"])


@booking_routes.post("", response_model=Booking, status_code=201)
def create_booking(request: BookingRequest, db: DatabaseConnector = Depends(get_db)):
    """
    Book seats for a list of passengers, one passenger per seat.

    The booking starts in pending_payment.
    """
    return create_booking_handler(db, request)


@booking_routes.get("/{booking_id}", response_model=Booking)
def get_booking(
    booking_id: str = Path(..., description="Booking identifier"),
    db: DatabaseConnector = Depends(get_db)
):
    return get_booking_handler(db, booking_id)


@booking_routes.post("/{booking_id}/payment", response_model=PaymentResult)
async def pay_for_booking(
    request: Request,
    payment: PaymentRequest,
    booking_id: str = Path(..., description="Booking identifier"),
    db: DatabaseConnector = Depends(get_db)
):
    """
    Simulate a payment and confirm the booking.
    """
    delay = request.app.state.settings.payment_delay_seconds
    return await process_payment_handler(db, booking_id, payment, delay)
