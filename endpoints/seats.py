from fastapi import APIRouter, Depends, Path, Response

from database_connector import get_db, DatabaseConnector
from endpoint_handlers.seat_handlers import get_seat_availability_handler, reserve_seats_handler
from models.pydantic_models import SeatAvailability, SeatReservationRequest, SeatReservationResponse
from utils.caching import get_cache_headers

seat_routes = APIRouter(prefix="/seats", tags=["seats"])


@seat_routes.get("/{bus_id}", response_model=SeatAvailability)
def get_seat_availability(
    response: Response,
    bus_id: str = Path(..., description="Bus identifier"),
    db: DatabaseConnector = Depends(get_db)
):
    """
    Get the seat layout and reserved seats for a bus.
    """
    for key, value in get_cache_headers(None).items():
        response.headers[key] = value

    return get_seat_availability_handler(db, bus_id)


@seat_routes.post("/reserve", response_model=SeatReservationResponse)
def reserve_seats(request: SeatReservationRequest, db: DatabaseConnector = Depends(get_db)):
    """
    Reserve seats on a bus.

    All seats are reserved or none; a seat that is already taken is a 409.
    """
    return reserve_seats_handler(db, request.bus_id, request.seats)
