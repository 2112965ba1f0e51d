from typing import List

from models.pydantic_models import StopCoordinates, NearestStop
from transit_data.locations import (
    all_stop_names, is_known_stop, lookup_coordinates, nearest_stop
)
from utils.caching import cached
from utils.error_handling import error_handler, ErrorCode
from utils.validation import validate_latitude, validate_longitude, validate_stop_name


@cached(ttl=3600)
def list_stops_handler() -> List[StopCoordinates]:
    """
    Get every registered stop with its coordinates, in registry order.
    """
    stops = []
    for name in all_stop_names():
        coords = lookup_coordinates(name)
        stops.append(StopCoordinates(name=name, lat=coords.lat, lng=coords.lng))
    return stops


def get_stop_coordinates_handler(name: str) -> StopCoordinates:
    """
    Get coordinates for a stop name.

    Unknown names are not an error: the default point is returned and
    flagged with fallback=True so the map can still render.
    """
    try:
        name = validate_stop_name(name, "name")
    except ValueError as e:
        error_handler.handle_validation_error("name", name, str(e))

    coords = lookup_coordinates(name)
    return StopCoordinates(
        name=name,
        lat=coords.lat,
        lng=coords.lng,
        fallback=not is_known_stop(name)
    )


def get_nearest_stop_handler(lat: float, lng: float) -> NearestStop:
    """
    Find the registered stop closest to a device position.

    Used to pre-fill the origin field from the rider's location.
    """
    try:
        validate_latitude(lat)
        validate_longitude(lng)
    except ValueError as e:
        field = "lat" if "latitude" in str(e).lower() else "lng"
        error_handler.handle_validation_error(
            field, lat if field == "lat" else lng, str(e), code=ErrorCode.INVALID_COORDINATES
        )

    name, distance = nearest_stop(lat, lng)
    coords = lookup_coordinates(name)
    return NearestStop(
        name=name,
        lat=coords.lat,
        lng=coords.lng,
        distance_km=round(distance, 3)
    )
