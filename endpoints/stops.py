from typing import List

from fastapi import APIRouter, Path, Query, Response

from endpoint_handlers.stop_handlers import (
    get_nearest_stop_handler,
    get_stop_coordinates_handler,
    list_stops_handler
)
from models.pydantic_models import NearestStop, StopCoordinates
from utils.caching import get_cache_headers

stop_routes = APIRouter(prefix="/stops", tags=["stops"])


@stop_routes.get("", response_model=List[StopCoordinates])
def list_stops(response: Response):
    """
    Get every registered stop with its coordinates.
    """
    # Registry is static
    for key, value in get_cache_headers(3600).items():
        response.headers[key] = value

    return list_stops_handler()


@stop_routes.get("/nearest", response_model=NearestStop)
def get_nearest_stop(
    lat: float = Query(..., description="Latitude", ge=-90, le=90),
    lng: float = Query(..., description="Longitude", ge=-180, le=180)
):
    """
    Find the registered stop nearest to a position.

    Used to pre-fill the origin field from the device location.
    """
    return get_nearest_stop_handler(lat, lng)


@stop_routes.get("/{name}", response_model=StopCoordinates)
def get_stop(
    response: Response,
    name: str = Path(..., description="Stop name, case-sensitive")
):
    """
    Get coordinates for a stop.

    Unknown names return the default city point with fallback=true.
    """
    for key, value in get_cache_headers(3600).items():
        response.headers[key] = value

    return get_stop_coordinates_handler(name)
