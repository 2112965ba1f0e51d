from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response

from database_connector import get_db, DatabaseConnector
from endpoint_handlers.bus_handlers import (
    get_bus_handler,
    get_crowd_report_handler,
    search_buses_handler,
    update_bus_location_handler
)
from models.pydantic_models import Bus, BusLocationUpdate, CrowdReport
from utils.caching import get_cache_headers

bus_routes = APIRouter(prefix="/buses", tags=["buses"])


@bus_routes.get("", response_model=List[Bus])
def search_buses(
    response: Response,
    from_stop: Optional[str] = Query(None, alias="from", description="Text the origin must contain"),
    to_stop: Optional[str] = Query(None, alias="to", description="Text the destination must contain"),
    db: DatabaseConnector = Depends(get_db)
):
    """
    List buses, optionally filtered by origin and destination.

    Filters are case-insensitive substring matches.
    """
    # Locations and seats change constantly
    for key, value in get_cache_headers(None).items():
        response.headers[key] = value

    return search_buses_handler(db, from_stop, to_stop)


@bus_routes.get("/{bus_id}", response_model=Bus)
def get_bus(
    response: Response,
    bus_id: str = Path(..., description="Bus identifier"),
    db: DatabaseConnector = Depends(get_db)
):
    for key, value in get_cache_headers(None).items():
        response.headers[key] = value

    return get_bus_handler(db, bus_id)


@bus_routes.post("/{bus_id}/location", response_model=Bus)
def update_bus_location(
    update: BusLocationUpdate,
    bus_id: str = Path(..., description="Bus identifier"),
    db: DatabaseConnector = Depends(get_db)
):
    """
    Report a bus's current location and delay.
    """
    return update_bus_location_handler(db, bus_id, update)


@bus_routes.get("/{bus_id}/crowd", response_model=CrowdReport)
def get_crowd_report(
    response: Response,
    bus_id: str = Path(..., description="Bus identifier"),
    db: DatabaseConnector = Depends(get_db)
):
    """
    Get the crowd level of a bus from its seat availability.
    """
    for key, value in get_cache_headers(None).items():
        response.headers[key] = value

    return get_crowd_report_handler(db, bus_id)
