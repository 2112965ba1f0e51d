from typing import List

from fastapi import APIRouter, Query, Response

from endpoint_handlers.route_handlers import (
    get_route_shape_handler,
    list_route_pairs_handler,
    resolve_route_handler
)
from models.pydantic_models import GeoJSONResponse, ResolvedRoute, RoutePair
from utils.caching import get_cache_headers

route_routes = APIRouter(prefix="/routes", tags=["routes"])


@route_routes.get("", response_model=List[RoutePair])
def list_routes(response: Response):
    """
    Get every registered route entry.
    """
    for key, value in get_cache_headers(3600).items():
        response.headers[key] = value

    return list_route_pairs_handler()


@route_routes.get("/resolve", response_model=ResolvedRoute)
def resolve_route(
    response: Response,
    from_stop: str = Query(..., alias="from", description="Origin stop name"),
    to_stop: str = Query(..., alias="to", description="Destination stop name")
):
    """
    Resolve the ordered stop path between two stops.

    Tries the stored direction, then the reverse direction, then falls back
    to a direct hop between the two names.
    """
    for key, value in get_cache_headers(3600).items():
        response.headers[key] = value

    return resolve_route_handler(from_stop, to_stop)


@route_routes.get("/shape", response_model=GeoJSONResponse)
def get_route_shape(
    response: Response,
    from_stop: str = Query(..., alias="from", description="Origin stop name"),
    to_stop: str = Query(..., alias="to", description="Destination stop name")
):
    """
    Get the resolved path as GeoJSON for map rendering.
    """
    for key, value in get_cache_headers(3600).items():
        response.headers[key] = value

    return get_route_shape_handler(from_stop, to_stop)
