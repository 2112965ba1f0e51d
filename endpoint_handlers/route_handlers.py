from typing import List

from models.pydantic_models import (
    GeoJSONResponse, RouteFeature, RoutePair, ResolvedRoute
)
from transit_data.routes import get_route_entry, route_pairs
from utils.caching import cached
from utils.error_handling import error_handler
from utils.geospatial import path_length, to_geojson_coordinates
from utils.route_resolver import resolve_with_source, route_coordinates
from utils.validation import validate_stop_name


def _validated_pair(from_stop: str, to_stop: str):
    try:
        return validate_stop_name(from_stop, "from"), validate_stop_name(to_stop, "to")
    except ValueError as e:
        field = "from" if str(e).startswith("from") else "to"
        error_handler.handle_validation_error(
            field, from_stop if field == "from" else to_stop, str(e)
        )


@cached(ttl=3600)
def list_route_pairs_handler() -> List[RoutePair]:
    """
    Get every registered directed route entry.

    Only one direction of a pair may be listed; the reverse trip is still
    resolvable through the route resolver.
    """
    return [
        RoutePair(from_stop=a, to_stop=b, stop_count=len(get_route_entry(a, b)))
        for a, b in route_pairs()
    ]


def resolve_route_handler(from_stop: str, to_stop: str) -> ResolvedRoute:
    """
    Resolve the best known path between two stops.

    Never fails for unknown names: the path falls back to a direct hop.
    """
    from_stop, to_stop = _validated_pair(from_stop, to_stop)

    path, source = resolve_with_source(from_stop, to_stop)
    points = [(c.lat, c.lng) for _, c in route_coordinates(from_stop, to_stop)]

    return ResolvedRoute(
        from_stop=from_stop,
        to_stop=to_stop,
        path=path,
        intermediate_stops=path[1:-1],
        source=source,
        distance_km=round(path_length(points), 3)
    )


def get_route_shape_handler(from_stop: str, to_stop: str) -> GeoJSONResponse:
    """
    Get the resolved path as GeoJSON: one LineString plus one Point per stop.
    """
    from_stop, to_stop = _validated_pair(from_stop, to_stop)

    stops = route_coordinates(from_stop, to_stop)
    points = [(c.lat, c.lng) for _, c in stops]

    features = [
        RouteFeature(
            properties={
                "from": from_stop,
                "to": to_stop,
                "stop_count": len(stops),
                "distance_km": round(path_length(points), 3)
            },
            geometry={
                "type": "LineString",
                "coordinates": to_geojson_coordinates(points)
            }
        )
    ]

    last_index = len(stops) - 1
    for index, (name, coords) in enumerate(stops):
        role = "origin" if index == 0 else "destination" if index == last_index else "stop"
        features.append(RouteFeature(
            properties={"name": name, "sequence": index, "role": role},
            geometry={"type": "Point", "coordinates": [coords.lng, coords.lat]}
        ))

    return GeoJSONResponse(features=features)
