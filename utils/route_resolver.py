"""
Route resolution between two named stops.
Tries the stored forward entry, then the reversed backward entry, then a direct hop.
Unknown names never raise; they fall back to the direct two-stop path.
"""

import logging
from typing import List, Tuple

from transit_data.locations import Coordinates, lookup_coordinates
from transit_data.routes import get_route_entry

logger = logging.getLogger(__name__)

SOURCE_FORWARD = "forward"
SOURCE_REVERSE = "reverse"
SOURCE_DIRECT = "direct"


def resolve_with_source(from_stop: str, to_stop: str) -> Tuple[List[str], str]:
    """
    Resolve a path and report which lookup produced it.

    Returns:
        Tuple of (ordered stop names, one of "forward", "reverse", "direct")
    """
    forward = get_route_entry(from_stop, to_stop)
    if forward is not None:
        return list(forward), SOURCE_FORWARD

    backward = get_route_entry(to_stop, from_stop)
    if backward is not None:
        return list(reversed(backward)), SOURCE_REVERSE

    logger.debug(f"No stored route for {from_stop!r} -> {to_stop!r}, using direct path")
    return [from_stop, to_stop], SOURCE_DIRECT


def resolve(from_stop: str, to_stop: str) -> List[str]:
    """
    Get the best known ordered path between two stops.

    Args:
        from_stop: Origin stop name
        to_stop: Destination stop name

    Returns:
        Ordered stop names, first element from_stop and last element to_stop
    """
    path, _ = resolve_with_source(from_stop, to_stop)
    return path


def intermediate_stops(from_stop: str, to_stop: str) -> List[str]:
    """Stops strictly between origin and destination; empty for a direct hop."""
    return resolve(from_stop, to_stop)[1:-1]


def route_coordinates(from_stop: str, to_stop: str) -> List[Tuple[str, Coordinates]]:
    """Resolved path with each stop paired to its (possibly fallback) coordinates."""
    return [(name, lookup_coordinates(name)) for name in resolve(from_stop, to_stop)]
