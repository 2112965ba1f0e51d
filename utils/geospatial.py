"""
Geospatial utility functions for the city bus API.
Provides great circle distances, path lengths and position interpolation.
"""

import math
from typing import List, Sequence, Tuple


EARTH_RADIUS = {
    "miles": 3959,
    "kilometers": 6371,
    "meters": 6371000
}


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float, unit: str = "kilometers") -> float:
    """
    Calculate the great circle distance between two points on Earth using the Haversine formula.

    Args:
        lat1, lon1: Latitude and longitude of first point in decimal degrees
        lat2, lon2: Latitude and longitude of second point in decimal degrees
        unit: Distance unit - "miles", "kilometers", or "meters"

    Returns:
        Distance between the two points in the specified unit
    """
    if unit not in EARTH_RADIUS:
        raise ValueError(f"Unsupported unit: {unit}. Use 'miles', 'kilometers', or 'meters'")

    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat/2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon/2)**2
    c = 2 * math.asin(math.sqrt(a))

    return c * EARTH_RADIUS[unit]


def interpolate_point(
    start: Tuple[float, float],
    end: Tuple[float, float],
    fraction: float
) -> Tuple[float, float]:
    """
    Linear interpolation between two (lat, lon) points.

    Args:
        start: Starting (lat, lon)
        end: Ending (lat, lon)
        fraction: Position along the segment, clamped to 0..1

    Returns:
        Interpolated (lat, lon)
    """
    fraction = min(1.0, max(0.0, fraction))
    return (
        start[0] + (end[0] - start[0]) * fraction,
        start[1] + (end[1] - start[1]) * fraction,
    )


def path_length(points: Sequence[Tuple[float, float]], unit: str = "kilometers") -> float:
    """Total great circle length of a polyline of (lat, lon) points."""
    return sum(
        haversine_distance(a[0], a[1], b[0], b[1], unit=unit)
        for a, b in zip(points, points[1:])
    )


def to_geojson_coordinates(points: Sequence[Tuple[float, float]]) -> List[List[float]]:
    # GeoJSON wants [lon, lat]
    return [[lon, lat] for lat, lon in points]
