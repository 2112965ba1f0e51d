"""
Location registry for Shivamogga city stops.
Coordinates are based on Google Maps data and never change at runtime.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Tuple

from utils.geospatial import haversine_distance


@dataclass(frozen=True)
class Coordinates:
    """Immutable geographic coordinate."""
    lat: float
    lng: float


# Gvt Bus Stand; substituted for any name the registry does not know
DEFAULT_COORDINATES = Coordinates(13.9299, 75.5681)


_STOP_COORDINATES: Mapping[str, Coordinates] = MappingProxyType({
    'Gvt Bus Stand': Coordinates(13.9299, 75.5681),
    'Circuit House': Coordinates(13.9318, 75.5695),
    'Market': Coordinates(13.9287, 75.5672),
    'Shivamurthy Circle': Coordinates(13.9275, 75.5689),
    'Gandhi Bazzar': Coordinates(13.9265, 75.5701),
    'Kamala Nursing Home': Coordinates(13.9395, 75.5643),
    'Usha Nursing Home': Coordinates(13.9412, 75.5628),
    'Vinoba Nagara': Coordinates(13.9342, 75.5718),
    'Gopala': Coordinates(13.9201, 75.5655),
    'Gopi Circle': Coordinates(13.9218, 75.5668),
    'Draupadamma Circle': Coordinates(13.9248, 75.5682),
    'APMC': Coordinates(13.9158, 75.5785),
    'Ragigudda': Coordinates(13.9185, 75.5695),
    'Navle': Coordinates(13.9485, 75.5722),
    'JNNC': Coordinates(13.9378, 75.5715),
    'Sheshadri Puram': Coordinates(13.9448, 75.5655),
    'Bommanakatte': Coordinates(13.9325, 75.5798),
    'Savalanga Road': Coordinates(13.9365, 75.5602),
    'Gurupura': Coordinates(13.9352, 75.5688),
    'Tank Moholla': Coordinates(13.9308, 75.5658),
    'Gandhi Nagara': Coordinates(13.9255, 75.5748),
    'Nehru Stadium': Coordinates(13.9385, 75.5620),
    'Karnataka Sangha': Coordinates(13.9292, 75.5712),
    'Church': Coordinates(13.9305, 75.5685),
    'Meenakshi Bhavana': Coordinates(13.9322, 75.5665),
    'Harige': Coordinates(13.9368, 75.5755),
    'Kashipura': Coordinates(13.9282, 75.5815),
    'Lakshmi Talkies': Coordinates(13.9225, 75.5742),
    'Nehru Road': Coordinates(13.9310, 75.5675),
    'Jail Road': Coordinates(13.9340, 75.5640),
    'Court Circle': Coordinates(13.9375, 75.5630),
    'Meghan Hospital': Coordinates(13.9308, 75.5688),
    'Town Hall': Coordinates(13.9295, 75.5678),
    'Kote Area': Coordinates(13.9285, 75.5665),
    'PG Hospital': Coordinates(13.9315, 75.5710),
    'Tunga College': Coordinates(13.9355, 75.5695),
})


def lookup_coordinates(name: str) -> Coordinates:
    """
    Get the coordinates of a stop by exact, case-sensitive name.

    Args:
        name: Stop name as shown to riders

    Returns:
        Stored coordinates, or DEFAULT_COORDINATES when the name is unknown
    """
    return _STOP_COORDINATES.get(name, DEFAULT_COORDINATES)


def is_known_stop(name: str) -> bool:
    return name in _STOP_COORDINATES


def all_stop_names() -> List[str]:
    """Registered stop names in registry order."""
    return list(_STOP_COORDINATES)


def nearest_stop(lat: float, lng: float) -> Tuple[str, float]:
    """
    Find the registered stop closest to a device position.

    Args:
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees

    Returns:
        Tuple of (stop name, distance in kilometers)
    """
    best_name = None
    best_distance = float('inf')
    for name, coords in _STOP_COORDINATES.items():
        distance = haversine_distance(lat, lng, coords.lat, coords.lng, unit="kilometers")
        if distance < best_distance:
            best_name, best_distance = name, distance
    return best_name, best_distance
