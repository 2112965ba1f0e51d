"""
Simulated trip progress for live tracking views.

Progress is a completion percentage advanced by a fixed increment on every
tick. Everything shown to the rider (current location, ETA, crowd level) is
derived from that percentage, the resolved stop path and the bus data.
All functions here are pure; scheduling lives in utils.tracking_sessions.
"""

import math
import random
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from transit_data.locations import Coordinates
from utils.geospatial import interpolate_point

# Used when a bus duration string cannot be parsed (3.5 hours)
DEFAULT_TRIP_MINUTES = 210
DEFAULT_CAPACITY = 50

DEPARTING_BELOW = 20
APPROACHING_FROM = 80


@dataclass(frozen=True)
class TickConfig:
    """How often a tracking view ticks and how far each tick moves the bus."""
    interval_seconds: float
    increment: int


# Map view of a selected bus: short city trips
MAP_VIEW = TickConfig(interval_seconds=1.0, increment=3)
# Tracker opened from a confirmed booking
BOOKING_VIEW = TickConfig(interval_seconds=3.0, increment=2)

TICK_PROFILES: Dict[str, TickConfig] = {
    "map": MAP_VIEW,
    "booking": BOOKING_VIEW,
}


class TripStatus(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in-progress"
    ARRIVED = "arrived"


@dataclass(frozen=True)
class TripProgress:
    """Snapshot of one simulated trip. Each tick produces a new snapshot."""
    path: Tuple[str, ...]
    total_minutes: int
    percent_complete: int
    location_label: str
    eta_label: str
    status: TripStatus

    @property
    def origin(self) -> str:
        return self.path[0]

    @property
    def destination(self) -> str:
        return self.path[-1]


@dataclass(frozen=True)
class CrowdLevel:
    level: str
    color: str
    background: str
    occupancy_percent: float


def clamp_percent(percent: float) -> int:
    return int(min(100, max(0, percent)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def status_for(percent: int) -> TripStatus:
    if percent >= 100:
        return TripStatus.ARRIVED
    if percent <= 0:
        return TripStatus.IDLE
    return TripStatus.IN_PROGRESS


def stop_thresholds(path: Sequence[str]) -> List[Tuple[str, int]]:
    """
    Spread the intermediate stops of a path evenly over 0..100.

    Args:
        path: Ordered stop names including both endpoints

    Returns:
        (stop name, percent threshold) for every intermediate stop in path order
    """
    segments = len(path) - 1
    if segments < 2:
        return []
    return [
        (name, _round_half_up(index * 100 / segments))
        for index, name in enumerate(path[1:-1], start=1)
    ]


def location_label(path: Sequence[str], previous_percent: int, percent: int) -> str:
    """
    Human readable location for a bus that just moved from previous_percent to percent.

    Args:
        path: Ordered stop names including both endpoints
        previous_percent: Completion before the tick
        percent: Completion after the tick

    Returns:
        Destination name on arrival, "At {stop}" when a stop was passed during
        the tick, otherwise a departing / approaching / en route label
    """
    previous_percent = clamp_percent(previous_percent)
    percent = clamp_percent(percent)
    origin, destination = path[0], path[-1]

    if percent >= 100:
        return destination

    for name, threshold in stop_thresholds(path):
        if previous_percent < threshold <= percent:
            return f"At {name}"

    if percent < DEPARTING_BELOW:
        return f"Departing from {origin}"
    if percent >= APPROACHING_FROM:
        return f"Approaching {destination}"
    return "En route"


_DURATION_PATTERN = re.compile(r'^\s*(?:(\d+)\s*h)?\s*(?:(\d+)\s*m)?\s*$', re.IGNORECASE)


def parse_duration_minutes(duration: Optional[str], default: int = DEFAULT_TRIP_MINUTES) -> int:
    """
    Parse a bus duration estimate such as "15m", "3h 30m" or "4h".

    Args:
        duration: Duration text from the bus listing
        default: Minutes to assume when the text is missing or unparseable

    Returns:
        Total trip minutes
    """
    if not duration:
        return default

    match = _DURATION_PATTERN.match(duration)
    if not match or not any(match.groups()):
        return default

    hours, minutes = match.groups()
    total = int(hours or 0) * 60 + int(minutes or 0)
    return total if total > 0 else default


def remaining_minutes(percent: int, total_minutes: int) -> int:
    percent = clamp_percent(percent)
    return _round_half_up((100 - percent) / 100 * total_minutes)


def eta_label(percent: int, total_minutes: int) -> str:
    """
    Render the remaining trip time.

    Returns:
        "Arrived" at 100%, "Less than 1 min" when under a minute remains,
        "N min(s)" below an hour, otherwise "Hh Mm"
    """
    if clamp_percent(percent) >= 100:
        return "Arrived"

    remaining = remaining_minutes(percent, total_minutes)
    if remaining == 0:
        return "Less than 1 min"
    if remaining < 60:
        return f"{remaining} min" if remaining == 1 else f"{remaining} mins"

    hours, mins = divmod(remaining, 60)
    return f"{hours}h {mins}m"


def start_trip(path: Sequence[str], total_minutes: int = DEFAULT_TRIP_MINUTES) -> TripProgress:
    """Progress for a view that has just opened: 0%, at the origin."""
    path = tuple(path)
    return TripProgress(
        path=path,
        total_minutes=total_minutes,
        percent_complete=0,
        location_label=location_label(path, 0, 0),
        eta_label=eta_label(0, total_minutes),
        status=TripStatus.IDLE,
    )


def progress_at(path: Sequence[str], percent: int, total_minutes: int = DEFAULT_TRIP_MINUTES,
                previous_percent: Optional[int] = None) -> TripProgress:
    """Snapshot for an arbitrary percentage, used for previews."""
    path = tuple(path)
    percent = clamp_percent(percent)
    previous = percent if previous_percent is None else clamp_percent(previous_percent)
    return TripProgress(
        path=path,
        total_minutes=total_minutes,
        percent_complete=percent,
        location_label=location_label(path, previous, percent),
        eta_label=eta_label(percent, total_minutes),
        status=status_for(percent),
    )


def advance(progress: TripProgress, ticks: int = 1, config: TickConfig = MAP_VIEW) -> TripProgress:
    """
    Apply elapsed ticks to a trip.

    Args:
        progress: Current snapshot
        ticks: Number of elapsed ticks; negative values are treated as zero
        config: Tick profile supplying the per-tick increment

    Returns:
        New snapshot; an arrived trip is returned unchanged
    """
    if progress.status is TripStatus.ARRIVED or ticks <= 0:
        return progress

    percent = clamp_percent(progress.percent_complete + config.increment * ticks)
    return replace(
        progress,
        percent_complete=percent,
        location_label=location_label(progress.path, progress.percent_complete, percent),
        eta_label=eta_label(percent, progress.total_minutes),
        status=status_for(percent),
    )


def interpolate_position(origin: Coordinates, destination: Coordinates, percent: int) -> Coordinates:
    """Bus marker position, linearly between the two endpoint coordinates."""
    lat, lng = interpolate_point(
        (origin.lat, origin.lng),
        (destination.lat, destination.lng),
        clamp_percent(percent) / 100,
    )
    return Coordinates(lat, lng)


def occupancy_percent(available_seats: int, capacity: int = DEFAULT_CAPACITY) -> float:
    available_seats = min(capacity, max(0, available_seats))
    return (capacity - available_seats) / capacity * 100


def crowd_level(available_seats: int, capacity: int = DEFAULT_CAPACITY) -> CrowdLevel:
    """
    Bucket the current occupancy of a bus.

    Args:
        available_seats: Seats still free
        capacity: Total seats on the bus

    Returns:
        CrowdLevel with Low (<30%), Medium (<60%) or High occupancy
    """
    occupancy = occupancy_percent(available_seats, capacity)
    if occupancy < 30:
        return CrowdLevel("Low", "green", "green-50", occupancy)
    if occupancy < 60:
        return CrowdLevel("Medium", "yellow", "yellow-50", occupancy)
    return CrowdLevel("High", "red", "red-50", occupancy)


def onboard_estimate(available_seats: int, capacity: int = DEFAULT_CAPACITY,
                     rng: Optional[random.Random] = None) -> int:
    """Passengers on board: booked seats plus up to four walk-ins."""
    rng = rng or random.Random()
    booked = capacity - min(capacity, max(0, available_seats))
    return booked + rng.randint(0, 4)
