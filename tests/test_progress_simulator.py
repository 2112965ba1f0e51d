import random

import pytest

from transit_data.locations import lookup_coordinates
from utils.progress_simulator import (
    BOOKING_VIEW, MAP_VIEW, TICK_PROFILES, TickConfig, TripStatus,
    advance, clamp_percent, crowd_level, eta_label, interpolate_position,
    location_label, onboard_estimate, parse_duration_minutes, progress_at,
    start_trip, stop_thresholds
)
from utils.route_resolver import resolve

PATH = resolve("Gvt Bus Stand", "JNNC")


def test_tick_profiles():
    assert (MAP_VIEW.interval_seconds, MAP_VIEW.increment) == (1.0, 3)
    assert (BOOKING_VIEW.interval_seconds, BOOKING_VIEW.increment) == (3.0, 2)
    assert TICK_PROFILES["map"] is MAP_VIEW
    assert TICK_PROFILES["booking"] is BOOKING_VIEW


@pytest.mark.parametrize("value,expected", [(-5, 0), (0, 0), (42, 42), (100, 100), (150, 100)])
def test_clamp_percent(value, expected):
    assert clamp_percent(value) == expected


def test_start_trip():
    progress = start_trip(PATH, 10)
    assert progress.percent_complete == 0
    assert progress.status is TripStatus.IDLE
    assert progress.location_label == "Departing from Gvt Bus Stand"
    assert progress.eta_label == "10 mins"
    assert progress.origin == "Gvt Bus Stand"
    assert progress.destination == "JNNC"


@pytest.mark.parametrize("config", [MAP_VIEW, BOOKING_VIEW])
def test_progress_is_monotonic_and_stops_at_100(config):
    progress = start_trip(PATH, 10)
    percents = [progress.percent_complete]
    for _ in range(60):
        progress = advance(progress, config=config)
        percents.append(progress.percent_complete)

    assert percents == sorted(percents)
    assert max(percents) == 100
    assert progress.status is TripStatus.ARRIVED
    assert progress.location_label == "JNNC"
    assert progress.eta_label == "Arrived"


def test_arrived_is_terminal():
    arrived = progress_at(PATH, 100, 10)
    assert advance(arrived, ticks=5) is arrived


def test_non_positive_ticks_change_nothing():
    progress = start_trip(PATH, 10)
    assert advance(progress, ticks=0) is progress
    assert advance(progress, ticks=-3) is progress


def test_advance_applies_elapsed_ticks_at_once():
    progress = advance(start_trip(PATH, 10), ticks=4, config=MAP_VIEW)
    assert progress.percent_complete == 12
    assert progress.status is TripStatus.IN_PROGRESS


def test_stop_thresholds_are_evenly_spread():
    assert stop_thresholds(PATH) == [
        ("Market", 20), ("Church", 40), ("Gurupura", 60), ("Vinoba Nagara", 80)
    ]
    assert stop_thresholds(["A", "B"]) == []


@pytest.mark.parametrize("previous,current,expected", [
    (0, 10, "Departing from Gvt Bus Stand"),
    (18, 21, "At Market"),
    (10, 45, "At Market"),
    (50, 55, "En route"),
    (78, 81, "At Vinoba Nagara"),
    (81, 85, "Approaching JNNC"),
    (95, 100, "JNNC"),
])
def test_location_label(previous, current, expected):
    assert location_label(PATH, previous, current) == expected


def test_location_label_on_direct_path():
    path = ["Atlantis", "Market"]
    assert location_label(path, 0, 3) == "Departing from Atlantis"
    assert location_label(path, 40, 43) == "En route"
    assert location_label(path, 97, 100) == "Market"


@pytest.mark.parametrize("percent,total,expected", [
    (100, 10, "Arrived"),
    (50, 10, "5 mins"),
    (90, 10, "1 min"),
    (99, 10, "Less than 1 min"),
    (50, 5, "3 mins"),
    (0, 210, "3h 30m"),
    (50, 210, "1h 45m"),
    (0, 60, "1h 0m"),
])
def test_eta_label(percent, total, expected):
    assert eta_label(percent, total) == expected


@pytest.mark.parametrize("text,expected", [
    ("15m", 15),
    ("3h 30m", 210),
    ("4h", 240),
    ("1h 5m", 65),
    ("soon", 210),
    ("", 210),
    (None, 210),
    ("0m", 210),
])
def test_parse_duration_minutes(text, expected):
    assert parse_duration_minutes(text) == expected


@pytest.mark.parametrize("available,level", [
    (40, "Low"),
    (25, "Medium"),
    (20, "High"),
    (10, "High"),
    (60, "Low"),
    (-5, "High"),
])
def test_crowd_level(available, level):
    assert crowd_level(available, 50).level == level


def test_crowd_level_display_tokens():
    low = crowd_level(40)
    assert (low.color, low.background) == ("green", "green-50")
    assert low.occupancy_percent == pytest.approx(20.0)
    high = crowd_level(10)
    assert (high.color, high.background) == ("red", "red-50")
    assert high.occupancy_percent == pytest.approx(80.0)


def test_onboard_estimate_is_reproducible_with_seed():
    first = onboard_estimate(15, 50, random.Random(7))
    second = onboard_estimate(15, 50, random.Random(7))
    assert first == second
    assert 35 <= first <= 39


def test_interpolate_position():
    origin = lookup_coordinates("Gvt Bus Stand")
    destination = lookup_coordinates("JNNC")
    assert interpolate_position(origin, destination, 0) == origin
    end = interpolate_position(origin, destination, 100)
    assert end.lat == pytest.approx(destination.lat)
    assert end.lng == pytest.approx(destination.lng)
    midpoint = interpolate_position(origin, destination, 50)
    assert midpoint.lat == pytest.approx((origin.lat + destination.lat) / 2)
    assert midpoint.lng == pytest.approx((origin.lng + destination.lng) / 2)


def test_custom_tick_config():
    progress = advance(start_trip(PATH, 10), config=TickConfig(interval_seconds=0.5, increment=25))
    assert progress.percent_complete == 25
    assert progress.location_label == "At Market"
