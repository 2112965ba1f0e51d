import pytest

from transit_data.routes import get_route_entry, route_pairs
from utils.route_resolver import (
    SOURCE_DIRECT, SOURCE_FORWARD, SOURCE_REVERSE,
    intermediate_stops, resolve, resolve_with_source, route_coordinates
)
from transit_data.locations import DEFAULT_COORDINATES


def test_forward_entry_gvt_to_jnnc():
    assert resolve("Gvt Bus Stand", "JNNC") == [
        "Gvt Bus Stand", "Market", "Church", "Gurupura", "Vinoba Nagara", "JNNC"
    ]
    assert intermediate_stops("Gvt Bus Stand", "JNNC") == [
        "Market", "Church", "Gurupura", "Vinoba Nagara"
    ]


def test_stored_entry_used_when_both_directions_registered():
    path, source = resolve_with_source("JNNC", "Gvt Bus Stand")
    assert source == SOURCE_FORWARD
    assert path == list(get_route_entry("JNNC", "Gvt Bus Stand"))
    assert path == ["JNNC", "Vinoba Nagara", "Gurupura", "Church", "Market", "Gvt Bus Stand"]


def test_reverse_entry_is_reversed():
    assert get_route_entry("Circuit House", "Gvt Bus Stand") is None
    path, source = resolve_with_source("Circuit House", "Gvt Bus Stand")
    assert source == SOURCE_REVERSE
    assert path == ["Circuit House", "Meghan Hospital", "Gvt Bus Stand"]


def test_reverse_does_not_mutate_stored_entry():
    before = get_route_entry("Circuit House", "Market")
    resolve("Market", "Circuit House")
    assert get_route_entry("Circuit House", "Market") == before
    assert resolve("Circuit House", "Market") == list(before)


@pytest.mark.parametrize("from_stop,to_stop", [
    ("Nowhere", "Elsewhere"),
    ("Gvt Bus Stand", "Nowhere"),
    ("Circuit House", "APMC"),
    ("", ""),
])
def test_unregistered_pairs_fall_back_to_direct_path(from_stop, to_stop):
    path, source = resolve_with_source(from_stop, to_stop)
    assert source == SOURCE_DIRECT
    assert path == [from_stop, to_stop]
    assert intermediate_stops(from_stop, to_stop) == []


@pytest.mark.parametrize("from_stop,to_stop", route_pairs())
def test_stored_paths_start_and_end_at_their_key(from_stop, to_stop):
    path = get_route_entry(from_stop, to_stop)
    assert len(path) >= 2
    assert path[0] == from_stop
    assert path[-1] == to_stop
    assert all(a != b for a, b in zip(path, path[1:]))


@pytest.mark.parametrize("from_stop,to_stop", route_pairs())
def test_every_registered_pair_resolves_both_ways(from_stop, to_stop):
    forward = resolve(from_stop, to_stop)
    assert forward == list(get_route_entry(from_stop, to_stop))

    backward = resolve(to_stop, from_stop)
    assert backward[0] == to_stop
    assert backward[-1] == from_stop
    assert len(intermediate_stops(to_stop, from_stop)) == len(backward) - 2


def test_route_coordinates_use_fallback_for_unknown_names():
    stops = route_coordinates("Atlantis", "Market")
    assert [name for name, _ in stops] == ["Atlantis", "Market"]
    assert stops[0][1] == DEFAULT_COORDINATES
