import asyncio

import pytest

from utils.progress_simulator import TickConfig, TripStatus, start_trip
from utils.route_resolver import resolve
from utils.tracking_sessions import SessionLimitError, TrackingSession, TrackingSessionManager

FAST = TickConfig(interval_seconds=0.01, increment=3)
PATH = resolve("Market", "JNNC")


def test_stop_prevents_further_ticks():
    async def scenario():
        session = TrackingSession(start_trip(PATH, 10), FAST)
        session.start()
        await asyncio.sleep(0.05)
        await session.stop()
        frozen, ticks = session.progress, session.ticks
        await asyncio.sleep(0.05)
        return session, frozen, ticks

    session, frozen, ticks = asyncio.run(scenario())
    assert ticks >= 1
    assert not session.is_running
    assert session.progress == frozen
    assert session.ticks == ticks


def test_session_ends_itself_on_arrival():
    async def scenario():
        session = TrackingSession(start_trip(PATH, 10), TickConfig(interval_seconds=0.001, increment=50))
        session.start()
        for _ in range(200):
            if not session.is_running:
                break
            await asyncio.sleep(0.005)
        return session

    session = asyncio.run(scenario())
    assert session.progress.status is TripStatus.ARRIVED
    assert session.progress.location_label == "JNNC"
    assert session.ticks == 2
    assert not session.is_running


def test_manual_tick_and_callback():
    seen = []
    session = TrackingSession(start_trip(PATH, 10), FAST, on_tick=seen.append)
    session.tick(3)
    assert session.progress.percent_complete == 9
    assert session.ticks == 3
    assert seen == [session.progress]


def test_stop_without_start_is_harmless():
    session = TrackingSession(start_trip(PATH, 10), FAST)
    asyncio.run(session.stop())
    assert not session.is_running


def test_sessions_are_independent():
    async def scenario():
        manager = TrackingSessionManager()
        first = manager.open(PATH, 10, FAST)
        second = manager.open(resolve("Gopala", "APMC"), 15, FAST)
        await manager.close(first.session_id)
        stopped_at = first.progress.percent_complete
        await asyncio.sleep(0.05)
        result = (first.progress.percent_complete, stopped_at, second.is_running, len(manager))
        await manager.close_all()
        return result

    first_percent, stopped_at, second_running, open_count = asyncio.run(scenario())
    assert first_percent == stopped_at
    assert second_running
    assert open_count == 1


def test_manager_enforces_session_limit():
    async def scenario():
        manager = TrackingSessionManager(max_sessions=1)
        session = manager.open(PATH, 10, FAST)
        with pytest.raises(SessionLimitError):
            manager.open(PATH, 10, FAST)
        assert manager.get(session.session_id) is session
        closed = await manager.close_all()
        return manager, closed

    manager, closed = asyncio.run(scenario())
    assert closed == 1
    assert len(manager) == 0


def test_close_unknown_session():
    manager = TrackingSessionManager()
    assert asyncio.run(manager.close("missing")) is False


def test_arrived_sessions_free_their_slot():
    async def scenario():
        manager = TrackingSessionManager(max_sessions=2)
        arriving = TickConfig(interval_seconds=0.001, increment=100)
        first = manager.open(PATH, 10, arriving)
        second = manager.open(PATH, 10, arriving)
        for _ in range(200):
            if not manager.running_count():
                break
            await asyncio.sleep(0.005)

        finished = (manager.running_count(), manager.get(first.session_id) is first)
        third = manager.open(PATH, 10, FAST)
        result = finished + (
            third.is_running,
            manager.get(first.session_id),
            manager.get(second.session_id) is second,
            len(manager),
        )
        await manager.close_all()
        return result

    running, first_readable, third_running, first_after, second_kept, stored = asyncio.run(scenario())
    assert running == 0
    assert first_readable
    assert third_running
    assert first_after is None
    assert second_kept
    assert stored == 2
