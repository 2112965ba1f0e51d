import asyncio
import random

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

import main
from config import Settings, load_settings
from utils.caching import cached
from utils.error_handling import ErrorCode, error_handler


def test_settings_defaults(monkeypatch):
    for name in ("DB_PATH", "LOG_LEVEL", "FLEET_SIMULATION", "PAYMENT_DELAY", "CORS_ORIGINS"):
        monkeypatch.delenv(f"SUKHA_YATRA_{name}", raising=False)
    settings = load_settings()
    assert settings.db_path == ":memory:"
    assert settings.log_level == "INFO"
    assert settings.fleet_simulation_enabled is True
    assert settings.payment_delay_seconds == 2.0
    assert settings.cors_origins == ["*"]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SUKHA_YATRA_DB_PATH", "/tmp/buses.duckdb")
    monkeypatch.setenv("SUKHA_YATRA_LOG_LEVEL", "debug")
    monkeypatch.setenv("SUKHA_YATRA_FLEET_SIMULATION", "off")
    monkeypatch.setenv("SUKHA_YATRA_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("SUKHA_YATRA_TRACKING_PROFILE", "booking")
    settings = load_settings()
    assert settings.db_path == "/tmp/buses.duckdb"
    assert settings.log_level == "DEBUG"
    assert settings.fleet_simulation_enabled is False
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.default_tracking_profile == "booking"


def test_not_found_error_body():
    with pytest.raises(HTTPException) as exc_info:
        error_handler.handle_not_found("bus", "42")
    assert exc_info.value.status_code == 404
    error = exc_info.value.detail["error"]
    assert error["code"] == ErrorCode.BUS_NOT_FOUND
    assert error["message"] == "Bus with ID '42' not found"


def test_conflict_error_status():
    with pytest.raises(HTTPException) as exc_info:
        error_handler.handle_conflict(ErrorCode.SEAT_UNAVAILABLE, "taken")
    assert exc_info.value.status_code == 409


def test_cached_returns_stored_result():
    calls = []

    @cached(ttl=60)
    def lookup(value):
        calls.append(value)
        return [value]

    assert lookup("x") == ["x"]
    assert lookup("x") == ["x"]
    assert calls == ["x"]


def test_fleet_simulation_survives_failing_tick(monkeypatch):
    calls = []

    def failing_tick(db, rng, delay_probability):
        calls.append(delay_probability)
        raise RuntimeError("bad tick")

    monkeypatch.setattr(main, "simulate_fleet_tick", failing_tick)
    settings = Settings(fleet_update_interval_seconds=0.001)

    async def scenario():
        task = asyncio.create_task(main.run_fleet_simulation(None, settings, random.Random(1)))
        for _ in range(200):
            if len(calls) >= 3:
                break
            await asyncio.sleep(0.005)
        survived = not task.done()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return survived

    assert asyncio.run(scenario())
    assert len(calls) >= 3


def test_app_keeps_one_session_manager(settings):
    app = main.create_app(settings)
    manager = app.state.tracking_sessions
    with TestClient(app):
        assert app.state.tracking_sessions is manager
    assert manager.max_sessions == 5
