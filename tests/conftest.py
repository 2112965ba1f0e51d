import pytest
from fastapi.testclient import TestClient

from config import Settings
from database_connector import DatabaseConnector
from main import create_app


@pytest.fixture
def settings():
    return Settings(
        fleet_simulation_enabled=False,
        payment_delay_seconds=0,
        max_tracking_sessions=5,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    connector = DatabaseConnector(":memory:")
    connector.connect()
    yield connector
    connector.close()
