import asyncio
import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, load_settings
from database_connector import DatabaseConnector, DatabaseError, close_db, init_db
from endpoint_handlers.bus_handlers import simulate_fleet_tick
from endpoints.assistant import assistant_routes
from endpoints.bookings import booking_routes
from endpoints.buses import bus_routes
from endpoints.routes import route_routes
from endpoints.seats import seat_routes
from endpoints.stops import stop_routes
from endpoints.system import router as system_routes
from endpoints.tracking import tracking_routes
from utils.error_handling import (
    error_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler
)
from utils.request_logging import add_request_logging
from utils.tracking_sessions import TrackingSessionManager

logger = logging.getLogger(__name__)


async def run_fleet_simulation(db: DatabaseConnector, settings: Settings, rng: random.Random):
    """Move the fleet every few seconds until cancelled."""
    logger.info(f"Fleet simulation running every {settings.fleet_update_interval_seconds}s")
    while True:
        await asyncio.sleep(settings.fleet_update_interval_seconds)
        try:
            simulate_fleet_tick(db, rng, settings.fleet_delay_probability)
        except DatabaseError as e:
            logger.error(f"Fleet simulation tick failed: {e}")
        except Exception as e:
            logger.error(f"Unexpected fleet simulation error: {e}", exc_info=True)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = init_db(settings.db_path)
        error_handler.include_debug_info = settings.include_debug_info

        fleet_task = None
        if settings.fleet_simulation_enabled:
            fleet_task = asyncio.create_task(run_fleet_simulation(db, settings, random.Random()))

        logger.info(f"SUKHA YATRA API started with store at {settings.db_path}")
        try:
            yield
        finally:
            closed = await app.state.tracking_sessions.close_all()
            if closed:
                logger.info(f"Closed {closed} tracking sessions")
            if fleet_task is not None:
                fleet_task.cancel()
                try:
                    await fleet_task
                except asyncio.CancelledError:
                    pass
            close_db()
            logger.info("SUKHA YATRA API stopped")

    app = FastAPI(
        title="SUKHA YATRA",
        description="Shivamogga city bus search, booking and live tracking",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.tracking_sessions = TrackingSessionManager(settings.max_tracking_sessions)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_request_logging(app)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(stop_routes)
    app.include_router(route_routes)
    app.include_router(bus_routes)
    app.include_router(seat_routes)
    app.include_router(booking_routes)
    app.include_router(assistant_routes)
    app.include_router(tracking_routes)
    app.include_router(system_routes)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
