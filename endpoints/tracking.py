from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from database_connector import get_db, DatabaseConnector
from endpoint_handlers.tracking_handlers import (
    close_session_handler,
    get_session_handler,
    open_session_handler,
    preview_progress_handler
)
from models.pydantic_models import TrackingSessionRequest, TrackingSnapshot
from utils.caching import get_cache_headers
from utils.tracking_sessions import TrackingSessionManager

tracking_routes = APIRouter(prefix="/tracking", tags=["tracking"])


def get_session_manager(request: Request) -> TrackingSessionManager:
    return request.app.state.tracking_sessions


@tracking_routes.get("/preview", response_model=TrackingSnapshot)
def preview_progress(
    response: Response,
    from_stop: str = Query(..., alias="from", description="Origin stop name"),
    to_stop: str = Query(..., alias="to", description="Destination stop name"),
    percent: int = Query(0, description="Completion percentage; clamped to 0-100"),
    duration: Optional[str] = Query(None, description="Trip duration estimate, e.g. 15m or 3h 30m")
):
    """
    Get the tracking view for a trip at a given completion without starting a session.
    """
    for key, value in get_cache_headers(300).items():
        response.headers[key] = value

    return preview_progress_handler(from_stop, to_stop, percent, duration)


@tracking_routes.post("/sessions", response_model=TrackingSnapshot, status_code=201)
async def open_session(
    http_request: Request,
    request: TrackingSessionRequest,
    manager: TrackingSessionManager = Depends(get_session_manager),
    db: DatabaseConnector = Depends(get_db)
):
    """
    Start simulated live tracking for a trip.

    The bus advances on its own timer until it arrives or the session is closed.
    """
    default_profile = http_request.app.state.settings.default_tracking_profile
    return open_session_handler(manager, db, request, default_profile)


@tracking_routes.get("/sessions/{session_id}", response_model=TrackingSnapshot)
def get_session(
    response: Response,
    session_id: str = Path(..., description="Tracking session identifier"),
    manager: TrackingSessionManager = Depends(get_session_manager)
):
    for key, value in get_cache_headers(None).items():
        response.headers[key] = value

    return get_session_handler(manager, session_id)


@tracking_routes.delete("/sessions/{session_id}", response_model=TrackingSnapshot)
async def close_session(
    session_id: str = Path(..., description="Tracking session identifier"),
    manager: TrackingSessionManager = Depends(get_session_manager)
):
    """
    Close a tracking view. No further ticks are applied once this returns.
    """
    return await close_session_handler(manager, session_id)
