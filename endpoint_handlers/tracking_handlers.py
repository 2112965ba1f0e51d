import logging
from typing import Optional

from database_connector import DatabaseConnector, DatabaseError
from endpoint_handlers.bus_handlers import fetch_bus
from models.pydantic_models import (
    Position, StopProgress, TrackingSessionRequest, TrackingSnapshot
)
from transit_data.locations import lookup_coordinates
from utils.error_handling import error_handler, ErrorCode
from utils.progress_simulator import (
    TICK_PROFILES, TripProgress, interpolate_position, parse_duration_minutes,
    progress_at, stop_thresholds
)
from utils.route_resolver import resolve
from utils.tracking_sessions import SessionLimitError, TrackingSession, TrackingSessionManager
from utils.validation import validate_stop_name

logger = logging.getLogger(__name__)


def build_snapshot(
    progress: TripProgress,
    session: Optional[TrackingSession] = None,
    bus_id: Optional[str] = None
) -> TrackingSnapshot:
    """
    Render a trip snapshot for the tracking view.

    Args:
        progress: Current trip progress
        session: Live session the progress belongs to, if any
        bus_id: Bus being tracked, if any

    Returns:
        TrackingSnapshot with per-stop thresholds and the marker position
    """
    percent = progress.percent_complete
    stops = [
        StopProgress(name=name, threshold_percent=threshold, passed=percent >= threshold)
        for name, threshold in stop_thresholds(progress.path)
    ]
    position = interpolate_position(
        lookup_coordinates(progress.origin),
        lookup_coordinates(progress.destination),
        percent
    )

    return TrackingSnapshot(
        session_id=session.session_id if session else None,
        bus_id=session.bus_id if session else bus_id,
        from_stop=progress.origin,
        to_stop=progress.destination,
        path=list(progress.path),
        stops=stops,
        percent_complete=percent,
        location_label=progress.location_label,
        eta=progress.eta_label,
        status=progress.status.value,
        position=Position(lat=position.lat, lng=position.lng),
        total_minutes=progress.total_minutes,
        ticks=session.ticks if session else 0,
        running=session.is_running if session else False
    )


def _validated_stops(from_stop: str, to_stop: str):
    try:
        from_stop = validate_stop_name(from_stop, "from")
    except ValueError as e:
        error_handler.handle_validation_error("from", from_stop, str(e))
    try:
        to_stop = validate_stop_name(to_stop, "to")
    except ValueError as e:
        error_handler.handle_validation_error("to", to_stop, str(e))
    return from_stop, to_stop


def preview_progress_handler(
    from_stop: str,
    to_stop: str,
    percent: int,
    duration: Optional[str] = None
) -> TrackingSnapshot:
    """
    Snapshot of a trip at a given completion, without opening a session.
    """
    from_stop, to_stop = _validated_stops(from_stop, to_stop)
    path = resolve(from_stop, to_stop)
    progress = progress_at(path, percent, parse_duration_minutes(duration))
    return build_snapshot(progress)


def open_session_handler(
    manager: TrackingSessionManager,
    db: DatabaseConnector,
    request: TrackingSessionRequest,
    default_profile: str = "map"
) -> TrackingSnapshot:
    """
    Start a live tracking session for a trip.

    The trip length comes from the bus's duration estimate when a bus is
    given, otherwise from the request's duration.

    Args:
        manager: Session registry owned by the application
        db: Database connector instance
        request: Trip endpoints, optional bus and tick profile
        default_profile: Profile used when the request names none

    Returns:
        Initial TrackingSnapshot of the new session
    """
    from_stop, to_stop = _validated_stops(request.from_stop, request.to_stop)

    duration = request.duration
    if request.bus_id:
        try:
            duration = fetch_bus(db, request.bus_id).duration
        except DatabaseError as e:
            error_handler.handle_database_error("tracking bus lookup", e)

    profile = request.profile or default_profile
    config = TICK_PROFILES.get(profile)
    if config is None:
        error_handler.handle_validation_error(
            "profile", profile, f"must be one of: {', '.join(TICK_PROFILES)}",
            code=ErrorCode.PARAMETER_OUT_OF_RANGE
        )

    try:
        session = manager.open(
            resolve(from_stop, to_stop),
            parse_duration_minutes(duration),
            config,
            bus_id=request.bus_id
        )
    except SessionLimitError:
        logger.warning(f"Tracking session limit of {manager.max_sessions} reached")
        error_handler.handle_session_limit(manager.max_sessions)

    return build_snapshot(session.progress, session)


def get_session_handler(manager: TrackingSessionManager, session_id: str) -> TrackingSnapshot:
    session = manager.get(session_id)
    if session is None:
        error_handler.handle_not_found("session", session_id)
    return build_snapshot(session.progress, session)


async def close_session_handler(manager: TrackingSessionManager, session_id: str) -> TrackingSnapshot:
    """
    Stop a session's timer and return its final snapshot.
    """
    session = manager.get(session_id)
    if session is None:
        error_handler.handle_not_found("session", session_id)
    await manager.close(session_id)
    return build_snapshot(session.progress, session)
