"""
System status endpoint handlers.
Reports service health with fleet, registry and session counts.
"""

import logging
from datetime import datetime, timezone

from database_connector import DatabaseConnector, DatabaseError
from models.pydantic_models import SystemHealth
from transit_data.locations import all_stop_names
from transit_data.routes import route_pairs
from utils.caching import get_cache_stats

logger = logging.getLogger(__name__)


def get_system_health(db: DatabaseConnector, open_sessions: int = 0) -> SystemHealth:
    """
    Get overall service health.

    Args:
        db: Database connector instance
        open_sessions: Number of live tracking sessions

    Returns:
        SystemHealth; "degraded" when the bus store cannot be queried
    """
    try:
        buses = int(db.execute("SELECT COUNT(*) FROM buses")[0][0])
        status = "operational" if buses > 0 else "degraded"
    except DatabaseError as e:
        # Report degraded status if we can't reach the store
        logger.warning(f"Health check could not query buses: {e}")
        buses = 0
        status = "degraded"

    return SystemHealth(
        status=status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        buses=buses,
        stops=len(all_stop_names()),
        routes=len(route_pairs()),
        open_tracking_sessions=open_sessions,
        cache=get_cache_stats()
    )
