"""
System status endpoints router.
Provides API endpoints for service health.
"""

from fastapi import APIRouter, Depends, Request, Response

from database_connector import DatabaseConnector, get_db
from endpoint_handlers.system_handlers import get_system_health
from models.pydantic_models import SystemHealth
from utils.caching import get_cache_headers

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health", response_model=SystemHealth)
async def system_health(request: Request, response: Response, db: DatabaseConnector = Depends(get_db)):
    """
    Get overall service health.

    Returns store status, registry sizes, open tracking sessions and cache statistics.
    """
    for key, value in get_cache_headers(None).items():
        response.headers[key] = value

    return get_system_health(db, request.app.state.tracking_sessions.running_count())
