from fastapi import APIRouter, Depends

from database_connector import get_db, DatabaseConnector
from endpoint_handlers.assistant_handlers import assistant_handler
from models.pydantic_models import AssistantRequest, AssistantResponse

assistant_routes = APIRouter(prefix="/assistant", tags=["assistant"])


@assistant_routes.post("", response_model=AssistantResponse)
def ask_assistant(request: AssistantRequest, db: DatabaseConnector = Depends(get_db)):
    """
    Answer a free-text question about buses, timings, fares, crowds or tracking.
    """
    return assistant_handler(db, request.message)
