import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from keeper.api.dependencies import get_app_state
from keeper.api.state import AppState

logger = logging.getLogger(__name__)


router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    formats: list[str]


@router.get("/")
async def health_check(
    state: Annotated[AppState, Depends(get_app_state)],
) -> HealthResponse:
    """
    Health check endpoint reporting the enabled package formats.
    """
    logger.debug("Running health check")

    return HealthResponse(
        status="healthy",
        version=state.settings.app.version,
        environment=state.settings.server.environment,
        formats=state.formats,
    )
