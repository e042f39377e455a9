from fastapi import Depends, HTTPException, Request, status

from keeper.api.state import AppState
from keeper.formats import FormatHandler, get_handler
from keeper.repos.interfaces import ArtifactRepository


def get_app_state(request: Request) -> AppState:
    return request.app.state.state


def get_artifact_repository(
    state: AppState = Depends(get_app_state),
) -> ArtifactRepository:
    return state.repository


def get_format_handler(
    format_key: str, state: AppState = Depends(get_app_state)
) -> FormatHandler:
    """Resolve the ``format_key`` path parameter to an enabled handler."""
    if not state.is_enabled(format_key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown package format: {format_key}",
        )
    return get_handler(format_key)
