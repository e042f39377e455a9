import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from keeper.api.dependencies import get_app_state, get_format_handler
from keeper.api.routes.metrics import REPOSITORY_REQUESTS
from keeper.api.state import AppState
from keeper.domain.models import RepoRequest
from keeper.formats import FormatHandler

logger = logging.getLogger(__name__)


router = APIRouter()

# Every method reaches the handler so it can answer 405 itself
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route(
    "/{format_key}/{repo_key}/{path:path}",
    methods=ALL_METHODS,
    response_model=None,
)
async def repository_request(
    format_key: str,
    repo_key: str,
    path: str,
    request: Request,
    handler: Annotated[FormatHandler, Depends(get_format_handler)],
    state: Annotated[AppState, Depends(get_app_state)],
) -> Response:
    """
    Native client protocol endpoint for a repository.

    The request is handed to the format handler stripped of the
    ``/repositories/{format_key}/{repo_key}`` prefix, e.g. a pip request for
    ``/repositories/pypi/main/simple/requests/`` is routed as
    ``/simple/requests/``.
    """
    if not handler.supports_routing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Format {format_key} does not serve repository requests",
        )

    artifacts = await state.repository.list_artifacts(format_key, repo_key)
    repo_request = RepoRequest(
        method=request.method,
        path=f"/{path}",
        query=dict(request.query_params),
        headers=dict(request.headers),
        body=await request.body(),
    )

    result = handler.handle_request(
        repo_request, state.repo_context(format_key, repo_key), artifacts
    )
    REPOSITORY_REQUESTS.labels(format=format_key, status=str(result.status)).inc()

    return Response(
        content=result.body,
        status_code=result.status,
        headers=result.headers,
    )
