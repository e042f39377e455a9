import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from keeper.api.dependencies import get_artifact_repository, get_format_handler
from keeper.api.routes.metrics import VALIDATION_FAILURES
from keeper.api.routes.v1.artifacts.models import IndexListing
from keeper.domain.errors import FormatError
from keeper.domain.models import Metadata
from keeper.formats import FormatHandler
from keeper.repos.interfaces import ArtifactRepository

logger = logging.getLogger(__name__)


router = APIRouter()

DOCUMENT_MEDIA_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".json": "application/json",
    ".xml": "application/xml",
}


@router.post("/{format_key}/inspect")
async def inspect_artifact(
    format_key: str,
    request: Request,
    handler: Annotated[FormatHandler, Depends(get_format_handler)],
    path: str = Query(..., description="Repository-relative artifact path"),
) -> Metadata:
    """
    Validate an uploaded artifact and return the metadata extracted from it.

    The raw request body is the artifact content. Nothing is stored; the
    caller persists the returned metadata once it has computed a checksum.
    """
    data = await request.body()
    try:
        handler.validate(path, data)
    except FormatError as err:
        VALIDATION_FAILURES.labels(format=format_key, code=err.code).inc()
        raise

    metadata = handler.parse_metadata(path, data)
    logger.info(f"Accepted {format_key} artifact {path} ({metadata.size_bytes} bytes)")
    return metadata


async def _generate_documents(
    format_key: str,
    repo_key: str,
    handler: FormatHandler,
    repository: ArtifactRepository,
) -> dict[str, bytes]:
    artifacts = await repository.list_artifacts(format_key, repo_key)
    documents = handler.generate_index(artifacts)
    return dict(documents or [])


@router.get("/{format_key}/{repo_key}/index")
async def list_index_documents(
    format_key: str,
    repo_key: str,
    handler: Annotated[FormatHandler, Depends(get_format_handler)],
    repository: Annotated[ArtifactRepository, Depends(get_artifact_repository)],
) -> IndexListing:
    """List the index documents generated for a repository."""
    documents = await _generate_documents(format_key, repo_key, handler, repository)
    return IndexListing(
        format=format_key, repository=repo_key, documents=list(documents)
    )


@router.get("/{format_key}/{repo_key}/index/{name:path}", response_model=None)
async def get_index_document(
    format_key: str,
    repo_key: str,
    name: str,
    handler: Annotated[FormatHandler, Depends(get_format_handler)],
    repository: Annotated[ArtifactRepository, Depends(get_artifact_repository)],
) -> Response:
    """Return one generated index document, e.g. ``simple/index.html``."""
    documents = await _generate_documents(format_key, repo_key, handler, repository)
    if name not in documents:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Index document {name} not found",
        )

    suffix = "." + name.rsplit(".", 1)[-1] if "." in name else ""
    media_type = DOCUMENT_MEDIA_TYPES.get(suffix, "application/octet-stream")
    return Response(content=documents[name], media_type=media_type)
