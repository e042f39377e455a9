from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest
from starlette.responses import Response

router = APIRouter()

REPOSITORY_REQUESTS = Counter(
    "keeper_repository_requests_total",
    "Repository protocol requests answered, by format and status code",
    ["format", "status"],
)

VALIDATION_FAILURES = Counter(
    "keeper_validation_failures_total",
    "Artifacts rejected by a format handler, by format and error code",
    ["format", "code"],
)


@router.get("/")
async def metrics() -> Response:
    """
    Metrics endpoint that returns Prometheus metrics.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
