from fastapi import FastAPI

from keeper.api.routes.health import router as health_router
from keeper.api.routes.metrics import router as metrics_router
from keeper.api.routes.v1.artifacts import router as artifacts_v1_router
from keeper.api.routes.v1.repository import router as repository_v1_router


def setup_routes(app: FastAPI) -> None:
    """Configure all API routes."""
    # Health and metrics endpoints (no versioning)
    app.include_router(health_router, prefix="/health", tags=["health"])
    app.include_router(metrics_router, prefix="/metrics", tags=["metrics"])

    # Native repository protocols, addressed the way package clients expect
    app.include_router(
        repository_v1_router,
        prefix="/repositories",
        tags=["repositories", "v1"],
    )
    app.include_router(
        artifacts_v1_router,
        prefix="/api/v1",
        tags=["artifacts", "v1"],
    )
