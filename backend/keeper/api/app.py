import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from keeper.api.middleware.errors import register_exception_handlers
from keeper.api.routes.router import setup_routes
from keeper.api.state import AppState
from keeper.core.config import Settings, get_settings
from keeper.repos.interfaces import ArtifactRepository
from keeper.repos.memory import InMemoryArtifactRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, repository: ArtifactRepository | None = None
) -> FastAPI:
    """
    Build the FastAPI application.

    ``repository`` is the host's artifact catalog; an in-memory catalog is
    used when none is given.
    """
    settings = settings or get_settings()
    repository = repository or InMemoryArtifactRepository()

    app = FastAPI(
        title=settings.app.name,
        description=settings.app.description,
        version=settings.app.version,
        docs_url="/docs" if settings.server.debug else None,
        redoc_url="/redoc" if settings.server.debug else None,
    )

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.state = AppState(settings, repository)

    setup_routes(app)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Log all incoming requests and responses."""
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- Status: {response.status_code} "
            f"- Process time: {process_time:.4f}s"
        )

        return response

    return app


app = create_app()
