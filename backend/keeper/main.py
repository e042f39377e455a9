import logging
import sys

import uvicorn

from keeper.core.config import get_settings


def main() -> None:
    """Run the application."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.server.debug else logging.INFO

    # Verbose logging format with line numbers
    log_format = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

    logging.basicConfig(level=log_level, format=log_format, stream=sys.stdout)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting {settings.app.name} v{settings.app.version}")
    logger.info(f"Environment: {settings.server.environment}")
    logger.info(f"Debug mode: {settings.server.debug}")
    logger.info(f"Host: {settings.server.host}:{settings.server.port}")
    logger.info(f"Public URL: {settings.repository.public_url}")
    logger.info(f"Download URL: {settings.repository.download_url}")

    uvicorn.run(
        "keeper.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.debug,
        workers=settings.server.workers,
        log_level="debug" if settings.server.debug else "info",
    )


if __name__ == "__main__":
    main()
