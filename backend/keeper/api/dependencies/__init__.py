from keeper.api.dependencies.services import (
    get_app_state,
    get_artifact_repository,
    get_format_handler,
)

__all__ = [
    "get_app_state",
    "get_artifact_repository",
    "get_format_handler",
]
