from keeper.api.routes.v1.artifacts.endpoints import router

__all__ = ["router"]
