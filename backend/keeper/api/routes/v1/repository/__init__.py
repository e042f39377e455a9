from keeper.api.routes.v1.repository.endpoints import router

__all__ = ["router"]
