from keeper.repos.interfaces import ArtifactRepository
from keeper.repos.memory import InMemoryArtifactRepository

__all__ = ["ArtifactRepository", "InMemoryArtifactRepository"]
