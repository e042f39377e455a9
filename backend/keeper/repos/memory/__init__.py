from keeper.repos.memory.artifact_repo import InMemoryArtifactRepository

__all__ = ["InMemoryArtifactRepository"]
