from abc import ABC, abstractmethod

from keeper.domain.models import Metadata


class ArtifactRepository(ABC):
    """
    Repository interface for the artifact catalog.

    The catalog is owned by the host; format handlers only ever receive
    the list it returns.
    """

    @abstractmethod
    async def list_artifacts(self, format_key: str, repo_key: str) -> list[Metadata]:
        """Get every artifact stored in a repository."""
        pass

    @abstractmethod
    async def add_artifact(
        self, format_key: str, repo_key: str, metadata: Metadata
    ) -> Metadata:
        """Record an artifact, replacing any entry with the same path."""
        pass
