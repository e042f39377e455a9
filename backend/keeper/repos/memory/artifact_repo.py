import logging

from keeper.domain.models import Metadata
from keeper.repos.interfaces import ArtifactRepository

logger = logging.getLogger(__name__)


class InMemoryArtifactRepository(ArtifactRepository):
    """Artifact catalog held in process memory, keyed by format and repository."""

    def __init__(self) -> None:
        self._artifacts: dict[tuple[str, str], dict[str, Metadata]] = {}

    async def list_artifacts(self, format_key: str, repo_key: str) -> list[Metadata]:
        return list(self._artifacts.get((format_key, repo_key), {}).values())

    async def add_artifact(
        self, format_key: str, repo_key: str, metadata: Metadata
    ) -> Metadata:
        repo = self._artifacts.setdefault((format_key, repo_key), {})
        if metadata.path in repo:
            logger.info(f"Replacing {metadata.path} in {format_key}/{repo_key}")
        repo[metadata.path] = metadata
        return metadata
