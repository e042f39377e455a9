import logging

from keeper.core.config import Settings
from keeper.domain.models import RepoContext
from keeper.formats import available_formats
from keeper.repos.interfaces import ArtifactRepository

logger = logging.getLogger(__name__)


class AppState:
    """Application state: settings, the artifact catalog and enabled formats."""

    def __init__(self, settings: Settings, repository: ArtifactRepository):
        self.settings = settings
        self.repository = repository

        registered = available_formats()
        enabled = settings.repository.enabled_formats
        if enabled is None:
            self.formats = registered
        else:
            unknown = sorted(set(enabled) - set(registered))
            if unknown:
                logger.warning(f"Ignoring unknown formats in configuration: {unknown}")
            self.formats = [key for key in registered if key in enabled]

        logger.info(f"Enabled formats: {', '.join(self.formats)}")

    def is_enabled(self, format_key: str) -> bool:
        return format_key in self.formats

    def repo_context(self, format_key: str, repo_key: str) -> RepoContext:
        """Build the per-request context handed to a format handler."""
        repo_settings = self.settings.repository
        public_url = repo_settings.public_url.rstrip("/")
        download_url = repo_settings.download_url.rstrip("/")
        return RepoContext(
            repo_key=repo_key,
            base_url=f"{public_url}/repositories/{format_key}/{repo_key}",
            download_base_url=f"{download_url}/{repo_key}",
        )
