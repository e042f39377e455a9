from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Configuration Framework
# =====================================================================
# Settings are grouped by concern, each group reading environment
# variables with its own prefix, e.g.:
#   - SERVER_PORT=8080
#   - REPOSITORY_PUBLIC_URL=https://packages.example.com
#   - REPOSITORY_DOWNLOAD_URL=https://cdn.example.com/artifacts
# A .env file is read for local development.
# =====================================================================


class ServerSettings(BaseSettings):
    """Settings for the HTTP server."""

    host: str = "127.0.0.1"  # Only bind to all interfaces when explicitly configured
    port: int = 8000
    debug: bool = False
    workers: int = 1
    environment: str = "development"

    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class RepositorySettings(BaseSettings):
    """Settings for the repository endpoints served by the format handlers."""

    public_url: str = "http://localhost:8000"
    # Browsing links are built as {public_url}/repositories/{format}/{repo}

    download_url: str = "http://localhost:8000/download"
    # Download redirects point at {download_url}/{repo}/{artifact path}

    enabled_formats: list[str] | None = None
    # Format keys to expose; None enables every registered format

    model_config = SettingsConfigDict(env_prefix="REPOSITORY_")


class AppSettings(BaseSettings):
    """Application metadata settings."""

    name: str = "Artifact Keeper Formats"
    description: str = "Package format handlers and native repository protocols"
    version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="APP_")


class Settings(BaseSettings):
    """Main application settings that aggregate all sub-settings."""

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    repository: RepositorySettings = RepositorySettings()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_nested_delimiter="__"
    )


def get_settings() -> Settings:
    """Get application settings from environment variables."""
    return Settings()
