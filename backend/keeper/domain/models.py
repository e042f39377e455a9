from pydantic import BaseModel, ConfigDict, Field

# Records exchanged between the host and the format handlers


class Metadata(BaseModel):
    """Metadata for one stored artifact."""

    model_config = ConfigDict(frozen=True)

    path: str  # Repository-relative path, e.g. "Packages/nginx-1.24.0-1.el9.x86_64.rpm"
    version: str | None = None
    content_type: str  # MIME type guessed from the leading bytes
    size_bytes: int = Field(..., ge=0)
    checksum_sha256: str | None = None  # Computed and set by the host only

    @property
    def filename(self) -> str:
        """Last path segment of the artifact path."""
        return filename_of(self.path)


class ParsedFilename(BaseModel):
    """Fields tokenized out of a package filename by a format grammar."""

    name: str | None = None
    version: str | None = None
    release: str | None = None
    arch: str | None = None


class RepoContext(BaseModel):
    """Per-request context supplied by the host."""

    model_config = ConfigDict(frozen=True)

    repo_key: str
    base_url: str  # Root of this repository's browsing endpoints
    download_base_url: str  # Root that artifact paths are appended to for downloads


class RepoRequest(BaseModel):
    """An inbound HTTP-style request, already stripped of the repository prefix."""

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    path: str = "/"
    query: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class RepoResponse(BaseModel):
    """A synthesized response. Header names are lowercase."""

    status: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""


def filename_of(path: str) -> str:
    """Return the last ``/``-separated segment of ``path``."""
    return path.rsplit("/", 1)[-1]
