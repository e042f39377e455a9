from pydantic import BaseModel, Field


class CatalogEntry(BaseModel):
    """One artifact as listed in a JSON catalog document."""

    path: str
    name: str | None = None
    version: str | None = None
    release: str | None = None
    arch: str | None = None
    content_type: str | None = None
    size_bytes: int


class Catalog(BaseModel):
    """JSON catalog document produced by ``generate_index``."""

    format: str
    total_count: int
    total_size_bytes: int
    packages: list[CatalogEntry] = Field(default_factory=list)
