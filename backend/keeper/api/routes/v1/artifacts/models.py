from pydantic import BaseModel


class IndexListing(BaseModel):
    """Names of the index documents generated for a repository."""

    format: str
    repository: str
    documents: list[str]
