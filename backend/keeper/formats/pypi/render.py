from pydantic import BaseModel, Field

from keeper.domain.models import Metadata, filename_of
from keeper.formats.base import escape_html

CONTENT_TYPE_HTML = "text/html; charset=utf-8"
CONTENT_TYPE_SIMPLE_HTML = "application/vnd.pypi.simple.v1+html"
CONTENT_TYPE_SIMPLE_JSON = "application/vnd.pypi.simple.v1+json"

API_VERSION = "1.0"


class ProjectReference(BaseModel):
    """Reference to a project in the simple index."""

    name: str


class PackageFile(BaseModel):
    """File information for a package."""

    filename: str
    url: str
    hashes: dict[str, str] = Field(default_factory=dict)


class ProjectDetail(BaseModel):
    """Project detail response model (PEP 691)."""

    meta: dict[str, str] = Field(default_factory=lambda: {"api-version": API_VERSION})
    name: str
    files: list[PackageFile]


class ProjectList(BaseModel):
    """Project list response model (PEP 691)."""

    meta: dict[str, str] = Field(default_factory=lambda: {"api-version": API_VERSION})
    projects: list[ProjectReference]


def negotiate_content_type(accept: str | None, format: str | None = None) -> str:
    """
    Negotiate the Simple API representation from an Accept header.

    An explicit ``format`` query parameter takes precedence. Quality values
    are honoured; anything unrecognised falls back to plain HTML.
    """
    if format:
        if format.lower() == "json":
            return CONTENT_TYPE_SIMPLE_JSON
        elif format.lower() == "html":
            return CONTENT_TYPE_SIMPLE_HTML

    if not accept:
        return CONTENT_TYPE_HTML

    media_types = []
    for media_range in accept.split(","):
        parts = media_range.strip().split(";")
        mime_type = parts[0].strip()

        quality = 1.0
        for param in parts[1:]:
            param = param.strip()
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0

        if quality > 0:
            media_types.append((mime_type, quality))

    # Stable sort keeps header order among equal qualities
    media_types.sort(key=lambda x: x[1], reverse=True)

    for mime_type, _ in media_types:
        if mime_type == CONTENT_TYPE_SIMPLE_JSON:
            return CONTENT_TYPE_SIMPLE_JSON
        elif mime_type == CONTENT_TYPE_SIMPLE_HTML:
            return CONTENT_TYPE_SIMPLE_HTML
        elif mime_type == "text/html":
            return CONTENT_TYPE_HTML

    return CONTENT_TYPE_HTML


def file_url(base_url: str, artifact: Metadata) -> str:
    """Download link for ``artifact``, with a sha256 fragment when known."""
    url = f"{base_url}/packages/{filename_of(artifact.path)}"
    if artifact.checksum_sha256:
        url += f"#sha256={artifact.checksum_sha256}"
    return url


def render_project_list_html(names: list[str], prefix: str = "") -> str:
    """Render the root Simple index. ``prefix`` is prepended to every link."""
    html = f"""<!DOCTYPE html>
<html>
  <head>
    <meta name="pypi:repository-version" content="{API_VERSION}">
    <title>Simple Index</title>
  </head>
  <body>
"""

    for name in names:
        name = escape_html(name)
        html += f'    <a href="{escape_html(prefix)}/simple/{name}/">{name}</a>\n'

    html += """  </body>
</html>
"""
    return html


def render_project_detail_html(
    name: str, artifacts: list[Metadata], base_url: str
) -> str:
    """Render one project page with a link per distribution file."""
    name = escape_html(name)
    html = f"""<!DOCTYPE html>
<html>
  <head>
    <meta name="pypi:repository-version" content="{API_VERSION}">
    <title>Links for {name}</title>
  </head>
  <body>
    <h1>Links for {name}</h1>
"""

    for artifact in artifacts:
        href = escape_html(file_url(base_url, artifact))
        html += f'    <a href="{href}">{escape_html(filename_of(artifact.path))}</a>\n'

    html += """  </body>
</html>
"""
    return html


def render_project_list_json(names: list[str]) -> str:
    projects = ProjectList(projects=[ProjectReference(name=n) for n in names])
    return projects.model_dump_json()


def render_project_detail_json(
    name: str, artifacts: list[Metadata], base_url: str
) -> str:
    files = []
    for artifact in artifacts:
        hashes = {}
        if artifact.checksum_sha256:
            hashes["sha256"] = artifact.checksum_sha256.lower()
        files.append(
            PackageFile(
                filename=filename_of(artifact.path),
                url=f"{base_url}/packages/{filename_of(artifact.path)}",
                hashes=hashes,
            )
        )
    return ProjectDetail(name=name, files=files).model_dump_json()
