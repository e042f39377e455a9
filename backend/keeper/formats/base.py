import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from keeper.domain.errors import RoutingNotSupportedError, SerializationError
from keeper.domain.models import (
    Metadata,
    RepoContext,
    RepoRequest,
    RepoResponse,
    filename_of,
)
from keeper.formats.models import Catalog, CatalogEntry

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "HEAD")

CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"
CONTENT_TYPE_TEXT = "text/plain; charset=utf-8"

# Output of generate_index: (document name, document bytes) pairs
IndexDocuments = list[tuple[str, bytes]]


class FormatHandler(ABC):
    """
    Handler for one package format.

    Handlers are stateless: every operation is a pure function of its
    arguments, so a single instance may serve concurrent callers.
    Handlers that emulate a native client protocol set
    ``supports_routing`` and implement ``route``.
    """

    supports_routing = False

    @abstractmethod
    def format_key(self) -> str:
        """Stable identifier the host uses to route uploads to this handler."""
        pass

    @abstractmethod
    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        """Extract metadata from an uploaded artifact. Lenient about filenames."""
        pass

    @abstractmethod
    def validate(self, path: str, data: bytes) -> None:
        """Raise a ``FormatError`` if the artifact does not belong to this format."""
        pass

    @abstractmethod
    def generate_index(self, artifacts: list[Metadata]) -> IndexDocuments | None:
        """Build index documents, or return None when there is nothing to index."""
        pass

    def route(
        self, request: RepoRequest, ctx: RepoContext, artifacts: list[Metadata]
    ) -> RepoResponse:
        """Answer a GET/HEAD request. Only called when ``supports_routing`` is set."""
        raise RoutingNotSupportedError(self.format_key())

    def handle_request(
        self, request: RepoRequest, ctx: RepoContext, artifacts: list[Metadata]
    ) -> RepoResponse:
        """
        Answer a repository request with a synthesized response.

        Protocol problems become 4xx responses; the only exception raised is
        ``RoutingNotSupportedError`` for handlers that serve no protocol.
        """
        if not self.supports_routing:
            raise RoutingNotSupportedError(self.format_key())

        method = request.method.upper()
        if method not in ALLOWED_METHODS:
            response = method_not_allowed()
        else:
            response = self.route(request, ctx, artifacts)

        logger.info(
            f"{self.format_key()} [{ctx.repo_key}] {method} {request.path} "
            f"- Status: {response.status}"
        )

        if method == "HEAD":
            return RepoResponse(status=response.status, headers=response.headers)
        return response


# Response helpers shared by the routing handlers


def text_response(status: int, message: str) -> RepoResponse:
    return RepoResponse(
        status=status,
        headers={"content-type": CONTENT_TYPE_TEXT},
        body=message.encode("utf-8"),
    )


def method_not_allowed() -> RepoResponse:
    response = text_response(405, "Method Not Allowed")
    response.headers["allow"] = ", ".join(ALLOWED_METHODS)
    return response


def not_found(message: str = "Not Found") -> RepoResponse:
    return text_response(404, message)


def find_artifact(artifacts: Iterable[Metadata], filename: str) -> Metadata | None:
    """Return the artifact whose path ends in exactly ``filename``."""
    matches = [a for a in artifacts if filename_of(a.path) == filename]
    if not matches:
        return None
    return min(matches, key=lambda a: a.path)


def download_redirect(
    artifacts: Iterable[Metadata], filename: str, ctx: RepoContext
) -> RepoResponse:
    """Redirect to the download location of ``filename``, or 404 if unknown."""
    artifact = find_artifact(artifacts, filename)
    if artifact is None:
        logger.warning(f"[{ctx.repo_key}] Artifact not found: {filename}")
        return not_found(f"Artifact not found: {filename}")

    location = f"{ctx.download_base_url.rstrip('/')}/{artifact.path.lstrip('/')}"
    return RepoResponse(status=302, headers={"location": location})


def single_segment(path: str, prefix: str) -> str | None:
    """
    Return the segment following ``prefix`` when it is the last one.

    ``single_segment("/packages/a.rpm", "/packages/")`` gives ``"a.rpm"``;
    an empty segment or one containing further ``/`` gives None.
    """
    if not path.startswith(prefix):
        return None
    rest = path[len(prefix) :]
    if not rest or "/" in rest:
        return None
    return rest


# Catalog helpers


def render_catalog(format_key: str, entries: list[CatalogEntry]) -> bytes:
    """Serialize a JSON catalog document listing ``entries``."""
    try:
        catalog = Catalog(
            format=format_key,
            total_count=len(entries),
            total_size_bytes=sum(e.size_bytes for e in entries),
            packages=entries,
        )
        return catalog.model_dump_json(indent=2, exclude_none=True).encode("utf-8")
    except ValueError as err:
        raise SerializationError(err) from err


def escape_html(text: str) -> str:
    """Escape HTML/XML special characters for safe output in templates."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )
