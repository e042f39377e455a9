import logging

from keeper.domain.errors import (
    EmptyInputError,
    EmptyPathError,
    ExtensionMismatchError,
    MalformedNameError,
)
from keeper.domain.models import (
    Metadata,
    RepoContext,
    RepoRequest,
    RepoResponse,
    filename_of,
)
from keeper.formats.base import (
    CONTENT_TYPE_OCTET_STREAM,
    FormatHandler,
    IndexDocuments,
    download_redirect,
    not_found,
    render_catalog,
    single_segment,
)
from keeper.formats.models import CatalogEntry
from keeper.formats.pypi.filenames import (
    MIN_WHEEL_FIELDS,
    WHEEL_EXTENSION,
    normalize_name,
    parse_filename,
    project_name,
    strip_extension,
)
from keeper.formats.pypi.render import (
    CONTENT_TYPE_SIMPLE_JSON,
    negotiate_content_type,
    render_project_detail_html,
    render_project_detail_json,
    render_project_list_html,
    render_project_list_json,
)

logger = logging.getLogger(__name__)

MAGIC_ZIP = b"PK\x03\x04"
MAGIC_GZIP = b"\x1f\x8b"

ROOT_PATHS = ("/", "/simple", "/simple/")


def guess_content_type(data: bytes) -> str:
    """Classify a distribution by its leading bytes."""
    if data[:4] == MAGIC_ZIP:
        return "application/zip"
    elif data[:2] == MAGIC_GZIP:
        return "application/gzip"
    return CONTENT_TYPE_OCTET_STREAM


class PypiFormatHandler(FormatHandler):
    """Python wheels and source distributions served over the Simple API."""

    supports_routing = True

    def format_key(self) -> str:
        return "pypi"

    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        if not data:
            raise EmptyInputError("Empty file")

        filename = filename_of(path)
        content_type = guess_content_type(data)
        version = parse_filename(filename).version
        logger.debug(f"Parsed {filename}: version={version}, type={content_type}")

        return Metadata(
            path=path,
            version=version,
            content_type=content_type,
            size_bytes=len(data),
        )

    def validate(self, path: str, data: bytes) -> None:
        if not data:
            raise EmptyInputError("Python package cannot be empty")

        if not path:
            raise EmptyPathError()

        filename = filename_of(path)
        split = strip_extension(filename)
        if split is None:
            raise ExtensionMismatchError(
                f"Expected .whl, .tar.gz, or .zip extension, got: {filename}"
            )

        stem, extension = split
        if extension == WHEEL_EXTENSION:
            parts = stem.split("-")
            if len(parts) < MIN_WHEEL_FIELDS:
                raise MalformedNameError(
                    f"Invalid wheel filename: expected at least {MIN_WHEEL_FIELDS} "
                    f"dash-separated parts (name-version-python-abi-platform), "
                    f"got {len(parts)} in '{filename}'"
                )
        elif "-" not in stem:
            raise MalformedNameError(
                "Invalid source distribution filename: expected 'name-version' "
                f"format, got '{stem.lower()}'"
            )

    def generate_index(self, artifacts: list[Metadata]) -> IndexDocuments | None:
        if not artifacts:
            return None

        html = render_project_list_html(project_names(artifacts))

        entries = [
            CatalogEntry(
                path=a.path,
                name=project_name(filename_of(a.path)) or "",
                version=a.version,
                content_type=a.content_type,
                size_bytes=a.size_bytes,
            )
            for a in artifacts
        ]
        entries.sort(key=lambda e: (e.name, e.path))

        return [
            ("simple/index.html", html.encode("utf-8")),
            ("pypi-index.json", render_catalog(self.format_key(), entries)),
        ]

    def route(
        self, request: RepoRequest, ctx: RepoContext, artifacts: list[Metadata]
    ) -> RepoResponse:
        path = request.path
        content_type = negotiate_content_type(
            request.header("accept"), request.query.get("format")
        )

        if path in ROOT_PATHS:
            names = project_names(artifacts)
            if content_type == CONTENT_TYPE_SIMPLE_JSON:
                body = render_project_list_json(names)
            else:
                body = render_project_list_html(names, prefix=ctx.base_url)
            return simple_response(body, content_type)

        if path.startswith("/simple/") and path.endswith("/"):
            project = single_segment(path[:-1], "/simple/")
            if project is not None:
                return self._project_page(project, content_type, ctx, artifacts)

        filename = single_segment(path, "/packages/")
        if filename is not None:
            return download_redirect(artifacts, filename, ctx)

        return not_found()

    def _project_page(
        self,
        project: str,
        content_type: str,
        ctx: RepoContext,
        artifacts: list[Metadata],
    ) -> RepoResponse:
        name = normalize_name(project)
        files = sorted(
            (
                a
                for a in artifacts
                if name and project_name(filename_of(a.path)) == name
            ),
            key=lambda a: (filename_of(a.path), a.path),
        )
        if not files:
            logger.warning(f"[{ctx.repo_key}] Project not found: {project}")
            return not_found(f"Project not found: {name or project}")

        if content_type == CONTENT_TYPE_SIMPLE_JSON:
            body = render_project_detail_json(name, files, ctx.base_url)
        else:
            body = render_project_detail_html(name, files, ctx.base_url)
        return simple_response(body, content_type)


def project_names(artifacts: list[Metadata]) -> list[str]:
    """Distinct normalized project names present in ``artifacts``, sorted."""
    names = {project_name(filename_of(a.path)) for a in artifacts}
    names.discard(None)
    return sorted(names)


def simple_response(body: str, content_type: str) -> RepoResponse:
    return RepoResponse(
        status=200,
        headers={"content-type": content_type},
        body=body.encode("utf-8"),
    )
