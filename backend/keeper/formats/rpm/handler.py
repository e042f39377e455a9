import logging

from keeper.domain.errors import (
    BadMagicError,
    EmptyInputError,
    EmptyPathError,
    ExtensionMismatchError,
    TooSmallError,
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
from keeper.formats.rpm import repodata
from keeper.formats.rpm.filenames import RPM_EXTENSION, extract_version, parse_filename

logger = logging.getLogger(__name__)

# RPM lead magic bytes
RPM_MAGIC = b"\xed\xab\xee\xdb"

# The lead is a fixed 96-byte structure at the start of every package
RPM_LEAD_SIZE = 96

CONTENT_TYPE_RPM = "application/x-rpm"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_GZIP = "application/gzip"

DOWNLOAD_PREFIXES = ("/packages/", "/Packages/")


class RpmFormatHandler(FormatHandler):
    """RPM packages served as a YUM/DNF repository."""

    supports_routing = True

    def format_key(self) -> str:
        return "rpm-custom"

    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        if not data:
            raise EmptyInputError("Empty file")

        if data[:4] == RPM_MAGIC:
            content_type = CONTENT_TYPE_RPM
        else:
            logger.debug(f"No RPM lead magic in {path}, guessing octet-stream")
            content_type = CONTENT_TYPE_OCTET_STREAM

        return Metadata(
            path=path,
            version=extract_version(path),
            content_type=content_type,
            size_bytes=len(data),
        )

    def validate(self, path: str, data: bytes) -> None:
        if not data:
            raise EmptyInputError("RPM package cannot be empty")

        if not path:
            raise EmptyPathError()

        if not path.lower().endswith(RPM_EXTENSION):
            raise ExtensionMismatchError(
                f"Expected .rpm extension, got: {filename_of(path)}"
            )

        if len(data) < RPM_LEAD_SIZE:
            raise TooSmallError(
                f"File too small for RPM lead: {len(data)} bytes "
                f"(minimum {RPM_LEAD_SIZE})"
            )

        if data[:4] != RPM_MAGIC:
            got = ", ".join(f"{b:02x}" for b in data[:4])
            raise BadMagicError(
                f"Invalid RPM magic: expected [ed, ab, ee, db], got [{got}]"
            )

    def generate_index(self, artifacts: list[Metadata]) -> IndexDocuments | None:
        if not artifacts:
            return None

        entries = []
        for a in artifacts:
            info = parse_filename(filename_of(a.path))
            entries.append(
                CatalogEntry(
                    path=a.path,
                    name=info.name,
                    version=a.version,
                    release=info.release,
                    arch=info.arch,
                    size_bytes=a.size_bytes,
                )
            )
        entries.sort(key=lambda e: (e.name or "", e.path))

        return [("rpm-index.json", render_catalog(self.format_key(), entries))]

    def route(
        self, request: RepoRequest, ctx: RepoContext, artifacts: list[Metadata]
    ) -> RepoResponse:
        path = request.path

        if path == "/repodata/repomd.xml":
            return document(repodata.render_repomd().encode("utf-8"), CONTENT_TYPE_XML)
        elif path == "/repodata/primary.xml.gz":
            primary = repodata.render_primary(artifacts)
            return document(repodata.compress(primary), CONTENT_TYPE_GZIP)
        elif path == "/repodata/filelists.xml.gz":
            filelists = repodata.render_filelists()
            return document(repodata.compress(filelists), CONTENT_TYPE_GZIP)
        elif path == "/repodata/other.xml.gz":
            other = repodata.render_other()
            return document(repodata.compress(other), CONTENT_TYPE_GZIP)

        for prefix in DOWNLOAD_PREFIXES:
            filename = single_segment(path, prefix)
            if filename is not None:
                return download_redirect(artifacts, filename, ctx)

        return not_found()


def document(body: bytes, content_type: str) -> RepoResponse:
    return RepoResponse(status=200, headers={"content-type": content_type}, body=body)
