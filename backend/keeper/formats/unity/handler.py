import logging

from keeper.domain.errors import (
    BadMagicError,
    EmptyInputError,
    EmptyPathError,
    ExtensionMismatchError,
    TooSmallError,
)
from keeper.domain.models import Metadata, filename_of
from keeper.formats.base import (
    CONTENT_TYPE_OCTET_STREAM,
    FormatHandler,
    IndexDocuments,
    render_catalog,
)
from keeper.formats.models import CatalogEntry
from keeper.formats.unity.filenames import UNITY_EXTENSION, extract_version

logger = logging.getLogger(__name__)

MAGIC_GZIP = b"\x1f\x8b"
METHOD_DEFLATE = 0x08


class UnityFormatHandler(FormatHandler):
    """
    Unity ``.unitypackage`` assets.

    A unitypackage is a gzipped tarball of ``<guid>/asset``,
    ``<guid>/asset.meta`` and ``<guid>/pathname`` entries; only the gzip
    envelope is checked here.
    """

    def format_key(self) -> str:
        return "unity"

    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        if not data:
            raise EmptyInputError("Empty file")

        if data[:2] == MAGIC_GZIP:
            content_type = "application/gzip"
        else:
            content_type = CONTENT_TYPE_OCTET_STREAM

        version = extract_version(path)
        if version is None:
            logger.debug(f"No version found in {path}")

        return Metadata(
            path=path,
            version=version,
            content_type=content_type,
            size_bytes=len(data),
        )

    def validate(self, path: str, data: bytes) -> None:
        if not data:
            raise EmptyInputError("Unity package cannot be empty")

        if not path:
            raise EmptyPathError()

        if not path.lower().endswith(UNITY_EXTENSION):
            raise ExtensionMismatchError(
                f"Expected .unitypackage extension, got: {filename_of(path)}"
            )

        if len(data) < 2:
            raise TooSmallError("File too small to be a valid gzip archive")

        if data[:2] != MAGIC_GZIP:
            raise BadMagicError(
                "Invalid gzip header: expected [1f, 8b], "
                f"got [{data[0]:02x}, {data[1]:02x}]"
            )

        if len(data) >= 3 and data[2] != METHOD_DEFLATE:
            raise BadMagicError(
                f"Unsupported gzip compression method: {data[2]:02x} "
                "(expected 08/deflate)"
            )

    def generate_index(self, artifacts: list[Metadata]) -> IndexDocuments | None:
        if not artifacts:
            return None

        entries = sorted(
            (
                CatalogEntry(
                    path=a.path,
                    version=a.version,
                    size_bytes=a.size_bytes,
                    content_type=a.content_type,
                )
                for a in artifacts
            ),
            key=lambda e: e.path,
        )
        return [("unity-index.json", render_catalog(self.format_key(), entries))]
