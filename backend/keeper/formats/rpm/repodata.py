"""
YUM/DNF repodata documents synthesized at serving time.

``repomd.xml`` only points at the three metadata files; it carries no
checksums or timestamps since these documents are regenerated on every
request rather than published as signed release artifacts.
"""

from keeper.core.codec import gzip_stored
from keeper.domain.models import Metadata, ParsedFilename, filename_of
from keeper.formats.base import escape_html as escape
from keeper.formats.rpm.filenames import parse_filename

NS_REPO = "http://linux.duke.edu/metadata/repo"
NS_COMMON = "http://linux.duke.edu/metadata/common"
NS_RPM = "http://linux.duke.edu/metadata/rpm"
NS_FILELISTS = "http://linux.duke.edu/metadata/filelists"
NS_OTHER = "http://linux.duke.edu/metadata/other"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

METADATA_FILES = (
    ("primary", "repodata/primary.xml.gz"),
    ("filelists", "repodata/filelists.xml.gz"),
    ("other", "repodata/other.xml.gz"),
)

DEFAULT_EPOCH = "0"


def render_repomd() -> str:
    xml = XML_DECLARATION
    xml += f'<repomd xmlns="{NS_REPO}" xmlns:rpm="{NS_RPM}">\n'
    for data_type, location in METADATA_FILES:
        xml += f'  <data type="{data_type}">\n'
        xml += f'    <location href="{location}"/>\n'
        xml += "  </data>\n"
    xml += "</repomd>\n"
    return xml


def primary_packages(
    artifacts: list[Metadata],
) -> list[tuple[ParsedFilename, Metadata]]:
    """Parse and order the artifacts listed in primary.xml."""
    packages = []
    for artifact in artifacts:
        info = parse_filename(filename_of(artifact.path))
        if info.name:
            packages.append((info, artifact))

    packages.sort(
        key=lambda p: (
            p[0].name,
            p[0].version or "",
            p[0].release or "",
            p[0].arch or "",
            p[1].path,
        )
    )
    return packages


def render_primary(artifacts: list[Metadata]) -> str:
    packages = primary_packages(artifacts)

    xml = XML_DECLARATION
    xml += (
        f'<metadata xmlns="{NS_COMMON}" xmlns:rpm="{NS_RPM}" '
        f'packages="{len(packages)}">\n'
    )
    for info, artifact in packages:
        name = escape(info.name or "")
        ver = escape(info.version or "")
        rel = escape(info.release or "")
        evr = f'epoch="{DEFAULT_EPOCH}" ver="{ver}" rel="{rel}"'

        xml += '<package type="rpm">\n'
        xml += f"  <name>{name}</name>\n"
        xml += f"  <arch>{escape(info.arch or 'noarch')}</arch>\n"
        xml += f"  <version {evr}/>\n"
        if artifact.checksum_sha256:
            xml += (
                '  <checksum type="sha256" pkgid="YES">'
                f"{escape(artifact.checksum_sha256)}</checksum>\n"
            )
        xml += f'  <size package="{artifact.size_bytes}"/>\n'
        xml += f'  <location href="packages/{escape(filename_of(artifact.path))}"/>\n'
        xml += "  <format>\n"
        xml += "    <rpm:provides>\n"
        xml += f'      <rpm:entry name="{name}" flags="EQ" {evr}/>\n'
        xml += "    </rpm:provides>\n"
        xml += "  </format>\n"
        xml += "</package>\n"
    xml += "</metadata>\n"
    return xml


def render_filelists() -> str:
    return XML_DECLARATION + f'<filelists xmlns="{NS_FILELISTS}" packages="0"/>\n'


def render_other() -> str:
    return XML_DECLARATION + f'<otherdata xmlns="{NS_OTHER}" packages="0"/>\n'


def compress(document: str) -> bytes:
    return gzip_stored(document.encode("utf-8"))
