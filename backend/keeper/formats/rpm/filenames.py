"""
NVRA filename grammar for RPM packages.

RPM filenames follow ``name-version-release.arch.rpm``. The name may contain
hyphens (``python3-numpy-1.24.2-4.el9.x86_64.rpm``), so the filename is
tokenized right to left:

1. strip ``.rpm``
2. split on the last ``.``  -> arch
3. split on the last ``-``  -> release
4. split on the last ``-``  -> version, the rest is the name

A missing separator leaves that field absent instead of failing.
"""

from keeper.domain.models import ParsedFilename, filename_of

RPM_EXTENSION = ".rpm"


def _split_last(text: str, separator: str) -> tuple[str, str | None]:
    if separator not in text:
        return text, None
    head, tail = text.rsplit(separator, 1)
    return head, tail


def parse_filename(filename: str) -> ParsedFilename:
    if not filename.lower().endswith(RPM_EXTENSION):
        return ParsedFilename()
    stem = filename[: -len(RPM_EXTENSION)]

    # "nginx-1.24.0-1.el9.x86_64" -> ("nginx-1.24.0-1.el9", "x86_64")
    before_arch, arch = _split_last(stem, ".")
    # "nginx-1.24.0-1.el9" -> ("nginx-1.24.0", "1.el9")
    before_release, release = _split_last(before_arch, "-")
    # "nginx-1.24.0" -> ("nginx", "1.24.0")
    name, version = _split_last(before_release, "-")

    return ParsedFilename(name=name, version=version, release=release, arch=arch)


def extract_version(path: str) -> str | None:
    """Reported version for an RPM path: ``version-release`` when both exist."""
    info = parse_filename(filename_of(path))
    if info.version is not None and info.release is not None:
        return f"{info.version}-{info.release}"
    return info.version
