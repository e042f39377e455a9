"""
Filename grammar for Python distributions.

Wheels follow PEP 427::

    {distribution}-{version}(-{build})?-{python}-{abi}-{platform}.whl

Source distributions are ``{name}-{version}.tar.gz`` or ``.zip``, where the
name may itself contain ``-``, so they are split on the last one.
"""

import re

from keeper.domain.models import ParsedFilename

WHEEL_EXTENSION = ".whl"
SDIST_EXTENSIONS = (".tar.gz", ".zip")
ACCEPTED_EXTENSIONS = (WHEEL_EXTENSION, *SDIST_EXTENSIONS)

# name, version, python tag, abi tag, platform tag
MIN_WHEEL_FIELDS = 5

_SEPARATOR_RUN = re.compile(r"[^a-z0-9]+")


def normalize_name(name: str) -> str:
    """
    Normalize a package name according to PEP 503.

    Lowercases the name, replaces every run of non-alphanumeric characters
    with a single '-' and strips leading and trailing '-'.
    """
    return _SEPARATOR_RUN.sub("-", name.lower()).strip("-")


def strip_extension(filename: str) -> tuple[str, str] | None:
    """Split ``filename`` into (stem, extension) for accepted extensions."""
    lower = filename.lower()
    for extension in ACCEPTED_EXTENSIONS:
        if lower.endswith(extension):
            return filename[: -len(extension)], extension
    return None


def parse_filename(filename: str) -> ParsedFilename:
    """Tokenize a wheel or sdist filename; unknown shapes yield empty fields."""
    split = strip_extension(filename)
    if split is None:
        return ParsedFilename()

    stem, extension = split
    if extension == WHEEL_EXTENSION:
        parts = stem.split("-")
        return ParsedFilename(
            name=parts[0],
            version=parts[1] if len(parts) >= 2 else None,
        )

    if "-" not in stem:
        return ParsedFilename()
    name, version = stem.rsplit("-", 1)
    return ParsedFilename(name=name, version=version)


def project_name(filename: str) -> str | None:
    """Normalized project name for ``filename``, or None if it has none."""
    name = parse_filename(filename).name
    if name is None:
        return None
    return normalize_name(name) or None
