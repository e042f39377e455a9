"""
Version heuristics for Unity asset packages.

Asset packages carry no fixed naming convention, so the version is guessed:
first from a path segment that looks like a version
(``com/example/MyPlugin/1.2.3/MyPlugin.unitypackage``), then from the
filename stem (``MyPlugin-3.0.0-beta.unitypackage``).
"""

from keeper.domain.models import filename_of

UNITY_EXTENSION = ".unitypackage"


def looks_like_version(text: str) -> bool:
    """True for strings such as ``1.2.3``, ``v2.0`` or ``3.0.0-beta``."""
    if text.startswith("v"):
        text = text[1:]
    if not text[:1].isdigit() or "." not in text:
        return False
    return all(c.isascii() and (c.isalnum() or c in ".-") for c in text)


def extract_version(path: str) -> str | None:
    # Path segments take precedence, nearest to the file first
    for part in reversed(path.split("/")):
        if looks_like_version(part):
            return part

    filename = filename_of(path)
    if filename.endswith(UNITY_EXTENSION):
        stem = filename[: -len(UNITY_EXTENSION)]
    elif "." in filename:
        stem = filename.rsplit(".", 1)[0]
    else:
        return None

    # The first '-' followed by a version-looking remainder starts the version
    for i, char in enumerate(stem):
        if char == "-":
            candidate = stem[i + 1 :]
            if candidate[:1].isdigit() and looks_like_version(candidate):
                return candidate

    return None
