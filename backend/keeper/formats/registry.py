"""
Registry of the package formats this service understands.

The set is closed: hosts look handlers up by ``format_key()`` and never
register their own.
"""

from keeper.formats.base import FormatHandler
from keeper.formats.pypi import PypiFormatHandler
from keeper.formats.rpm import RpmFormatHandler
from keeper.formats.unity import UnityFormatHandler


class UnknownFormatError(KeyError):
    def __init__(self, format_key: str) -> None:
        super().__init__(f"Unknown package format: {format_key}")
        self.format_key = format_key

    def __str__(self) -> str:
        return self.args[0]


_HANDLERS: dict[str, FormatHandler] = {
    handler.format_key(): handler
    for handler in (PypiFormatHandler(), RpmFormatHandler(), UnityFormatHandler())
}


def get_handler(format_key: str) -> FormatHandler:
    try:
        return _HANDLERS[format_key]
    except KeyError:
        raise UnknownFormatError(format_key) from None


def available_formats() -> list[str]:
    return sorted(_HANDLERS)
