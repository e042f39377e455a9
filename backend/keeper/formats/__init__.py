from keeper.formats.base import FormatHandler
from keeper.formats.registry import UnknownFormatError, available_formats, get_handler

__all__ = ["FormatHandler", "UnknownFormatError", "available_formats", "get_handler"]
