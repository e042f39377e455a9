from keeper.formats.pypi.handler import PypiFormatHandler

__all__ = ["PypiFormatHandler"]
