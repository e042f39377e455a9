from keeper.formats.rpm.handler import RpmFormatHandler

__all__ = ["RpmFormatHandler"]
