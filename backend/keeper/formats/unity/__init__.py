from keeper.formats.unity.handler import UnityFormatHandler

__all__ = ["UnityFormatHandler"]
