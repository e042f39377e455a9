"""
Error taxonomy for the format handlers.

Every failure a handler reports is a ``FormatError`` carrying a
user-legible message. ``code`` names the failure class for hosts that
want to branch on it without parsing messages.
"""


class FormatError(ValueError):
    """Base class for all format handling failures."""

    code = "FormatError"


class EmptyInputError(FormatError):
    code = "EmptyInput"


class EmptyPathError(FormatError):
    code = "EmptyPath"

    def __init__(self) -> None:
        super().__init__("Artifact path cannot be empty")


class ExtensionMismatchError(FormatError):
    code = "ExtensionMismatch"


class TooSmallError(FormatError):
    code = "TooSmall"


class BadMagicError(FormatError):
    code = "BadMagic"


class MalformedNameError(FormatError):
    code = "MalformedName"


class SerializationError(FormatError):
    """Raised when an index document cannot be assembled."""

    code = "SerializationFailure"

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Failed to serialize index: {cause}")


class RoutingNotSupportedError(FormatError):
    code = "RoutingNotSupported"

    def __init__(self, format_key: str) -> None:
        super().__init__(f"Format '{format_key}' does not serve repository requests")
