"""Exceptions related to bloggernetes."""

__all__ = [
    "BloggernetesException",
    "InputException",
    "ConversionError",
    "MissingRequiredField",
    "MalformedRecord",
    "CommandException",
    "TransportFailure",
    "WatchExpired",
]


class BloggernetesException(Exception):
    """Generic base exception used for this library."""


class InputException(BloggernetesException):
    """Raised when a resource is not formatted as expected."""


class ConversionError(InputException):
    """Raised when a generic record cannot be converted to a domain record."""


class MissingRequiredField(ConversionError):
    """Raised when a mandatory field is absent or malformed."""

    def __init__(self, kind: str, field_name: str, detail: str | None = None) -> None:
        message = f"{kind} missing required field '{field_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.field_name = field_name


class MalformedRecord(ConversionError):
    """Raised when a record has no recognizable content section."""


class CommandException(BloggernetesException):
    """Raised when there is a failure running a subcommand."""


class TransportFailure(CommandException):
    """Raised when a watch cannot be established or stops unexpectedly."""


class WatchExpired(TransportFailure):
    """Raised when a watch resumes from a resourceVersion that is too old."""
