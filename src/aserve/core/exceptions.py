from __future__ import annotations

from typing import Any, Dict, Mapping


class AserveError(Exception):
    """Base exception for aserve.

    ``exit_code`` is the process exit status the CLI reports when the error
    reaches the dispatcher.
    """

    exit_code: int = 1
    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class UsageError(AserveError):
    """Raised for bad arguments or missing privilege. Nothing has been touched yet."""

    exit_code = 2


class PublishValidationError(AserveError, ValueError):
    """Raised when the source path is missing or is not a directory."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AserveError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ResourceError(AserveError, RuntimeError):
    """Raised when the destination directory or the bind mount cannot be created."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AserveError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class RecoveryAmbiguityError(AserveError, LookupError):
    """Raised when ``clean`` cannot determine which source path a target refers to."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AserveError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class ConfigError(AserveError):
    """Raised when configuration cannot be loaded or fails schema validation."""


__all__ = [
    "AserveError",
    "UsageError",
    "PublishValidationError",
    "ResourceError",
    "RecoveryAmbiguityError",
    "ConfigError",
]
