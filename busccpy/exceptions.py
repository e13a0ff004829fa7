"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses raised by the storage-root configuration, the project
registry and the template generators. Every failure is terminal for the
current call: nothing is retried and no partial write is left behind.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'NOT_FOUND'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> e.code
    'CODE'
    """

    __slots__ = ("code", "message", "context")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(self.default_code, message, context=context)


class NotConfiguredError(ConfigurationError):
    """Raised when no storage root has been configured yet."""

    default_code = "NOT_CONFIGURED"


class PathMissingError(ConfigurationError):
    """Raised when the configured storage root no longer exists."""

    default_code = "PATH_MISSING"


class InvalidPathError(ConfigurationError):
    """Raised when a path offered as storage root is not an existing directory."""

    default_code = "INVALID_PATH"


class ValidationError(AppError):
    """Raised when required input is missing or malformed."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("VALIDATION_ERROR", message, context=context)


class UserInputError(AppError):
    """Raised when an interactive prompt is cancelled or answered with nothing."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("USER_INPUT_ERROR", message, context=context)


class DuplicateRecordError(AppError):
    """Raised when a project with the derived id is already registered."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DUPLICATE_RECORD", message, context=context)


class RecordNotFoundError(AppError):
    """Raised when a project record file does not exist."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("NOT_FOUND", message, context=context)


class NoOpError(AppError):
    """Raised when an update is requested without any field to change."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("NO_OP", message, context=context)


class MissingMethodsError(AppError):
    """Raised when a project is completed without any recorded methods."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("MISSING_METHODS", message, context=context)


class InvalidDateError(AppError):
    """Raised for values that are not valid calendar dates."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("INVALID_DATE", message, context=context)


class ConcurrentModificationError(AppError):
    """Raised when a record changed on disk between read and write."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("CONCURRENT_MODIFICATION", message, context=context)


class PathOutsideRootError(AppError):
    """Raised when a project folder does not resolve inside the storage root."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("PATH_OUTSIDE_ROOT", message, context=context)


class EmptyRegistryError(AppError):
    """Raised when the registry directory holds no records to compile."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("EMPTY_REGISTRY", message, context=context)


class AlreadyExistsError(AppError):
    """Raised when an output file exists and overwriting was not requested."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ALREADY_EXISTS", message, context=context)
