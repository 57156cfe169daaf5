"""Error hierarchy for defdeploy."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from defdeploy.index.types import ResourceLocation

__all__ = [
    "DeployError",
    "ConfigNotFoundError",
    "ConfigError",
    "ModuleNotFoundError",
    "ModuleLoadError",
    "InvalidInputError",
    "InvalidKindError",
    "NoDefinitionsFoundError",
    "DefinitionFileNotFoundError",
    "PromptAbortedError",
    "DeserializationError",
    "RegistrationError",
    "ErrorCodes",
]


class DeployError(Exception):
    """Base error for all defdeploy errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(DeployError):
    """Raised when a configuration file or modules directory cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration path not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(DeployError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class ModuleNotFoundError(DeployError):
    """Raised when a module id does not resolve to a loaded module."""

    def __init__(self, module_id: int, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_NOT_FOUND",
            message=f"Couldn't find a module with id: {module_id}",
            details={"module_id": module_id},
            **kwargs,
        )

    @property
    def module_id(self) -> int:
        """The module id that did not resolve."""
        return self.details["module_id"]


class ModuleLoadError(DeployError):
    """Raised when a module directory or archive cannot be opened."""

    def __init__(self, module_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_LOAD_ERROR",
            message=f"Failed to load module '{module_path}': {reason}",
            details={"module_path": module_path, "reason": reason},
            **kwargs,
        )


class InvalidInputError(DeployError):
    """Raised for invalid input."""

    def __init__(self, message: str = "Invalid input", **kwargs: Any) -> None:
        super().__init__(code="GENERAL_INVALID_INPUT", message=message, **kwargs)


class InvalidKindError(DeployError):
    """Raised when a definition kind is not one of the known kinds."""

    def __init__(self, kind: str, allowed: list[str], **kwargs: Any) -> None:
        super().__init__(
            code="INVALID_KIND",
            message=f"Invalid type '{kind}' , allowed values : {allowed}",
            details={"kind": kind, "allowed": allowed},
            **kwargs,
        )

    @property
    def kind(self) -> str:
        """The rejected kind identifier."""
        return self.details["kind"]


class NoDefinitionsFoundError(DeployError):
    """Raised when a selection axis has no candidate definitions left.

    ``axis`` is one of ``"module"``, ``"kind"`` or ``"file"``.
    """

    def __init__(
        self,
        axis: str,
        message: str,
        details: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="NO_DEFINITIONS_FOUND",
            message=message,
            details={"axis": axis, **(details or {})},
            **kwargs,
        )

    @property
    def axis(self) -> str:
        """The selection axis that came up empty."""
        return self.details["axis"]


class DefinitionFileNotFoundError(DeployError):
    """Raised when a supplied file name matches none of the candidates."""

    def __init__(self, file_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="FILE_NOT_FOUND",
            message=f"Couldn't find file {file_name}",
            details={"file_name": file_name},
            **kwargs,
        )

    @property
    def file_name(self) -> str:
        """The normalized file name that was searched for."""
        return self.details["file_name"]


class PromptAbortedError(DeployError):
    """Raised when the operator gives up on a prompt or input runs out."""

    def __init__(self, question: str, attempts: int, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="PROMPT_ABORTED",
            message=f"Prompt aborted after {attempts} attempt(s): {reason}",
            details={"question": question, "attempts": attempts, "reason": reason},
            **kwargs,
        )

    @property
    def attempts(self) -> int:
        """Number of answers read before giving up."""
        return self.details["attempts"]


class DeserializationError(DeployError):
    """Raised when a resource does not parse into its kind's record shape."""

    def __init__(self, location: ResourceLocation, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="DESERIALIZATION_ERROR",
            message=f"Cannot read definition {location.url}: {reason}",
            details={"location": location, "reason": reason},
            **kwargs,
        )

    @property
    def location(self) -> ResourceLocation:
        """The resource that failed to parse."""
        return self.details["location"]


class RegistrationError(DeployError):
    """Raised when a downstream service rejects a record."""

    def __init__(self, kind: str, location: ResourceLocation, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="REGISTRATION_ERROR",
            message=f"Failed to register {kind} definition {location.url}: {reason}",
            details={"kind": kind, "location": location, "reason": reason},
            **kwargs,
        )

    @property
    def location(self) -> ResourceLocation:
        """The resource whose record was rejected."""
        return self.details["location"]


class ErrorCodes:
    """All error codes as constants.

    Example:
        if error.code == ErrorCodes.MODULE_NOT_FOUND:
            handle_not_found()
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
    MODULE_LOAD_ERROR = "MODULE_LOAD_ERROR"
    GENERAL_INVALID_INPUT = "GENERAL_INVALID_INPUT"
    INVALID_KIND = "INVALID_KIND"
    NO_DEFINITIONS_FOUND = "NO_DEFINITIONS_FOUND"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PROMPT_ABORTED = "PROMPT_ABORTED"
    DESERIALIZATION_ERROR = "DESERIALIZATION_ERROR"
    REGISTRATION_ERROR = "REGISTRATION_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
