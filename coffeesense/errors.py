"""Structured error classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    VALIDATION = "validation"
    IO = "io"
    CONFIGURATION = "config"
    UNKNOWN = "unknown"


class CoffeeSenseError(Exception):
    """Base class for errors raised by the configuration resolver."""

    category = ErrorCategory.UNKNOWN


class InvalidDeclarationError(CoffeeSenseError):
    """A project declaration or settings value does not match the documented shape."""

    category = ErrorCategory.VALIDATION


class WorkspaceIOError(CoffeeSenseError):
    """A filesystem lookup failed for a reason other than the file being absent."""

    category = ErrorCategory.IO

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigFileError(CoffeeSenseError):
    """The workspace config file could not be read or parsed."""

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class ErrorReport:
    category: ErrorCategory
    message: str
    path: Optional[str] = None
    hint: str = ""
    original_exception: Optional[Exception] = None

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "message": self.message,
            "path": self.path,
            "hint": self.hint,
        }


def classify_exception(exception: Exception) -> ErrorReport:
    message = str(exception)

    if isinstance(exception, InvalidDeclarationError):
        return ErrorReport(
            category=ErrorCategory.VALIDATION,
            message=message,
            hint="Each project must be a path string or a mapping with a 'root' key.",
            original_exception=exception,
        )
    if isinstance(exception, ConfigFileError):
        return ErrorReport(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            path=exception.path,
            hint="Check that the config file is valid YAML or JSON.",
            original_exception=exception,
        )
    if isinstance(exception, WorkspaceIOError):
        return ErrorReport(
            category=ErrorCategory.IO,
            message=message,
            path=exception.path,
            hint="Check permissions on the workspace directories.",
            original_exception=exception,
        )
    if isinstance(exception, OSError):
        return ErrorReport(
            category=ErrorCategory.IO,
            message=message,
            path=exception.filename,
            original_exception=exception,
        )

    return ErrorReport(
        category=ErrorCategory.UNKNOWN,
        message=message,
        original_exception=exception,
    )
