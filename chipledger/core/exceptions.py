"""Custom exception classes for consistent error handling across the ledger."""

from dataclasses import dataclass, field
from typing import TypeAlias

# Shared type alias for error detail values
ErrorDetails: TypeAlias = dict[
    str, str | int | float | bool | list[str] | list[int] | None
]


@dataclass
class AppError(Exception):
    """Base exception for all ledger errors."""

    code: str = "app_error"
    message: str = "A ledger error occurred"
    details: ErrorDetails = field(default_factory=dict)

    def __str__(self) -> str:  # pyright: ignore[reportImplicitOverride]
        return self.message


@dataclass
class NotFoundError(AppError):
    """Raised when a referenced record (player, payment unit) is not found."""

    code: str = "not_found"
    message: str = "Resource not found"


@dataclass
class ValidationError(AppError):
    """Raised when configuration or game data fails validation."""

    code: str = "validation_error"
    message: str = "Validation failed"


@dataclass
class ConflictError(AppError):
    """Raised when records contradict each other, e.g. overlapping payment units."""

    code: str = "conflict"
    message: str = "Resource conflict"
