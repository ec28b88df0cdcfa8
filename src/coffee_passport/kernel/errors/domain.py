"""Domain errors – rejected input and conflicting state."""

from __future__ import annotations

from typing import Any

from coffee_passport.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a request breaks a domain rule."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` lists every failure found, not just the first one.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[str] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class ConflictError(DomainError):
    """The operation conflicts with state owned by another request."""

    default_code = "conflict"

    def __init__(
        self,
        message: str,
        *,
        retry_after_seconds: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after_seconds = retry_after_seconds


__all__ = ["ConflictError", "DomainError", "ValidationError"]
