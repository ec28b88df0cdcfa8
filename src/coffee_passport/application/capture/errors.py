"""Capture errors, one per client-visible outcome."""
from __future__ import annotations

from typing import Any

from coffee_passport.kernel.errors import (
    ApplicationError,
    ConflictError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "CaptureProcessingError",
    "CaptureValidationError",
    "ProcessingInProgressError",
    "SignatureError",
]


class CaptureValidationError(ValidationError):
    """Malformed batch or events rejected by the validator (HTTP 400)."""


class ProcessingInProgressError(ConflictError):
    """Another attempt with the same idempotency key holds the lock (HTTP 409).

    Not a fault: the caller should retry after ``retry_after_seconds`` or
    treat the request as accepted and poll later.
    """

    default_code = "processing_in_progress"

    def __init__(
        self,
        idempotency_key: str,
        *,
        retry_after_seconds: float | None = 1.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Request with idempotency key '{idempotency_key}' is already being processed",
            retry_after_seconds=retry_after_seconds,
            detail={"idempotency_key": idempotency_key},
            **kwargs,
        )
        self.idempotency_key = idempotency_key


class CaptureProcessingError(ApplicationError):
    """Unexpected failure while validating or ingesting (HTTP 500)."""

    default_code = "capture_failed"

    def __init__(self, message: str = "Failed to process EPCIS events", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class SignatureError(UnauthorizedError):
    """Request signature or ``Date`` header did not verify (HTTP 401)."""

    default_code = "signature_invalid"
