"""Application-layer errors – failures at use-case level."""

from __future__ import annotations

from coffee_passport.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """A use case failed for a reason that is not the caller's fault."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """Missing or invalid request credentials."""

    default_code = "unauthorized"


__all__ = ["ApplicationError", "UnauthorizedError"]
