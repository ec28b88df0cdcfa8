"""Infrastructure errors – I/O failures of backing services."""

from __future__ import annotations

from typing import Any

from coffee_passport.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class ConnectionError(InfrastructureError):  # noqa: A001
    """A backing store (Redis, database, …) could not be reached."""

    default_code = "connection_error"

    def __init__(
        self,
        resource: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Could not connect to '{resource}'", **kwargs)
        self.resource = resource


__all__ = ["ConnectionError", "InfrastructureError"]
