"""Kernel – framework-agnostic errors, clock and storage ports."""

from coffee_passport.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "UnauthorizedError",
    "ValidationError",
]
