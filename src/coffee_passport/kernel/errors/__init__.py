"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError
    │   └── ConflictError
    ├── ApplicationError     (application.py)
    │   └── UnauthorizedError
    └── InfrastructureError  (infrastructure.py)
        └── ConnectionError
"""

from coffee_passport.kernel.errors.application import ApplicationError, UnauthorizedError
from coffee_passport.kernel.errors.base import BaseError
from coffee_passport.kernel.errors.domain import ConflictError, DomainError, ValidationError
from coffee_passport.kernel.errors.infrastructure import ConnectionError, InfrastructureError

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "ConnectionError",
    "DomainError",
    "InfrastructureError",
    "UnauthorizedError",
    "ValidationError",
]
