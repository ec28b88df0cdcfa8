"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

import math
from typing import Any, Callable

from fastapi.responses import JSONResponse

from coffee_passport.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    UnauthorizedError,
    ValidationError,
)
from coffee_passport.observability.correlation import CorrelationContext
from coffee_passport.observability.logging import get_logger

logger = get_logger(__name__)


class FastAPIExceptionMapper:
    """Register error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "conflict", "message": "...", "detail": {...}, "correlation_id": "..."}

    Mappings
    --------
    ``ValidationError``     → 400
    ``UnauthorizedError``   → 401
    ``ConflictError``       → 409 (``Retry-After`` when a hint is set)
    ``DomainError``         → 422
    ``InfrastructureError`` → 503
    ``ApplicationError``    → 500
    """

    def __init__(self) -> None:
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (UnauthorizedError, 401),
            (ConflictError, 409),
            (DomainError, 422),
            (InfrastructureError, 503),
            (ApplicationError, 500),
        ]

    def status_for(self, exc: BaseException) -> int:
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""

        def make_handler(code: int) -> Callable[[Any, Any], Any]:
            async def handler(request: Any, exc: Any) -> Any:
                ctx = CorrelationContext.get()
                correlation_id = ctx.correlation_id if ctx is not None else None

                if isinstance(exc, BaseError):
                    body = exc.to_dict()
                else:
                    body = {"code": "error", "message": str(exc)}
                body["correlation_id"] = correlation_id

                headers: dict[str, str] = {}
                retry_after = getattr(exc, "retry_after_seconds", None)
                if retry_after is not None:
                    headers["Retry-After"] = str(max(1, math.ceil(retry_after)))

                if code >= 500:
                    logger.error("http.error", status=code, code=body["code"], path=str(request.url.path))
                return JSONResponse(status_code=code, content=body, headers=headers or None)

            return handler

        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, make_handler(status))


__all__ = ["FastAPIExceptionMapper"]
