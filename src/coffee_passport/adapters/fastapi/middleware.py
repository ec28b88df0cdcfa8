"""FastAPI adapter – FastAPICorrelationIdMiddleware."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from coffee_passport.observability.correlation import CorrelationContext

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send


class FastAPICorrelationIdMiddleware:
    """Resolve the request id, expose it to logs, echo it on the response.

    Header resolution order:
    1. ``X-Correlation-ID``
    2. ``X-Request-ID``
    3. ``traceparent`` (W3C trace-context, trace-id segment)
    4. Generated UUID v4

    ``X-Org-ID`` is recorded alongside so every log line of the request
    carries the organisation.
    """

    def __init__(self, app: "ASGIApp", header_name: str = "X-Correlation-ID") -> None:
        self.app = app
        self._response_header = header_name.lower().encode()

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {
            k.decode("latin-1"): v.decode("latin-1") for k, v in scope.get("headers", [])
        }
        ctx = CorrelationContext.set_from_headers(headers)

        bound: dict[str, str] = {"correlation_id": ctx.correlation_id}
        if ctx.org_id is not None:
            bound["org_id"] = ctx.org_id
        structlog.contextvars.bind_contextvars(**bound)

        response_header = self._response_header
        encoded_id = ctx.correlation_id.encode()

        async def send_with_header(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers_list: list[tuple[bytes, bytes]] = list(message.get("headers", []))
                headers_list.append((response_header, encoded_id))
                message = {**message, "headers": headers_list}
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            structlog.contextvars.unbind_contextvars(*bound)
            CorrelationContext.clear()


__all__ = ["FastAPICorrelationIdMiddleware"]
