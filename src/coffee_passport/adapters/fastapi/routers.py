"""FastAPI adapter – EPCIS capture and health routers."""
from __future__ import annotations

import json
from typing import Any, Awaitable, Callable
from uuid import uuid4

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from coffee_passport.application.capture import (
    CaptureContext,
    CaptureOrchestrator,
    CaptureValidationError,
    SignatureVerifier,
)
from coffee_passport.observability.correlation import CorrelationContext

ReadinessCheck = Callable[[], Awaitable[bool]]

IDEMPOTENCY_HEADER = "x-idempotency-key"
ORG_HEADER = "x-org-id"
SIGNATURE_HEADER = "x-signature"


def FastAPICaptureRouter(
    orchestrator: CaptureOrchestrator,
    *,
    verifier: SignatureVerifier | None = None,
    prefix: str = "/api/epcis",
    tags: list[str] | None = None,
) -> APIRouter:
    """Return the router exposing ``POST {prefix}/capture``.

    Headers: ``X-Idempotency-Key`` and ``X-Org-ID`` are required;
    ``X-Signature`` and ``Date`` are checked only when *verifier* is given.
    Body: ``{"events": [...]}``. Accepted batches return 202.
    """
    router = APIRouter(prefix=prefix, tags=tags or ["epcis"])

    @router.post("/capture", status_code=202)
    async def capture_events(request: Request) -> Any:
        """Capture EPCIS events with idempotent replay."""
        raw = await request.body()
        headers = request.headers
        if verifier is not None:
            verifier.verify(raw, headers.get(SIGNATURE_HEADER), headers.get("date"))

        events = _events_from_body(raw)
        ctx = CorrelationContext.get()
        context = CaptureContext(
            org_id=(headers.get(ORG_HEADER) or "").strip(),
            idempotency_key=(headers.get(IDEMPOTENCY_HEADER) or "").strip(),
            request_id=ctx.correlation_id if ctx is not None else str(uuid4()),
            signature=headers.get(SIGNATURE_HEADER),
            date_header=headers.get("date"),
        )
        result = await orchestrator.capture(events, context)
        return JSONResponse(status_code=202, content=result.to_dict())

    return router


def _events_from_body(raw: bytes) -> Any:
    if not raw:
        return None
    try:
        body = json.loads(raw)
    except ValueError as exc:
        raise CaptureValidationError("Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise CaptureValidationError("Request body must be a JSON object")
    return body.get("events")


def FastAPIHealthRouter(
    path: str = "/health",
    readiness_checks: list[ReadinessCheck] | None = None,
    tags: list[str] | None = None,
) -> APIRouter:
    """Return a liveness + readiness health-check router.

    Liveness is at ``{path}/live``, readiness at ``{path}/ready``. Every
    readiness check must return ``True`` for a 200; otherwise 503.
    """
    router = APIRouter(tags=tags or ["ops"])
    checks = readiness_checks or []

    @router.get(f"{path}/live")
    async def liveness() -> dict[str, str]:
        return {"status": "ok"}

    @router.get(f"{path}/ready")
    async def readiness() -> Any:
        results: dict[str, bool] = {}
        all_ok = True
        for check in checks:
            name = getattr(check, "__name__", repr(check))
            try:
                ok = await check()
            except Exception:  # noqa: BLE001
                ok = False
            results[name] = ok
            if not ok:
                all_ok = False

        return JSONResponse(
            status_code=200 if all_ok else 503,
            content={"status": "ok" if all_ok else "degraded", "checks": results},
        )

    return router


__all__ = ["FastAPICaptureRouter", "FastAPIHealthRouter", "ReadinessCheck"]
