"""Capture orchestrator – the request-handling state machine.

``CHECK_CACHE`` → hit: return the cached result.
Miss → ``ACQUIRE_LOCK`` → failed: :class:`ProcessingInProgressError`.
Acquired → validate and ingest → store the result → release the lock.
The lock is released on every path once acquired, and the result is stored
before the release so a racing retry sees the cached response.
"""
from __future__ import annotations

import time
from typing import Any, Sequence

from coffee_passport.application.capture.errors import (
    CaptureValidationError,
    ProcessingInProgressError,
)
from coffee_passport.application.capture.models import CaptureContext, CaptureResult
from coffee_passport.application.capture.service import CaptureService
from coffee_passport.application.idempotency import IdempotencyGate
from coffee_passport.observability.logging import get_logger

__all__ = ["CaptureOrchestrator"]

logger = get_logger(__name__)


class CaptureOrchestrator:
    def __init__(
        self,
        gate: IdempotencyGate,
        service: CaptureService,
        *,
        retry_after_seconds: float = 1.0,
    ) -> None:
        self._gate = gate
        self._service = service
        self._retry_after = retry_after_seconds

    async def capture(
        self,
        events: Sequence[Any] | None,
        context: CaptureContext,
    ) -> CaptureResult:
        start = time.perf_counter()
        key, org_id = context.idempotency_key, context.org_id
        log = logger.bind(org_id=org_id, idempotency_key=key, request_id=context.request_id)

        if not key or not key.strip():
            log.info(
                "capture.validation_failed",
                reason="missing_idempotency_key",
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
            raise CaptureValidationError("An idempotency key is required")
        if not org_id or not org_id.strip():
            log.info(
                "capture.validation_failed",
                reason="missing_org_id",
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
            raise CaptureValidationError("An organisation id is required")

        cached = await self._gate.lookup(key, org_id)
        if cached is not None:
            try:
                return CaptureResult.from_dict(cached)
            except ValueError as exc:
                log.warning("idempotency.corrupt_response", error=str(exc))

        if not await self._gate.try_acquire_lock(key, org_id):
            log.info(
                "capture.conflict",
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
            raise ProcessingInProgressError(key, retry_after_seconds=self._retry_after)

        try:
            result = await self._service.capture_events(events, context)
            await self._gate.store(key, org_id, result.to_dict())
        finally:
            await self._gate.release_lock(key, org_id)
        return result
