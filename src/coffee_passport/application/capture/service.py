"""Capture service – validate and ingest one EPCIS event batch."""
from __future__ import annotations

import time
from typing import Any, Sequence

from coffee_passport.application.capture.errors import (
    CaptureProcessingError,
    CaptureValidationError,
)
from coffee_passport.application.capture.ingestion import EventIngestor, StubEventIngestor
from coffee_passport.application.capture.models import CaptureContext, CaptureResult
from coffee_passport.application.capture.validator import EventValidator
from coffee_passport.observability.logging import get_logger

__all__ = ["CaptureService"]

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class CaptureService:
    """Validates a batch and hands it to the ingestor.

    Does not consult the idempotency gate; :class:`CaptureOrchestrator`
    wraps this step with the cache lookup and processing lock.
    """

    def __init__(
        self,
        validator: EventValidator,
        ingestor: EventIngestor | None = None,
    ) -> None:
        self._validator = validator
        self._ingestor = ingestor or StubEventIngestor()

    async def capture_events(
        self,
        events: Sequence[Any] | None,
        context: CaptureContext,
    ) -> CaptureResult:
        start = time.perf_counter()
        log = logger.bind(
            org_id=context.org_id,
            idempotency_key=context.idempotency_key,
            request_id=context.request_id,
        )
        is_batch = isinstance(events, (list, tuple))
        log.info("capture.received", event_count=len(events) if is_batch else 0)

        if not is_batch or not events:
            log.info("capture.validation_failed", reason="empty_batch", duration_ms=_elapsed_ms(start))
            raise CaptureValidationError("Request must contain non-empty events array")

        try:
            validation = await self._validator.validate(events)
            if not validation.is_valid:
                log.info(
                    "capture.validation_failed",
                    errors=validation.errors,
                    duration_ms=_elapsed_ms(start),
                )
                raise CaptureValidationError("EPCIS validation failed", errors=validation.errors)
            ids = await self._ingestor.ingest(events, context)
        except CaptureValidationError:
            raise
        except Exception as exc:
            log.exception("capture.failed", error=str(exc), duration_ms=_elapsed_ms(start))
            raise CaptureProcessingError(cause=exc) from exc

        result = CaptureResult(accepted=True, ingested_count=len(events), ids=ids)
        log.info(
            "capture.accepted",
            event_count=result.ingested_count,
            duration_ms=_elapsed_ms(start),
        )
        return result
