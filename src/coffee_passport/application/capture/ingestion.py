"""Event ingestion port.

The capture flow does not persist events yet; :class:`StubEventIngestor`
only derives stable ids so a repeated request id yields the same ids.
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence

from coffee_passport.application.capture.models import CaptureContext

__all__ = ["EventIngestor", "StubEventIngestor"]


class EventIngestor(Protocol):
    async def ingest(self, events: Sequence[Any], context: CaptureContext) -> list[str]: ...


class StubEventIngestor:
    async def ingest(self, events: Sequence[Any], context: CaptureContext) -> list[str]:
        return [f"event-{context.request_id}-{index}" for index in range(len(events))]
