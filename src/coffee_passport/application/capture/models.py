"""Capture request context and result."""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

__all__ = ["CaptureContext", "CaptureResult"]


@dataclasses.dataclass(frozen=True)
class CaptureContext:
    """Per-request values supplied by the transport layer.

    ``request_id`` correlates logs and seeds the generated event ids; it
    plays no part in duplicate detection.
    """

    org_id: str
    idempotency_key: str
    request_id: str
    signature: str | None = None
    date_header: str | None = None


@dataclasses.dataclass(frozen=True)
class CaptureResult:
    accepted: bool
    ingested_count: int
    ids: list[str]
    warnings: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form: ``{"accepted", "ingestedCount", "ids"[, "warnings"]}``."""
        data: dict[str, Any] = {
            "accepted": self.accepted,
            "ingestedCount": self.ingested_count,
            "ids": list(self.ids),
        }
        if self.warnings is not None:
            data["warnings"] = list(self.warnings)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CaptureResult":
        try:
            warnings = data.get("warnings")
            return cls(
                accepted=bool(data["accepted"]),
                ingested_count=int(data["ingestedCount"]),
                ids=[str(i) for i in data["ids"]],
                warnings=None if warnings is None else [str(w) for w in warnings],
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise ValueError(f"Not a capture result: {data!r}") from exc
