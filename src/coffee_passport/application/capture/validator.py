"""Structural validation of inbound EPCIS events."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Mapping, Protocol, Sequence

__all__ = [
    "EPCIS_EVENT_TYPES",
    "EpcisEventValidator",
    "EventValidator",
    "ValidationResult",
]

EPCIS_EVENT_TYPES: frozenset[str] = frozenset(
    {"ObjectEvent", "AggregationEvent", "TransformationEvent", "TransactionEvent"}
)


@dataclasses.dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = dataclasses.field(default_factory=list)


class EventValidator(Protocol):
    async def validate(self, events: Sequence[Any]) -> ValidationResult: ...


class EpcisEventValidator:
    """Checks the envelope of each event; collects every failure in the batch.

    An event must be a JSON object whose ``type`` is one of
    :data:`EPCIS_EVENT_TYPES`. ``eventTime``, when present, must be an
    ISO-8601 timestamp. Other members are passed through untouched.
    """

    def __init__(self, event_types: frozenset[str] = EPCIS_EVENT_TYPES) -> None:
        self._event_types = event_types

    async def validate(self, events: Sequence[Any]) -> ValidationResult:
        errors: list[str] = []
        for index, event in enumerate(events):
            errors.extend(f"events[{index}]: {problem}" for problem in self._check(event))
        return ValidationResult(is_valid=not errors, errors=errors)

    def _check(self, event: Any) -> list[str]:
        if not isinstance(event, Mapping):
            return ["event must be an object"]
        problems: list[str] = []
        event_type = event.get("type")
        if event_type is None or event_type == "":
            problems.append("missing type")
        elif not isinstance(event_type, str) or event_type not in self._event_types:
            problems.append(f"unsupported type {event_type!r}")
        event_time = event.get("eventTime")
        if event_time is not None and not _is_iso_timestamp(event_time):
            problems.append(f"eventTime {event_time!r} is not an ISO-8601 timestamp")
        return problems


def _is_iso_timestamp(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True
