"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from coffee_passport.observability.correlation import CorrelationContext


class CorrelationProcessor:
    """structlog processor that injects context from :class:`CorrelationContext`.

    Adds ``correlation_id`` and, when known, ``org_id`` and ``trace_id``.
    Values already bound on the event win.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        ctx = CorrelationContext.get()
        if ctx is not None:
            event_dict.setdefault("correlation_id", ctx.correlation_id)
            if ctx.org_id is not None:
                event_dict.setdefault("org_id", ctx.org_id)
            if ctx.trace_id is not None:
                event_dict.setdefault("trace_id", ctx.trace_id)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, optionally pre-bound with *initial_values*."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["CorrelationProcessor", "get_logger"]
