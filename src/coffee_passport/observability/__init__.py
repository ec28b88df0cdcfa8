"""Observability – structured logging and request correlation."""
from coffee_passport.observability.correlation import CorrelationContext, RequestContext
from coffee_passport.observability.logging import (
    CorrelationProcessor,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)

__all__ = [
    "CorrelationContext",
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "RequestContext",
    "SensitiveFieldsFilter",
    "get_logger",
]
