"""Observability – structlog configuration and helpers."""
from coffee_passport.observability.logging.factory import JsonLoggerFactory
from coffee_passport.observability.logging.filters import (
    DEFAULT_SENSITIVE_FIELDS,
    SensitiveFieldsFilter,
)
from coffee_passport.observability.logging.processors import CorrelationProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
