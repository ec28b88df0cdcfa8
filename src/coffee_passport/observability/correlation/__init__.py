"""Observability – correlation context."""
from coffee_passport.observability.correlation.context import CorrelationContext, RequestContext

__all__ = ["CorrelationContext", "RequestContext"]
