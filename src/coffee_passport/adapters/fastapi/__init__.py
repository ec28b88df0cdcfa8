"""FastAPI adapter – capture/health routers, correlation middleware, exception mapper."""
from coffee_passport.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from coffee_passport.adapters.fastapi.middleware import FastAPICorrelationIdMiddleware
from coffee_passport.adapters.fastapi.routers import FastAPICaptureRouter, FastAPIHealthRouter

__all__ = [
    "FastAPICaptureRouter",
    "FastAPICorrelationIdMiddleware",
    "FastAPIExceptionMapper",
    "FastAPIHealthRouter",
]
