"""
coffee_passport – EPCIS capture gate for the Coffee Digital Passport API.

Import path convention::

    from coffee_passport.kernel.errors import ConflictError
    from coffee_passport.application.idempotency import IdempotencyGate
    from coffee_passport.application.capture import CaptureOrchestrator
    from coffee_passport.app import create_app
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
