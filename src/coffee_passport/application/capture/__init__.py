"""Application capture – EPCIS event capture behind the idempotency gate."""
from coffee_passport.application.capture.errors import (
    CaptureProcessingError,
    CaptureValidationError,
    ProcessingInProgressError,
    SignatureError,
)
from coffee_passport.application.capture.ingestion import EventIngestor, StubEventIngestor
from coffee_passport.application.capture.models import CaptureContext, CaptureResult
from coffee_passport.application.capture.orchestrator import CaptureOrchestrator
from coffee_passport.application.capture.service import CaptureService
from coffee_passport.application.capture.signature import SignatureVerifier
from coffee_passport.application.capture.validator import (
    EPCIS_EVENT_TYPES,
    EpcisEventValidator,
    EventValidator,
    ValidationResult,
)

__all__ = [
    "EPCIS_EVENT_TYPES",
    "CaptureContext",
    "CaptureOrchestrator",
    "CaptureProcessingError",
    "CaptureResult",
    "CaptureService",
    "CaptureValidationError",
    "EpcisEventValidator",
    "EventIngestor",
    "EventValidator",
    "ProcessingInProgressError",
    "SignatureError",
    "SignatureVerifier",
    "StubEventIngestor",
    "ValidationResult",
]
