"""Write-side wellness operations."""

from edu360.services.wellness.wellness_service import (
    ConflictError,
    InvalidReferenceError,
    SubmissionResult,
    WellnessService,
    WellnessServiceError,
)

__all__ = [
    "ConflictError",
    "InvalidReferenceError",
    "SubmissionResult",
    "WellnessService",
    "WellnessServiceError",
]
