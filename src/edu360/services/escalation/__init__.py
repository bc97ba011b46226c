"""Escalation policy for incoming wellness events."""

from edu360.services.escalation.escalation_engine import (
    MOOD_ALERT_MESSAGE,
    EscalationEngine,
    EscalationError,
)

__all__ = [
    "MOOD_ALERT_MESSAGE",
    "EscalationEngine",
    "EscalationError",
]
