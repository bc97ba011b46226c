"""Monitoring infrastructure package."""

from edu360.infrastructure.monitoring.sentry_integration import (
    before_send,
    capture_escalation_failure,
    init_sentry,
)

__all__ = [
    "before_send",
    "capture_escalation_failure",
    "init_sentry",
]
