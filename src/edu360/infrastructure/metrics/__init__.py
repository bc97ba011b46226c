"""Metrics infrastructure package."""

from edu360.infrastructure.metrics.prometheus_metrics import (
    # Submission and escalation metrics
    SUBMISSIONS_TOTAL,
    DERIVED_ALERTS_TOTAL,
    ESCALATION_FAILURES_TOTAL,
    PARENT_NOTIFICATIONS_TOTAL,
    # Classifier and LLM metrics
    CLASSIFIER_OUTCOMES_TOTAL,
    LLM_REQUESTS_TOTAL,
    LLM_LATENCY,
    # Realtime metrics
    BROADCAST_DELIVERIES_TOTAL,
    LIVE_SUBSCRIBERS,
    # API metrics
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    # Helpers
    track_submission,
    track_derived_alert,
    track_escalation_failure,
    track_parent_notification,
    track_classifier_outcome,
    track_llm_request,
    track_broadcast,
    set_live_subscribers,
    track_http_request,
    update_system_info,
    # Router
    metrics_router,
)

__all__ = [
    "SUBMISSIONS_TOTAL",
    "DERIVED_ALERTS_TOTAL",
    "ESCALATION_FAILURES_TOTAL",
    "PARENT_NOTIFICATIONS_TOTAL",
    "CLASSIFIER_OUTCOMES_TOTAL",
    "LLM_REQUESTS_TOTAL",
    "LLM_LATENCY",
    "BROADCAST_DELIVERIES_TOTAL",
    "LIVE_SUBSCRIBERS",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "track_submission",
    "track_derived_alert",
    "track_escalation_failure",
    "track_parent_notification",
    "track_classifier_outcome",
    "track_llm_request",
    "track_broadcast",
    "set_live_subscribers",
    "track_http_request",
    "update_system_info",
    "metrics_router",
]
