"""
Prometheus Metrics

Metrics for EDU360 observability.
Exposes metrics at /metrics endpoint for Prometheus scraping.

Only increment/observe here; never block on metrics operations.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from fastapi import APIRouter, Response

from edu360 import __version__

# =============================================================================
# SUBMISSION METRICS
# =============================================================================

SUBMISSIONS_TOTAL = Counter(
    "edu360_submissions_total",
    "Source events accepted",
    ["source_type"],  # mood, report, panic
)

# =============================================================================
# ESCALATION METRICS
# =============================================================================

DERIVED_ALERTS_TOTAL = Counter(
    "edu360_derived_alerts_total",
    "Derived alerts created by the escalation engine",
    ["source_type", "priority"],
)

ESCALATION_FAILURES_TOTAL = Counter(
    "edu360_escalation_failures_total",
    "Source events whose derived records could not be written",
    ["source_type"],
)

PARENT_NOTIFICATIONS_TOTAL = Counter(
    "edu360_parent_notifications_total",
    "Parent notifications written",
    ["type", "status"],  # status: created, failed
)

# =============================================================================
# CLASSIFIER METRICS
# =============================================================================

CLASSIFIER_OUTCOMES_TOTAL = Counter(
    "edu360_classifier_outcomes_total",
    "Sentiment verdicts by how they were produced",
    ["outcome"],  # llm, unconfigured, timeout, provider_error, invalid_response
)

# =============================================================================
# LLM METRICS
# =============================================================================

LLM_REQUESTS_TOTAL = Counter(
    "edu360_llm_requests_total",
    "Total LLM requests by provider",
    ["provider", "model", "status"],  # success, error, rate_limited, filtered
)

LLM_LATENCY = Histogram(
    "edu360_llm_latency_seconds",
    "LLM response latency",
    ["provider"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# =============================================================================
# REALTIME METRICS
# =============================================================================

BROADCAST_DELIVERIES_TOTAL = Counter(
    "edu360_broadcast_deliveries_total",
    "Messages handed to channel subscribers",
    ["channel", "result"],  # delivered, failed, dropped
)

LIVE_SUBSCRIBERS = Gauge(
    "edu360_live_subscribers",
    "Open channel subscriptions",
    ["channel"],
)

# =============================================================================
# API METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "edu360_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "edu360_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# =============================================================================
# SYSTEM INFO
# =============================================================================

SYSTEM_INFO = Info(
    "edu360_system",
    "EDU360 system information",
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def channel_label(channel: str) -> str:
    """Collapse per-parent channels into one label value."""
    if channel.startswith("parent_notifications_"):
        return "parent_notifications"
    return channel


def track_submission(source_type: str) -> None:
    SUBMISSIONS_TOTAL.labels(source_type=source_type).inc()


def track_derived_alert(source_type: str, priority: str) -> None:
    DERIVED_ALERTS_TOTAL.labels(source_type=source_type, priority=priority).inc()


def track_escalation_failure(source_type: str) -> None:
    ESCALATION_FAILURES_TOTAL.labels(source_type=source_type).inc()


def track_parent_notification(notification_type: str, status: str) -> None:
    PARENT_NOTIFICATIONS_TOTAL.labels(type=notification_type, status=status).inc()


def track_classifier_outcome(outcome: str) -> None:
    CLASSIFIER_OUTCOMES_TOTAL.labels(outcome=outcome).inc()


def track_llm_request(provider: str, model: str, status: str, duration_seconds: float) -> None:
    """Record one LLM call."""
    LLM_REQUESTS_TOTAL.labels(provider=provider, model=model, status=status).inc()
    LLM_LATENCY.labels(provider=provider).observe(duration_seconds)


def track_broadcast(channel: str, result: str) -> None:
    BROADCAST_DELIVERIES_TOTAL.labels(channel=channel_label(channel), result=result).inc()


def set_live_subscribers(channel: str, count: int) -> None:
    LIVE_SUBSCRIBERS.labels(channel=channel_label(channel)).set(count)


def track_http_request(method: str, endpoint: str, status_code: int, duration_seconds: float) -> None:
    HTTP_REQUESTS_TOTAL.labels(
        method=method, endpoint=endpoint, status_code=str(status_code)
    ).inc()
    HTTP_REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration_seconds)


def update_system_info(environment: str, version: str = __version__) -> None:
    """Update system info metric with current environment."""
    SYSTEM_INFO.info({
        "version": version,
        "environment": environment,
    })


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

metrics_router = APIRouter(tags=["metrics"])


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
