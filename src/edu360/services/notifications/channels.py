"""
Realtime channel names.

Staff dashboards listen on the three source channels; each parent has a
private channel for notifications about their children.
"""

from uuid import UUID

PANIC_ALERTS = "panic_alerts"
ANONYMOUS_REPORTS = "anonymous_reports"
MOOD_CHECKINS = "mood_checkins"

STAFF_CHANNELS: frozenset[str] = frozenset({PANIC_ALERTS, ANONYMOUS_REPORTS, MOOD_CHECKINS})

PARENT_CHANNEL_PREFIX = "parent_notifications_"


def parent_channel(parent_id: UUID) -> str:
    """Channel carrying notifications for one parent."""
    return f"{PARENT_CHANNEL_PREFIX}{parent_id}"


def parent_id_from_channel(channel: str) -> UUID | None:
    """Parent id encoded in a parent channel name, or None."""
    if not channel.startswith(PARENT_CHANNEL_PREFIX):
        return None
    try:
        return UUID(channel[len(PARENT_CHANNEL_PREFIX):])
    except ValueError:
        return None


def is_valid_channel(channel: str) -> bool:
    return channel in STAFF_CHANNELS or parent_id_from_channel(channel) is not None
