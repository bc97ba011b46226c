"""Realtime notification broadcasting."""

from edu360.services.notifications.broadcaster import (
    ChannelMessage,
    ChannelStream,
    ConnectionState,
    MessageType,
    NotificationBroadcaster,
    StreamClosed,
    SubscriberGoneError,
    Subscription,
)
from edu360.services.notifications.channels import (
    ANONYMOUS_REPORTS,
    MOOD_CHECKINS,
    PANIC_ALERTS,
    STAFF_CHANNELS,
    is_valid_channel,
    parent_channel,
    parent_id_from_channel,
)

__all__ = [
    "ANONYMOUS_REPORTS",
    "MOOD_CHECKINS",
    "PANIC_ALERTS",
    "STAFF_CHANNELS",
    "ChannelMessage",
    "ChannelStream",
    "ConnectionState",
    "MessageType",
    "NotificationBroadcaster",
    "StreamClosed",
    "SubscriberGoneError",
    "Subscription",
    "is_valid_channel",
    "parent_channel",
    "parent_id_from_channel",
]
