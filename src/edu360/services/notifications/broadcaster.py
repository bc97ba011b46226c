"""
Notification Broadcaster

Per-channel subscriber lists with push delivery.

Delivery contract:
- Subscribers receive every message published after they subscribed;
  nothing is replayed.
- Messages reach subscribers in publish order.
- One failing subscriber never blocks the others.
- Publishing to a channel without subscribers is a silent no-op.
- Only OPEN subscriptions receive messages.

Handlers are synchronous and must not block. Transports that need to
await (SSE) use `stream()`, which buffers into a bounded queue; a
subscriber that falls a full queue behind is dropped.
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Callable, Optional

from edu360.config.logging_config import get_logger
from edu360.domain.models.base import iso, utcnow
from edu360.infrastructure.metrics.prometheus_metrics import (
    set_live_subscribers,
    track_broadcast,
)

logger = get_logger(__name__)


class ConnectionState(StrEnum):
    """Subscription lifecycle. Only OPEN receives messages."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERRORED = "errored"


class MessageType(StrEnum):
    """Kind of realtime message."""

    INSERT = "INSERT"
    ALERT = "ALERT"
    UPDATE = "UPDATE"
    KEEPALIVE = "keepalive"


@dataclass(frozen=True)
class ChannelMessage:
    """
    Envelope delivered to subscribers.

    Attributes:
        type: Message kind
        channel: Channel it was published on
        sequence: Per-channel counter, strictly increasing
        record: Serialized record (None for keepalives)
        published_at: Publish timestamp
    """

    type: MessageType
    channel: str
    sequence: int
    record: Optional[dict[str, Any]] = None
    published_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "channel": self.channel,
            "sequence": self.sequence,
            "published_at": iso(self.published_at),
            "record": self.record,
        }


Handler = Callable[[ChannelMessage], None]


class SubscriberGoneError(Exception):
    """
    Raised by a handler whose transport is dead.

    The broadcaster moves the subscription to ERRORED and removes it.
    """


class StreamClosed(Exception):
    """The stream has ended and will yield no further messages."""


class Subscription:
    """
    One handler registered on one channel.

    `close()` unsubscribes and is idempotent.
    """

    _ids = itertools.count(1)

    def __init__(
        self,
        broadcaster: "NotificationBroadcaster",
        channel: str,
        handler: Handler,
        on_end: Optional[Callable[[], None]] = None,
    ) -> None:
        self.id = next(self._ids)
        self.channel = channel
        self.handler = handler
        self.state = ConnectionState.CONNECTING
        self._broadcaster = broadcaster
        self._on_end = on_end

    def _ended(self) -> None:
        self._broadcaster._remove(self)
        if self._on_end is not None:
            self._on_end()

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    def close(self) -> None:
        """Unsubscribe. Calling it again has no effect."""
        if self.state in (ConnectionState.CLOSED, ConnectionState.ERRORED):
            return
        self.state = ConnectionState.CLOSED
        self._ended()

    def fail(self, reason: str) -> None:
        """Mark the transport dead and deregister."""
        if self.state in (ConnectionState.CLOSED, ConnectionState.ERRORED):
            return
        self.state = ConnectionState.ERRORED
        self._ended()
        logger.info(
            "Subscriber dropped",
            channel=self.channel,
            subscription_id=self.id,
            reason=reason,
        )


class NotificationBroadcaster:
    """
    In-process publish/subscribe hub.

    Usage:
        broadcaster = NotificationBroadcaster()
        subscription = broadcaster.subscribe("panic_alerts", handler)
        broadcaster.publish("panic_alerts", alert.to_dict())
        subscription.close()
    """

    def __init__(self, queue_size: int = 256) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._sequences: dict[str, int] = {}
        self._queue_size = queue_size

    def subscribe(
        self,
        channel: str,
        handler: Handler,
        on_end: Optional[Callable[[], None]] = None,
    ) -> Subscription:
        """
        Register a handler on a channel.

        Args:
            channel: Channel name
            handler: Called with each message published afterwards
            on_end: Called once when the subscription closes or errors

        Returns:
            The subscription; its `close()` unsubscribes
        """
        subscription = Subscription(self, channel, handler, on_end)
        self._subscriptions.setdefault(channel, []).append(subscription)
        subscription.state = ConnectionState.OPEN
        set_live_subscribers(channel, self.subscriber_count(channel))
        logger.debug("Subscriber added", channel=channel, subscription_id=subscription.id)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.channel)
        if not subscribers or subscription not in subscribers:
            return
        subscribers.remove(subscription)
        if not subscribers:
            del self._subscriptions[subscription.channel]
        set_live_subscribers(subscription.channel, self.subscriber_count(subscription.channel))

    def publish(
        self,
        channel: str,
        record: Optional[dict[str, Any]],
        message_type: MessageType = MessageType.INSERT,
    ) -> ChannelMessage:
        """
        Deliver a record to every open subscriber of a channel.

        Handler exceptions are caught and logged per subscriber.

        Returns:
            The published message
        """
        sequence = self._sequences.get(channel, 0) + 1
        self._sequences[channel] = sequence
        message = ChannelMessage(
            type=message_type,
            channel=channel,
            sequence=sequence,
            record=record,
        )

        # Snapshot: handlers may unsubscribe while we iterate
        for subscription in list(self._subscriptions.get(channel, ())):
            if not subscription.is_open:
                continue
            try:
                subscription.handler(message)
            except SubscriberGoneError as e:
                track_broadcast(channel, "dropped")
                subscription.fail(str(e) or "transport closed")
            except Exception as e:
                track_broadcast(channel, "failed")
                logger.error(
                    "Subscriber handler failed",
                    channel=channel,
                    subscription_id=subscription.id,
                    error_type=type(e).__name__,
                    error=str(e),
                )
            else:
                track_broadcast(channel, "delivered")

        return message

    def stream(self, channel: str) -> "ChannelStream":
        """Open a queue-backed stream on a channel."""
        return ChannelStream(self, channel, self._queue_size)

    def subscriber_count(self, channel: str) -> int:
        return sum(1 for s in self._subscriptions.get(channel, ()) if s.is_open)

    def channel_counts(self) -> dict[str, int]:
        """Open subscriber count per channel with at least one subscriber."""
        return {channel: self.subscriber_count(channel) for channel in sorted(self._subscriptions)}

    def close_all(self) -> None:
        """Close every subscription. Called at shutdown."""
        for subscribers in list(self._subscriptions.values()):
            for subscription in list(subscribers):
                subscription.close()


class ChannelStream:
    """
    Async iterator over one channel subscription.

    Messages are buffered in a bounded queue. When the queue is full the
    subscription is moved to ERRORED, pending messages are discarded and
    iteration ends.

    Usage:
        async with broadcaster.stream("mood_checkins") as stream:
            async for message in stream:
                ...
    """

    def __init__(self, broadcaster: NotificationBroadcaster, channel: str, queue_size: int) -> None:
        self.channel = channel
        self._queue: asyncio.Queue[Optional[ChannelMessage]] = asyncio.Queue(maxsize=queue_size)
        self._finished = False
        self._subscription = broadcaster.subscribe(channel, self._enqueue, on_end=self._wake_reader)

    @property
    def state(self) -> ConnectionState:
        return self._subscription.state

    def _enqueue(self, message: ChannelMessage) -> None:
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            raise SubscriberGoneError("subscriber queue overflow") from None

    def _wake_reader(self) -> None:
        # Discard pending messages so the end-of-stream marker fits
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def receive(self, timeout: Optional[float] = None) -> Optional[ChannelMessage]:
        """
        Wait for the next message.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            The message, or None if the timeout elapsed

        Raises:
            StreamClosed: If the stream was closed or dropped
        """
        if self._finished:
            raise StreamClosed(self.channel)
        try:
            if timeout is None:
                message = await self._queue.get()
            else:
                message = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if message is None:
            self._finished = True
            raise StreamClosed(self.channel)
        return message

    def close(self) -> None:
        """Unsubscribe and end iteration. Idempotent."""
        self._subscription.close()

    def __aiter__(self) -> "ChannelStream":
        return self

    async def __anext__(self) -> ChannelMessage:
        try:
            message = await self.receive()
        except StreamClosed:
            raise StopAsyncIteration from None
        return message

    async def __aenter__(self) -> "ChannelStream":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()
