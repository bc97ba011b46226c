"""
Server-Sent Events transport for broadcaster channels.

Wraps a ChannelStream in an SSE byte stream with a periodic keepalive.
The subscription ends exactly when the client goes away: disconnects
are polled between messages and the stream is closed in `finally`.
"""

import json
import time
from typing import AsyncGenerator, Awaitable, Protocol

from fastapi.responses import StreamingResponse

from edu360.config.logging_config import get_logger
from edu360.services.notifications.broadcaster import (
    ChannelMessage,
    ChannelStream,
    StreamClosed,
)

logger = get_logger(__name__)

KEEPALIVE_EVENT = b'data: {"type":"keepalive"}\n\n'

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class DisconnectAware(Protocol):
    def is_disconnected(self) -> Awaitable[bool]: ...


def format_sse(message: ChannelMessage) -> bytes:
    """Encode a channel message as one SSE event."""
    payload = json.dumps(message.to_dict(), separators=(",", ":"))
    return f"id: {message.sequence}\ndata: {payload}\n\n".encode("utf-8")


async def sse_event_stream(
    request: DisconnectAware,
    stream: ChannelStream,
    heartbeat_seconds: float = 30.0,
    poll_seconds: float = 1.0,
) -> AsyncGenerator[bytes, None]:
    """
    Yield SSE events for a channel until the client disconnects.

    Args:
        request: Incoming request (anything with `is_disconnected()`)
        stream: Open channel stream, closed when the generator ends
        heartbeat_seconds: Keepalive interval
        poll_seconds: How often to check for a disconnect while idle
    """
    wait = min(poll_seconds, heartbeat_seconds)
    last_keepalive = time.monotonic()
    try:
        while True:
            if await request.is_disconnected():
                break

            now = time.monotonic()
            if now - last_keepalive >= heartbeat_seconds:
                yield KEEPALIVE_EVENT
                last_keepalive = now

            try:
                message = await stream.receive(timeout=wait)
            except StreamClosed:
                break
            if message is not None:
                yield format_sse(message)
    finally:
        stream.close()
        logger.debug("SSE stream ended", channel=stream.channel, state=stream.state.value)


def sse_response(
    request: DisconnectAware,
    stream: ChannelStream,
    heartbeat_seconds: float,
) -> StreamingResponse:
    return StreamingResponse(
        sse_event_stream(request, stream, heartbeat_seconds),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
