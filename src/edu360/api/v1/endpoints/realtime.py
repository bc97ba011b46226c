"""
Realtime Endpoints

Server-Sent Events feed for one broadcaster channel. Staff dashboards
open `panic_alerts`, `anonymous_reports` and `mood_checkins`; a parent
opens `parent_notifications_{parent_id}`.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from edu360.api.dependencies import get_app_settings, get_broadcaster
from edu360.api.sse import sse_response
from edu360.config.logging_config import get_logger
from edu360.config.settings import Settings
from edu360.services.notifications.broadcaster import NotificationBroadcaster
from edu360.services.notifications.channels import is_valid_channel

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/{channel}",
    summary="Subscribe to a channel (text/event-stream)",
    response_class=StreamingResponse,
)
async def subscribe(
    channel: str,
    request: Request,
    broadcaster: NotificationBroadcaster = Depends(get_broadcaster),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    """Messages published after the connection opens; no replay."""
    if not is_valid_channel(channel):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown channel: {channel}",
        )

    stream = broadcaster.stream(channel)
    logger.info("Realtime subscriber connected", channel=channel)
    return sse_response(request, stream, settings.realtime.heartbeat_interval_seconds)
