"""Presence over WebSockets: each open tab holds one connection on the online-users channel."""
import json
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from giftx.core.config import settings
from giftx.realtime import SUBSCRIBED, PresencePublisher, get_hub

log = logging.getLogger("giftx.realtime")

router = APIRouter(prefix="/realtime", tags=["realtime"])


@router.websocket("/online-users")
async def online_users(websocket: WebSocket, session_id: str = Query(..., min_length=1, max_length=64)):
    """
    Client messages: {"page": "/path"} on mount and on every route change.
    The first message joins the channel and is answered with {"status": "SUBSCRIBED"}.
    Closing the socket leaves the channel.
    """
    await websocket.accept()
    publisher = PresencePublisher(get_hub(), session_id, settings.presence_channel)
    try:
        while True:
            try:
                msg = json.loads(await websocket.receive_text())
            except ValueError:
                await websocket.send_json({"error": "invalid JSON"})
                continue
            page = (msg or {}).get("page") if isinstance(msg, dict) else None
            if not page:
                await websocket.send_json({"error": "page is required"})
                continue
            if not publisher.joined:
                publisher.mount(page)
                await websocket.send_json({"status": SUBSCRIBED if publisher.joined else "CHANNEL_ERROR"})
            else:
                publisher.navigate(page)
    except WebSocketDisconnect:
        pass
    finally:
        publisher.unmount()
        log.debug("presence left: %s", session_id)
