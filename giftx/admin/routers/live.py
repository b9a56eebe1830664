"""Active now: distinct sessions currently on the site, grouped by page."""
import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Request, WebSocket, WebSocketDisconnect, status

from giftx.admin.deps import admin_secret_ok, require_admin
from giftx.core.config import settings
from giftx.realtime import ActiveUsersObserver, get_hub
from giftx.schemas import ActiveUsers

log = logging.getLogger("giftx.realtime")

router = APIRouter()

# Only the newest snapshots matter; older ones are dropped when a client falls behind
LIVE_QUEUE_SIZE = 16


def offer_latest(queue: asyncio.Queue, item) -> None:
    """put_nowait that drops the oldest item instead of raising when the queue is full."""
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(item)


@router.get("", response_model=ActiveUsers)
@router.get("/", response_model=ActiveUsers, include_in_schema=False)
def live_snapshot(request: Request, _=Depends(require_admin)):
    observer: ActiveUsersObserver = request.app.state.active_users
    return observer.snapshot()


@router.websocket("/ws")
async def live_stream(websocket: WebSocket, admin_secret: str | None = Query(None)):
    """Pushes {count, users, pages} on every presence sync until the admin disconnects."""
    secret = websocket.headers.get("x-admin-secret") or admin_secret
    if not admin_secret_ok(secret):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()
    updates: asyncio.Queue[ActiveUsers] = asyncio.Queue(maxsize=LIVE_QUEUE_SIZE)
    observer = ActiveUsersObserver(get_hub(), settings.presence_channel, settings.presence_observer_key)
    observer.add_listener(lambda snap: offer_latest(updates, snap))
    observer.start()

    async def pump():
        while True:
            snap = await updates.get()
            await websocket.send_json(snap.model_dump())

    sender = asyncio.create_task(pump())
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        observer.stop()
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as e:
            log.warning("admin live stream send failed: %s", e)
