"""Where captured rows go: the service database or the HTTP ingest API."""
import asyncio
import json
import logging
from collections.abc import Coroutine
from typing import Any, Protocol
from urllib.request import Request, urlopen

from sqlalchemy.engine import Engine
from sqlmodel import Session

from giftx.schemas import InteractionEventIn, VisitIn
from giftx.services.event_log import record_event, record_visit

log = logging.getLogger("giftx.tracking")

# Strong references so scheduled writes are not garbage collected mid-flight
_background: set[asyncio.Task] = set()


class EventLog(Protocol):
    async def insert_visit(self, row: dict[str, Any]) -> None: ...

    async def insert_event(self, row: dict[str, Any]) -> None: ...


async def _swallow(coro: Coroutine[Any, Any, Any], what: str) -> None:
    try:
        await coro
    except Exception:
        # Analytics must never surface to the visitor; the row is lost, not retried
        log.exception("Failed to track %s", what)


def fire_and_forget(coro: Coroutine[Any, Any, Any], what: str = "event") -> asyncio.Task:
    """Schedule a write on the running loop without awaiting it."""
    task = asyncio.get_running_loop().create_task(_swallow(coro, what))
    _background.add(task)
    task.add_done_callback(_background.discard)
    return task


class DatabaseEventLog:
    """Writes through SQLModel sessions one at a time; the blocking part runs in a worker thread."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._lock = asyncio.Lock()

    def _write(self, kind: str, row: dict[str, Any]) -> int | None:
        with Session(self.engine) as db:
            if kind == "visit":
                return record_visit(db, VisitIn(**row)).id
            return record_event(db, InteractionEventIn(**row)).id

    async def insert_visit(self, row: dict[str, Any]) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, "visit", row)

    async def insert_event(self, row: dict[str, Any]) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, "event", row)


class HttpEventLog:
    """Posts rows to a running service (/track/visit, /track/event)."""

    def __init__(self, base_url: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, path: str, row: dict[str, Any]) -> dict:
        req = Request(
            f"{self.base_url}{path}",
            data=json.dumps(row).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        with urlopen(req, timeout=self.timeout) as r:
            return json.loads(r.read().decode() or "{}")

    async def insert_visit(self, row: dict[str, Any]) -> None:
        await asyncio.to_thread(self._post, "/track/visit", row)

    async def insert_event(self, row: dict[str, Any]) -> None:
        await asyncio.to_thread(self._post, "/track/event", row)
