"""Turns page views, clicks, scroll depth and form submissions into log rows."""
import asyncio
import logging
from typing import Any

from giftx.constants import (
    ELEMENT_CLASS_LIMIT,
    ELEMENT_TEXT_LIMIT,
    EVENT_CLICK,
    EVENT_FORM_SUBMIT,
    EVENT_SCROLL,
    SCROLL_THRESHOLDS,
)
from giftx.core.config import settings
from giftx.utils import truncate

from .debounce import Debouncer
from .dom import Element, Viewport, resolve_click_target
from .session import SessionContext
from .sink import EventLog, fire_and_forget

log = logging.getLogger("giftx.tracking")


class _Writer:
    """Keeps track of in-flight writes so callers can drain them on teardown."""

    def __init__(self):
        self._pending: set[asyncio.Task] = set()

    def _spawn(self, coro, what: str) -> asyncio.Task:
        task = fire_and_forget(coro, what)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending))


class VisitTracker(_Writer):
    """One visitors row per route change. The referrer is the one seen at page load."""

    def __init__(self, session: SessionContext, sink: EventLog, referrer: str | None = None, user_agent: str = ""):
        super().__init__()
        self.session = session
        self.sink = sink
        self.referrer = referrer or None
        self.user_agent = user_agent

    def navigate(self, page_path: str) -> asyncio.Task:
        row = {
            "session_id": self.session.session_id,
            "page_path": page_path,
            "referrer": self.referrer,
            "user_agent": self.user_agent,
        }
        return self._spawn(self.sink.insert_visit(row), "visit")


class ScrollDepthState:
    """High-water mark and last threshold sent, scoped to one route view."""

    def __init__(self, thresholds: tuple[int, ...] = SCROLL_THRESHOLDS):
        self.thresholds = thresholds
        self.reset()

    def reset(self) -> None:
        self.max_depth = 0
        self.last_sent = 0

    def evaluate(self, depth: int) -> list[int]:
        """Thresholds newly crossed by `depth`, ascending; empty if nothing new."""
        if depth <= self.max_depth:
            return []
        self.max_depth = depth
        crossed = [t for t in self.thresholds if self.last_sent < t <= depth]
        if crossed:
            self.last_sent = crossed[-1]
        return crossed


class InteractionTracker(_Writer):
    """
    Click, scroll and form-submit capture for one mounted page shell.

    Handlers are attached by mount() and stay attached across route changes;
    navigate() only resets the route-scoped scroll state.
    """

    def __init__(
        self,
        session: SessionContext,
        sink: EventLog,
        viewport: Viewport | None = None,
        scroll_debounce: float | None = None,
    ):
        super().__init__()
        self.session = session
        self.sink = sink
        self.viewport = viewport or Viewport()
        self.page_path: str | None = None
        self.scroll = ScrollDepthState()
        if scroll_debounce is None:
            scroll_debounce = settings.scroll_debounce_ms / 1000
        self._debouncer = Debouncer(scroll_debounce, self.evaluate_scroll)
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self, page_path: str) -> None:
        self._mounted = True
        self.navigate(page_path)

    def unmount(self) -> None:
        self._debouncer.cancel()
        self._mounted = False

    def navigate(self, page_path: str) -> None:
        self._debouncer.cancel()
        self.scroll.reset()
        self.page_path = page_path

    def track(self, **event: Any) -> asyncio.Task:
        row = {
            "session_id": self.session.session_id,
            "page_path": self.page_path,
            "viewport_width": self.viewport.width,
            "viewport_height": self.viewport.height,
            **event,
        }
        return self._spawn(self.sink.insert_event(row), event["event_type"])

    def on_click(self, target: Element) -> asyncio.Task | None:
        if not self._mounted:
            return None
        element = resolve_click_target(target)
        if element is None:
            return None
        x, y = element.rect.midpoint()
        return self.track(
            event_type=EVENT_CLICK,
            element_tag=element.tag,
            element_text=truncate(element.text_content, ELEMENT_TEXT_LIMIT),
            element_id=element.id or None,
            element_class=truncate(element.class_name, ELEMENT_CLASS_LIMIT),
            x_position=x,
            y_position=y,
        )

    def on_scroll(self, scroll_y: float | None = None) -> None:
        if not self._mounted:
            return
        if scroll_y is not None:
            self.viewport.scroll_y = scroll_y
        self._debouncer.feed()

    def evaluate_scroll(self) -> list[int]:
        """Debounced evaluation of the current resting position."""
        if not self._mounted:
            return []
        crossed = self.scroll.evaluate(self.viewport.scroll_depth())
        for threshold in crossed:
            self.track(event_type=EVENT_SCROLL, scroll_depth=threshold)
        if crossed:
            log.debug("scroll depth %s reached on %s", crossed[-1], self.page_path)
        return crossed

    def on_submit(self, form: Element) -> asyncio.Task | None:
        if not self._mounted:
            return None
        return self.track(
            event_type=EVENT_FORM_SUBMIT,
            element_tag="form",
            element_id=form.id or None,
            element_class=truncate(form.class_name, ELEMENT_CLASS_LIMIT),
        )
