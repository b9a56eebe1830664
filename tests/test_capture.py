"""Event capture: session id, click resolution, scroll thresholds, form submits, visits."""
import asyncio
import logging

import pytest

from giftx.constants import SESSION_STORAGE_KEY
from giftx.core.config import settings
from giftx.tracking import (
    Element,
    InteractionTracker,
    PageTracker,
    Rect,
    SessionContext,
    SessionStorage,
    Viewport,
    VisitTracker,
    resolve_click_target,
)


def _tracker(log, **kw) -> InteractionTracker:
    # 400px of scrollable distance: depth N% == scroll_y of 4 * N
    viewport = Viewport(width=1000, height=100, document_height=500)
    return InteractionTracker(SessionContext(), log, viewport=viewport, **kw)


async def _settle(tracker) -> None:
    await asyncio.sleep(0)
    await tracker.drain()


# --- session ---------------------------------------------------------------

def test_session_id_created_once_per_tab():
    storage = SessionStorage()
    ctx = SessionContext(storage)
    sid = ctx.session_id
    assert sid and ctx.session_id == sid
    assert storage.get_item(SESSION_STORAGE_KEY) == sid


def test_session_id_read_from_existing_storage():
    ctx = SessionContext(SessionStorage({SESSION_STORAGE_KEY: "tab-42"}))
    assert ctx.session_id == "tab-42"


def test_session_id_regenerated_when_storage_cleared():
    storage = SessionStorage()
    ctx = SessionContext(storage)
    first = ctx.session_id
    storage.remove_item(SESSION_STORAGE_KEY)
    assert ctx.session_id != first


# --- click resolution -------------------------------------------------------

def test_span_inside_button_resolves_to_button():
    button = Element("BUTTON", id="buy", rect=Rect(100, 400, 120, 40))
    span = button.append(Element("SPAN", text="Buy now"))
    assert resolve_click_target(span) is button


def test_plain_content_is_not_interactive():
    section = Element("SECTION")
    para = section.append(Element("P", text="Trade gift cards"))
    assert resolve_click_target(para) is None


@pytest.mark.parametrize("attrs", [{"role": "button"}, {"data-track": "hero-cta"}])
def test_role_button_and_tracking_marker_are_interactive(attrs):
    card = Element("DIV", attributes=attrs)
    img = card.append(Element("IMG"))
    assert resolve_click_target(img) is card


def test_click_records_button_not_span(event_log):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/buy")
        button = Element("BUTTON", id="buy-now", class_name="btn btn-primary", rect=Rect(100, 400, 120, 40))
        span = button.append(Element("SPAN", text="Buy now"))
        tracker.on_click(span)
        await _settle(tracker)

    asyncio.run(scenario())
    assert len(event_log.events) == 1
    row = event_log.events[0]
    assert row["event_type"] == "click"
    assert row["element_tag"] == "button"
    assert row["element_text"] == "Buy now"
    assert row["element_id"] == "buy-now"
    assert row["element_class"] == "btn btn-primary"
    assert (row["x_position"], row["y_position"]) == (160, 420)
    assert row["page_path"] == "/buy"
    assert row["viewport_width"] == 1000


def test_click_truncates_text_and_class(event_log):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/")
        link = Element("A", text="x" * 150, class_name="c" * 300, rect=Rect(0, 0, 3, 3))
        tracker.on_click(link)
        await _settle(tracker)

    asyncio.run(scenario())
    row = event_log.events[0]
    assert len(row["element_text"]) == 100
    assert len(row["element_class"]) == 200
    assert row["element_id"] is None
    assert (row["x_position"], row["y_position"]) == (2, 2)


def test_click_on_non_interactive_is_ignored(event_log):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/")
        assert tracker.on_click(Element("DIV", text="banner")) is None
        await _settle(tracker)

    asyncio.run(scenario())
    assert event_log.events == []


def test_handlers_detached_after_unmount(event_log):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/")
        tracker.unmount()
        tracker.on_click(Element("BUTTON"))
        tracker.on_submit(Element("FORM"))
        await _settle(tracker)

    asyncio.run(scenario())
    assert event_log.events == []


# --- scroll ---------------------------------------------------------------

def test_scroll_depth_not_scrollable_is_zero():
    assert Viewport(height=800, document_height=600, scroll_y=50).scroll_depth() == 0
    assert Viewport(height=100, document_height=500, scroll_y=200).scroll_depth() == 50


@pytest.mark.parametrize(
    "depths, expected",
    [
        ([10, 30, 60, 80, 100], [25, 50, 75, 100]),
        ([100], [25, 50, 75, 100]),
        ([30, 20, 26, 49, 51], [25, 50]),
        ([80, 40, 90], [25, 50, 75]),
        ([24], []),
        ([0, 0, 0], []),
    ],
)
def test_scroll_thresholds_emitted_once_ascending(event_log, depths, expected):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/faq")
        for depth in depths:
            tracker.viewport.scroll_y = depth * 4
            tracker.evaluate_scroll()
        await _settle(tracker)

    asyncio.run(scenario())
    assert [e["scroll_depth"] for e in event_log.events] == expected
    assert all(e["event_type"] == "scroll" for e in event_log.events)


def test_route_change_resets_scroll_state(event_log):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/faq")
        tracker.viewport.scroll_y = 400
        tracker.evaluate_scroll()
        tracker.navigate("/blog")
        assert tracker.scroll.max_depth == 0
        assert tracker.scroll.last_sent == 0
        tracker.viewport.scroll_y = 100
        tracker.evaluate_scroll()
        await _settle(tracker)

    asyncio.run(scenario())
    sent = [(e["page_path"], e["scroll_depth"]) for e in event_log.events]
    assert sent == [("/faq", 25), ("/faq", 50), ("/faq", 75), ("/faq", 100), ("/blog", 25)]


def test_scroll_debounce_evaluates_final_resting_position(event_log):
    async def scenario():
        tracker = _tracker(event_log, scroll_debounce=0.02)
        tracker.mount("/")
        for y in (40, 120, 180, 260):
            tracker.on_scroll(y)
        # burst still pending: nothing evaluated yet
        assert event_log.events == []
        await asyncio.sleep(0.1)
        await _settle(tracker)

    asyncio.run(scenario())
    # one evaluation at depth 65 after the burst
    assert [e["scroll_depth"] for e in event_log.events] == [25, 50]


def test_navigation_cancels_pending_scroll_evaluation(event_log):
    async def scenario():
        tracker = _tracker(event_log, scroll_debounce=0.02)
        tracker.mount("/")
        tracker.on_scroll(400)
        tracker.navigate("/sell")
        tracker.viewport.scroll_y = 0
        await asyncio.sleep(0.1)
        await _settle(tracker)

    asyncio.run(scenario())
    assert event_log.events == []


# --- forms ----------------------------------------------------------------

def test_form_submit_records_form_identity(event_log):
    async def scenario():
        tracker = _tracker(event_log)
        tracker.mount("/sell")
        tracker.on_submit(Element("FORM", id="sell-form", class_name="space-y-4"))
        tracker.on_submit(Element("FORM"))
        await _settle(tracker)

    asyncio.run(scenario())
    first, second = event_log.events
    assert first["event_type"] == "form_submit"
    assert first["element_tag"] == "form"
    assert first["element_id"] == "sell-form"
    assert first["element_class"] == "space-y-4"
    assert second["element_id"] is None and second["element_class"] is None
    assert "x_position" not in first and "scroll_depth" not in first


# --- visits & fire-and-forget -----------------------------------------------

def test_visit_per_navigation_keeps_load_time_referrer(event_log):
    async def scenario():
        ctx = SessionContext()
        tracker = VisitTracker(ctx, event_log, referrer="https://www.google.com/", user_agent="Mozilla/5.0")
        tracker.navigate("/")
        tracker.navigate("/gift-cards")
        await tracker.drain()
        return ctx.session_id

    sid = asyncio.run(scenario())
    assert [v["page_path"] for v in event_log.visits] == ["/", "/gift-cards"]
    assert all(v["referrer"] == "https://www.google.com/" for v in event_log.visits)
    assert all(v["session_id"] == sid for v in event_log.visits)


def test_empty_referrer_stored_as_none(event_log):
    async def scenario():
        tracker = VisitTracker(SessionContext(), event_log, referrer="")
        tracker.navigate("/")
        await tracker.drain()

    asyncio.run(scenario())
    assert event_log.visits[0]["referrer"] is None


def test_write_failures_are_logged_and_swallowed(failing_log, caplog):
    async def scenario():
        tracker = PageTracker(SessionContext(), failing_log, viewport=Viewport(height=100, document_height=500))
        tracker.mount("/buy")
        tracker.interactions.on_click(Element("BUTTON", text="Buy"))
        tracker.navigate("/sell")
        await tracker.drain()
        tracker.unmount()

    with caplog.at_level(logging.ERROR, logger="giftx.tracking"):
        asyncio.run(scenario())
    messages = [r.getMessage() for r in caplog.records]
    assert "Failed to track visit" in messages
    assert "Failed to track click" in messages


def test_scroll_debounce_defaults_to_configured_window(event_log, monkeypatch):
    monkeypatch.setattr(settings, "scroll_debounce_ms", 50)
    tracker = PageTracker(SessionContext(), event_log)
    assert tracker.interactions._debouncer.delay == pytest.approx(0.05)
    assert _tracker(event_log, scroll_debounce=0.02)._debouncer.delay == 0.02
