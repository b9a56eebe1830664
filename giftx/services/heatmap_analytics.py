"""Heatmap dashboard: click hotspots, per-page actions, scroll-depth distribution."""
from collections.abc import Sequence
from datetime import datetime

from sqlmodel import Session, select

from giftx.constants import EVENT_CLICK, EVENT_FORM_SUBMIT, EVENT_SCROLL, SCROLL_THRESHOLDS
from giftx.models import VisitorEvent
from giftx.schemas import ClickHotspot, InteractionSummary, PageAction, ScrollDepthBucket
from giftx.utils import round_half_up

from .visitor_analytics import RECENT_ROWS, window_start

TOP_HOTSPOTS = 15
TOP_PAGES = 10
HOTSPOT_KEY_CHARS = 30
HOTSPOT_LABEL_CHARS = 50


def fetch_interactions(db: Session, days: int = 7, now: datetime | None = None) -> list[VisitorEvent]:
    """Interaction events of the last `days` days, newest first."""
    stmt = (
        select(VisitorEvent)
        .where(VisitorEvent.created_at >= window_start(days, now))
        .order_by(VisitorEvent.created_at.desc(), VisitorEvent.id.desc())
    )
    return list(db.exec(stmt).all())


def hotspot_key(e: VisitorEvent) -> str:
    return e.element_id or (e.element_text or "")[:HOTSPOT_KEY_CHARS] or e.element_tag or "unknown"


def hotspot_label(e: VisitorEvent) -> str:
    return (e.element_text or "")[:HOTSPOT_LABEL_CHARS] or e.element_tag or "Unknown"


def summarize_interactions(events: Sequence[VisitorEvent]) -> InteractionSummary:
    """Single pass over rows already ordered newest first. Rows are not modified."""
    hotspots: dict[str, ClickHotspot] = {}
    pages: dict[str, PageAction] = {}
    depth_counts = {t: 0 for t in SCROLL_THRESHOLDS}
    depth_total = 0
    totals = {EVENT_CLICK: 0, EVENT_SCROLL: 0, EVENT_FORM_SUBMIT: 0}
    sessions: set[str] = set()

    for e in events:
        sessions.add(e.session_id)
        page = pages.get(e.page_path)
        if page is None:
            page = pages[e.page_path] = PageAction(page=e.page_path)
        if e.event_type in totals:
            totals[e.event_type] += 1

        if e.event_type == EVENT_CLICK:
            page.clicks += 1
            key = hotspot_key(e)
            spot = hotspots.get(key)
            if spot is None:
                hotspots[key] = ClickHotspot(element=key, count=1, element_text=hotspot_label(e))
            else:
                spot.count += 1
        elif e.event_type == EVENT_SCROLL:
            page.scrolls += 1
            if e.scroll_depth:
                depth_total += 1
                if e.scroll_depth in depth_counts:
                    depth_counts[e.scroll_depth] += 1
        elif e.event_type == EVENT_FORM_SUBMIT:
            page.form_submits += 1

    click_hotspots = sorted(hotspots.values(), key=lambda h: h.count, reverse=True)[:TOP_HOTSPOTS]
    # form submits are reported but do not rank pages
    page_actions = sorted(pages.values(), key=lambda p: p.clicks + p.scrolls, reverse=True)[:TOP_PAGES]
    scroll_depth = [
        ScrollDepthBucket(
            depth=f"{t}%",
            count=n,
            percentage=round_half_up(n / depth_total * 100) if depth_total else 0,
        )
        for t, n in depth_counts.items()
    ]

    return InteractionSummary(
        total_clicks=totals[EVENT_CLICK],
        total_scrolls=totals[EVENT_SCROLL],
        total_form_submits=totals[EVENT_FORM_SUBMIT],
        unique_sessions=len(sessions),
        click_hotspots=click_hotspots,
        page_actions=page_actions,
        scroll_depth=scroll_depth,
        recent_events=list(events[:RECENT_ROWS]),
    )
