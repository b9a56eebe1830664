from pydantic import BaseModel

from giftx.models import Visitor, VisitorEvent


class DailyVisit(BaseModel):
    date: str
    visits: int
    unique_visitors: int


class PageVisit(BaseModel):
    page: str
    visits: int


class ReferrerVisit(BaseModel):
    referrer: str
    visits: int


class VisitorSummary(BaseModel):
    total_visits: int
    unique_sessions: int
    today_visits: int
    today_unique: int
    daily_visits: list[DailyVisit]
    top_pages: list[PageVisit]
    top_referrers: list[ReferrerVisit]
    recent_visitors: list[Visitor]


class ClickHotspot(BaseModel):
    element: str
    count: int
    element_text: str


class PageAction(BaseModel):
    page: str
    clicks: int = 0
    scrolls: int = 0
    form_submits: int = 0


class ScrollDepthBucket(BaseModel):
    depth: str
    count: int
    percentage: int


class InteractionSummary(BaseModel):
    total_clicks: int
    total_scrolls: int
    total_form_submits: int
    unique_sessions: int
    click_hotspots: list[ClickHotspot]
    page_actions: list[PageAction]
    scroll_depth: list[ScrollDepthBucket]
    recent_events: list[VisitorEvent]
