"""Visitor dashboard: daily visits, top pages and referrers over a date window."""
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone

from sqlmodel import Session, select

from giftx.models import Visitor
from giftx.schemas import DailyVisit, PageVisit, ReferrerVisit, VisitorSummary
from giftx.utils import utc_day

TOP_PAGES = 10
TOP_REFERRERS = 10
RECENT_ROWS = 50
DIRECT_REFERRER = "Direct"


def window_start(days: int, now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def fetch_visits(db: Session, days: int = 30, now: datetime | None = None) -> list[Visitor]:
    """Visits of the last `days` days, newest first."""
    stmt = (
        select(Visitor)
        .where(Visitor.created_at >= window_start(days, now))
        .order_by(Visitor.created_at.desc(), Visitor.id.desc())
    )
    return list(db.exec(stmt).all())


def summarize_visits(visitors: Sequence[Visitor], today: date | None = None) -> VisitorSummary:
    """Single pass over rows already ordered newest first. Rows are not modified."""
    today = today or datetime.now(timezone.utc).date()
    sessions: set[str] = set()
    daily_visits_by_day: dict[str, int] = {}
    daily_sessions: dict[str, set[str]] = {}
    pages: dict[str, int] = {}
    referrers: dict[str, int] = {}

    for v in visitors:
        sessions.add(v.session_id)
        day = utc_day(v.created_at).isoformat()
        daily_visits_by_day[day] = daily_visits_by_day.get(day, 0) + 1
        daily_sessions.setdefault(day, set()).add(v.session_id)
        pages[v.page_path] = pages.get(v.page_path, 0) + 1
        ref = v.referrer or DIRECT_REFERRER
        referrers[ref] = referrers.get(ref, 0) + 1

    daily_visits = [
        DailyVisit(date=day, visits=n, unique_visitors=len(daily_sessions[day]))
        for day, n in sorted(daily_visits_by_day.items())
    ]
    # sorted() is stable: equal counts keep first-encountered order
    top_pages = [
        PageVisit(page=page, visits=n)
        for page, n in sorted(pages.items(), key=lambda kv: kv[1], reverse=True)[:TOP_PAGES]
    ]
    top_referrers = [
        ReferrerVisit(referrer=ref, visits=n)
        for ref, n in sorted(referrers.items(), key=lambda kv: kv[1], reverse=True)[:TOP_REFERRERS]
    ]
    today_key = today.isoformat()

    return VisitorSummary(
        total_visits=len(visitors),
        unique_sessions=len(sessions),
        today_visits=daily_visits_by_day.get(today_key, 0),
        today_unique=len(daily_sessions.get(today_key, ())),
        daily_visits=daily_visits,
        top_pages=top_pages,
        top_referrers=top_referrers,
        recent_visitors=list(visitors[:RECENT_ROWS]),
    )
