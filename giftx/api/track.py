"""Ingest endpoints for the page tracker. Append-only; rate limited per client IP."""
from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from giftx.core.config import settings
from giftx.core.database import get_db
from giftx.core.geo import lookup_ip
from giftx.core.rate_limit import get_client_ip, limiter
from giftx.schemas import InteractionEventIn, TrackResponse, VisitIn
from giftx.services.event_log import record_event, record_visit

router = APIRouter(prefix="/track", tags=["track"])


def track_rate_limit() -> str:
    """Read per request so the limit follows the current settings."""
    return f"{settings.rate_limit_track_per_minute}/minute"


@router.post("/visit", response_model=TrackResponse)
@limiter.limit(track_rate_limit)
def track_visit(request: Request, payload: VisitIn, db: Session = Depends(get_db)):
    if not payload.user_agent:
        payload.user_agent = request.headers.get("user-agent")
    country, city = lookup_ip(get_client_ip(request))
    row = record_visit(db, payload, country=country, city=city)
    return TrackResponse(id=row.id)


@router.post("/event", response_model=TrackResponse)
@limiter.limit(track_rate_limit)
def track_event(request: Request, payload: InteractionEventIn, db: Session = Depends(get_db)):
    row = record_event(db, payload)
    return TrackResponse(id=row.id)
