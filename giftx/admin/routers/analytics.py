"""Visitor and heatmap dashboards."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from giftx.admin.deps import require_admin
from giftx.core.config import settings
from giftx.core.database import get_db
from giftx.schemas import InteractionSummary, VisitorSummary
from giftx.services.heatmap_analytics import fetch_interactions, summarize_interactions
from giftx.services.visitor_analytics import fetch_visits, summarize_visits

router = APIRouter()


@router.get("/visitors", response_model=VisitorSummary)
def visitor_analytics(
    days: int = Query(settings.visitor_window_days, ge=1, le=365),
    _=Depends(require_admin),
    db: Session = Depends(get_db),
):
    return summarize_visits(fetch_visits(db, days))


@router.get("/heatmap", response_model=InteractionSummary)
def heatmap_analytics(
    days: int = Query(settings.heatmap_window_days, ge=1, le=365),
    _=Depends(require_admin),
    db: Session = Depends(get_db),
):
    return summarize_interactions(fetch_interactions(db, days))
