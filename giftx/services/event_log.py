"""Append-only writes to the visitors / visitor_events tables."""
from sqlmodel import Session

from giftx.models import Visitor, VisitorEvent
from giftx.schemas import InteractionEventIn, VisitIn


def record_visit(db: Session, payload: VisitIn, country: str | None = None, city: str | None = None) -> Visitor:
    row = Visitor(**payload.model_dump(), country=country, city=city)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def record_event(db: Session, payload: InteractionEventIn) -> VisitorEvent:
    row = VisitorEvent(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
