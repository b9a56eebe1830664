"""Page-view log: one row per navigation, written by the tracker, never updated."""
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Visitor(SQLModel, table=True):
    __tablename__ = "visitors"
    id: int | None = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, max_length=64)
    page_path: str = Field(max_length=512)
    referrer: str | None = None
    user_agent: str | None = None
    country: str | None = Field(default=None, max_length=8)  # ISO code resolved from the client IP
    city: str | None = None
    created_at: datetime = Field(default_factory=utcnow, index=True)
