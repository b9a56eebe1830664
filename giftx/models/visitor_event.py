"""Interaction log (click / scroll / form_submit) feeding the heatmap view."""
from datetime import datetime

from sqlmodel import Field, SQLModel

from .visitor import utcnow


class VisitorEvent(SQLModel, table=True):
    __tablename__ = "visitor_events"
    id: int | None = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, max_length=64)
    page_path: str = Field(max_length=512)
    event_type: str = Field(index=True, max_length=32)  # click, scroll, form_submit
    element_tag: str | None = None
    element_text: str | None = None
    element_id: str | None = None
    element_class: str | None = None
    x_position: int | None = None
    y_position: int | None = None
    viewport_width: int | None = None
    viewport_height: int | None = None
    scroll_depth: int | None = None  # 25, 50, 75, 100
    created_at: datetime = Field(default_factory=utcnow, index=True)
