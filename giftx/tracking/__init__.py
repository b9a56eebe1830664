from .capture import InteractionTracker, ScrollDepthState, VisitTracker
from .debounce import Debouncer
from .dom import Element, Rect, Viewport, is_interactive, resolve_click_target
from .page import PageTracker
from .session import SessionContext, SessionStorage
from .sink import DatabaseEventLog, EventLog, HttpEventLog, fire_and_forget

__all__ = [
    "InteractionTracker",
    "ScrollDepthState",
    "VisitTracker",
    "Debouncer",
    "Element",
    "Rect",
    "Viewport",
    "is_interactive",
    "resolve_click_target",
    "PageTracker",
    "SessionContext",
    "SessionStorage",
    "DatabaseEventLog",
    "EventLog",
    "HttpEventLog",
    "fire_and_forget",
]
