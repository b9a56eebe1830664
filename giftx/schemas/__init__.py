from .analytics import (
    ClickHotspot,
    DailyVisit,
    InteractionSummary,
    PageAction,
    PageVisit,
    ReferrerVisit,
    ScrollDepthBucket,
    VisitorSummary,
)
from .presence import ActiveUsers, PresenceState
from .tracking import InteractionEventIn, TrackResponse, VisitIn

__all__ = [
    "ActiveUsers",
    "ClickHotspot",
    "DailyVisit",
    "InteractionEventIn",
    "InteractionSummary",
    "PageAction",
    "PageVisit",
    "PresenceState",
    "ReferrerVisit",
    "ScrollDepthBucket",
    "TrackResponse",
    "VisitIn",
    "VisitorSummary",
]
