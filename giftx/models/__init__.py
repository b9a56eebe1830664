from .error_log import ErrorLog
from .visitor import Visitor
from .visitor_event import VisitorEvent

__all__ = [
    "ErrorLog",
    "Visitor",
    "VisitorEvent",
]
