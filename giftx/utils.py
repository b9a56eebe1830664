import math
from datetime import date, datetime, timezone


def round_half_up(value: float) -> int:
    """Rounds .5 towards +inf, the way browsers round pixel and percentage values."""
    return int(math.floor(value + 0.5))


def truncate(value: str | None, length: int) -> str | None:
    """First `length` characters; None for missing or empty strings."""
    if not value:
        return None
    return value[:length]


def utc_day(value: datetime) -> date:
    """Calendar day in UTC. Naive values are read as UTC already."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()
