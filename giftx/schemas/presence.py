from pydantic import BaseModel


class PresenceState(BaseModel):
    """Payload a tab publishes on the online-users channel."""
    page: str
    online_at: str
    session_id: str


class ActiveUsers(BaseModel):
    count: int
    users: list[PresenceState]
    pages: dict[str, int]
