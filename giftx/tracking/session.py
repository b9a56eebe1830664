"""Per-tab session identifier, created on first access and read thereafter."""
import uuid

from giftx.constants import SESSION_STORAGE_KEY


class SessionStorage:
    """Ephemeral key/value storage scoped to one browser tab."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SessionContext:
    """Session value threaded into every capture call instead of ambient global state."""

    def __init__(self, storage: SessionStorage | None = None, key: str = SESSION_STORAGE_KEY):
        self.storage = storage if storage is not None else SessionStorage()
        self.key = key

    @property
    def session_id(self) -> str:
        sid = self.storage.get_item(self.key)
        if not sid:
            sid = str(uuid.uuid4())
            self.storage.set_item(self.key, sid)
        return sid
