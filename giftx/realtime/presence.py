"""'Active now' presence: tabs publish their current page, admins observe the channel."""
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from giftx.schemas import ActiveUsers, PresenceState

from .channel import CLOSED, SUBSCRIBED, ChannelMember, PresenceMap, RealtimeHub

log = logging.getLogger("giftx.realtime")

ONLINE_USERS_CHANNEL = "online-users"
OBSERVER_KEY = "admin-listener"


def active_users(state: PresenceMap, observer_key: str = OBSERVER_KEY) -> list[PresenceState]:
    """
    Flatten the channel state into distinct visitors.

    The observer key is dropped both as a presence key and as a session_id.
    De-duplication keeps the last entry seen for each session, which is the
    freshest one because the channel orders state oldest to newest.
    """
    latest: dict[str, dict[str, Any]] = {}
    for key, presences in state.items():
        if key == observer_key:
            continue
        for presence in presences:
            sid = presence.get("session_id")
            if not sid or sid == observer_key:
                continue
            latest[sid] = presence
    return [PresenceState(**p) for p in latest.values()]


def group_by_page(users: list[PresenceState]) -> dict[str, int]:
    pages: dict[str, int] = {}
    for user in users:
        pages[user.page] = pages.get(user.page, 0) + 1
    return pages


class PresencePublisher:
    """
    Advertises one session's current page on the shared channel.

    The first payload waits for the join to be confirmed; later route changes
    replace it under the same key. unmount() leaves the channel so observers
    drop the session.
    """

    def __init__(self, hub: RealtimeHub, session_id: str, channel_name: str = ONLINE_USERS_CHANNEL):
        self.hub = hub
        self.session_id = session_id
        self.channel_name = channel_name
        self.page_path: str | None = None
        self._member: ChannelMember | None = None

    @property
    def joined(self) -> bool:
        return self._member is not None and self._member.subscribed

    def mount(self, page_path: str) -> None:
        self.page_path = page_path
        if self._member is None:
            self._member = self.hub.channel(self.channel_name).join(self.session_id)
            self._member.subscribe(self._on_status)
        else:
            self.publish()

    def navigate(self, page_path: str) -> None:
        if self._member is None:
            self.mount(page_path)
            return
        self.page_path = page_path
        self.publish()

    def publish(self) -> None:
        if not self.joined or self.page_path is None:
            return
        self._member.track(
            {
                "page": self.page_path,
                "online_at": datetime.now(timezone.utc).isoformat(),
                "session_id": self.session_id,
            }
        )

    def unmount(self) -> None:
        if self._member is not None:
            self._member.unsubscribe()
            self._member = None

    def _on_status(self, status: str) -> None:
        if status == SUBSCRIBED:
            self.publish()
        elif status != CLOSED:
            log.warning("presence channel %s not joined for %s: %s", self.channel_name, self.session_id, status)


class ActiveUsersObserver:
    """Admin-side listener computing the distinct set of sessions online now."""

    def __init__(
        self,
        hub: RealtimeHub,
        channel_name: str = ONLINE_USERS_CHANNEL,
        observer_key: str = OBSERVER_KEY,
    ):
        self.hub = hub
        self.channel_name = channel_name
        self.observer_key = observer_key
        self.users: list[PresenceState] = []
        self._member: ChannelMember | None = None
        self._listeners: list[Callable[[ActiveUsers], None]] = []

    @property
    def count(self) -> int:
        return len(self.users)

    def by_page(self) -> dict[str, int]:
        return group_by_page(self.users)

    def snapshot(self) -> ActiveUsers:
        return ActiveUsers(count=self.count, users=list(self.users), pages=self.by_page())

    def add_listener(self, listener: Callable[[ActiveUsers], None]) -> None:
        self._listeners.append(listener)

    def start(self) -> "ActiveUsersObserver":
        if self._member is None:
            self._member = (
                self.hub.channel(self.channel_name)
                .join(self.observer_key)
                .on_sync(self._on_sync)
                .subscribe()
            )
        return self

    def stop(self) -> None:
        if self._member is not None:
            self._member.unsubscribe()
            self._member = None
        self._listeners.clear()

    def _on_sync(self, state: PresenceMap) -> None:
        self.users = active_users(state, self.observer_key)
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
