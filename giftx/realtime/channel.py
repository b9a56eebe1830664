"""
In-process realtime channels with presence state.

A channel keeps, per presence key, the latest payload each joined member has
tracked. Every change is broadcast to subscribed members as a full-state sync.
Cross-key ordering is only "most recently updated key last"; observers must
treat the state as eventually consistent.
"""
import itertools
import logging
from collections.abc import Callable
from typing import Any

log = logging.getLogger("giftx.realtime")

SUBSCRIBED = "SUBSCRIBED"
CLOSED = "CLOSED"
CHANNEL_ERROR = "CHANNEL_ERROR"

PresenceMap = dict[str, list[dict[str, Any]]]
SyncListener = Callable[[PresenceMap], None]
StatusCallback = Callable[[str], None]


class ChannelNotSubscribedError(RuntimeError):
    pass


class ChannelMember:
    """One connection to a channel under a presence key."""

    def __init__(self, channel: "PresenceChannel", key: str):
        self.channel = channel
        self.key = key
        self.subscribed = False
        self.closed = False
        self._listeners: list[SyncListener] = []
        self._status_callback: StatusCallback | None = None

    def on_sync(self, listener: SyncListener) -> "ChannelMember":
        self._listeners.append(listener)
        return self

    def subscribe(self, callback: StatusCallback | None = None) -> "ChannelMember":
        self._status_callback = callback
        if self.closed:
            if callback:
                callback(CHANNEL_ERROR)
            return self
        self.subscribed = True
        if callback:
            callback(SUBSCRIBED)
        # A fresh subscriber receives the current state right away
        self._deliver(self.channel.presence_state())
        return self

    def track(self, payload: dict[str, Any]) -> None:
        if not self.subscribed:
            raise ChannelNotSubscribedError(f"{self.key} is not subscribed to {self.channel.name}")
        self.channel._track(self, dict(payload))

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.subscribed = False
        self._listeners.clear()
        self.channel._leave(self)
        if self._status_callback:
            self._status_callback(CLOSED)

    def _deliver(self, state: PresenceMap) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                log.exception("presence sync listener failed on %s", self.channel.name)


class PresenceChannel:
    def __init__(self, name: str):
        self.name = name
        self._members: list[ChannelMember] = []
        # key -> {member id -> (seq, payload)}; keys ordered by last update
        self._state: dict[str, dict[int, tuple[int, dict[str, Any]]]] = {}
        self._seq = itertools.count(1)

    def join(self, key: str) -> ChannelMember:
        member = ChannelMember(self, key)
        self._members.append(member)
        return member

    def presence_state(self) -> PresenceMap:
        """Copy of the state; within a key, entries are ordered oldest to newest."""
        return {
            key: [dict(payload) for _, payload in sorted(entries.values(), key=lambda e: e[0])]
            for key, entries in self._state.items()
        }

    def _track(self, member: ChannelMember, payload: dict[str, Any]) -> None:
        entries = self._state.pop(member.key, {})
        entries[id(member)] = (next(self._seq), payload)
        self._state[member.key] = entries
        self._broadcast()

    def _untrack(self, member: ChannelMember) -> bool:
        entries = self._state.get(member.key)
        if not entries or id(member) not in entries:
            return False
        del entries[id(member)]
        if not entries:
            del self._state[member.key]
        self._broadcast()
        return True

    def _leave(self, member: ChannelMember) -> None:
        if member in self._members:
            self._members.remove(member)
        self._untrack(member)

    def _broadcast(self) -> None:
        state = self.presence_state()
        for member in list(self._members):
            if member.subscribed:
                member._deliver(state)


class RealtimeHub:
    """Registry of channels by name."""

    def __init__(self):
        self._channels: dict[str, PresenceChannel] = {}

    def channel(self, name: str) -> PresenceChannel:
        if name not in self._channels:
            self._channels[name] = PresenceChannel(name)
        return self._channels[name]

    def reset(self) -> None:
        self._channels.clear()


hub = RealtimeHub()


def get_hub() -> RealtimeHub:
    return hub
