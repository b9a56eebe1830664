from .channel import (
    CHANNEL_ERROR,
    CLOSED,
    SUBSCRIBED,
    ChannelMember,
    ChannelNotSubscribedError,
    PresenceChannel,
    RealtimeHub,
    get_hub,
    hub,
)
from .presence import (
    OBSERVER_KEY,
    ONLINE_USERS_CHANNEL,
    ActiveUsersObserver,
    PresencePublisher,
    active_users,
    group_by_page,
)

__all__ = [
    "CHANNEL_ERROR",
    "CLOSED",
    "SUBSCRIBED",
    "ChannelMember",
    "ChannelNotSubscribedError",
    "PresenceChannel",
    "RealtimeHub",
    "get_hub",
    "hub",
    "OBSERVER_KEY",
    "ONLINE_USERS_CHANNEL",
    "ActiveUsersObserver",
    "PresencePublisher",
    "active_users",
    "group_by_page",
]
