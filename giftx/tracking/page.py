"""Everything a page shell mounts once: visit log, interaction capture, presence."""
from giftx.realtime import ONLINE_USERS_CHANNEL, PresencePublisher, RealtimeHub

from .capture import InteractionTracker, VisitTracker
from .dom import Viewport
from .session import SessionContext
from .sink import EventLog


class PageTracker:
    def __init__(
        self,
        session: SessionContext,
        sink: EventLog,
        hub: RealtimeHub | None = None,
        referrer: str | None = None,
        user_agent: str = "",
        viewport: Viewport | None = None,
        channel_name: str = ONLINE_USERS_CHANNEL,
        scroll_debounce: float | None = None,
    ):
        self.session = session
        self.visits = VisitTracker(session, sink, referrer=referrer, user_agent=user_agent)
        self.interactions = InteractionTracker(session, sink, viewport=viewport, scroll_debounce=scroll_debounce)
        self.presence = PresencePublisher(hub, session.session_id, channel_name) if hub is not None else None

    def mount(self, page_path: str) -> None:
        self.interactions.mount(page_path)
        self.visits.navigate(page_path)
        if self.presence is not None:
            self.presence.mount(page_path)

    def navigate(self, page_path: str) -> None:
        self.interactions.navigate(page_path)
        self.visits.navigate(page_path)
        if self.presence is not None:
            self.presence.navigate(page_path)

    def unmount(self) -> None:
        self.interactions.unmount()
        if self.presence is not None:
            self.presence.unmount()

    async def drain(self) -> None:
        await self.visits.drain()
        await self.interactions.drain()
