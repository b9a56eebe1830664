import asyncio
from collections.abc import Callable


class Debouncer:
    """
    Trailing-edge debounce on the running event loop.
    Every feed() replaces the pending evaluation; the callback runs once the
    signal has been quiet for `delay` seconds, so the last value is always seen.
    """

    def __init__(self, delay: float, callback: Callable[[], None], loop: asyncio.AbstractEventLoop | None = None):
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def feed(self) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
