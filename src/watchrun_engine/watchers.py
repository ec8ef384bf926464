"""Event source protocol and the channel that feeds the watch loop."""

import asyncio
import logging
from typing import Protocol

from watchrun_engine.errors import WatchSourceDisconnected, WatchSourceError
from watchrun_engine.models import ChangeEvent

logger = logging.getLogger(__name__)

_DISCONNECTED = object()


class EventSource(Protocol):
    """Protocol for raw change-event sources."""

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        """Start delivering events to the given (running) loop."""
        ...

    def stop(self) -> None:
        """Stop delivering events."""
        ...

    async def recv(self, timeout: float) -> ChangeEvent:
        """Wait up to ``timeout`` seconds for the next event.

        Raises:
            TimeoutError: No event arrived in time
            WatchSourceError: A single delivery failed
            WatchSourceDisconnected: The source is gone for good
        """
        ...


class EventChannel:
    """Queue between a producer thread and the watch loop.

    ``send``, ``send_error`` and ``close`` may be called from any thread once
    the channel is attached; items are handed to the loop with
    ``call_soon_threadsafe``. ``recv`` must be awaited on the attached loop.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._disconnected = False

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """Bind the channel to the loop that will receive from it."""
        self._loop = loop

    @property
    def is_disconnected(self) -> bool:
        return self._disconnected

    def send(self, event: ChangeEvent) -> None:
        """Deliver an event."""
        self._put(event)

    def send_error(self, error: BaseException) -> None:
        """Deliver a transient error in place of an event."""
        self._put(error)

    def close(self) -> None:
        """Signal permanent disconnection. Items already queued are still received first."""
        self._put(_DISCONNECTED)

    def _put(self, item: object) -> None:
        if self._loop is None:
            raise RuntimeError("Channel not attached - call attach(loop) first")
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed; nobody is listening any more
            logger.debug("Dropped item sent after the event loop closed")

    async def recv(self, timeout: float) -> ChangeEvent:
        """Receive the next event.

        Args:
            timeout: Seconds to wait before raising TimeoutError

        Returns:
            The next ChangeEvent

        Raises:
            TimeoutError: No event arrived in time
            WatchSourceError: The producer reported a delivery failure
            WatchSourceDisconnected: The channel was closed
        """
        if self._disconnected:
            raise WatchSourceDisconnected("Event channel disconnected")

        item = await asyncio.wait_for(self._queue.get(), timeout)

        if item is _DISCONNECTED:
            self._disconnected = True
            raise WatchSourceDisconnected("Event channel disconnected")
        if isinstance(item, BaseException):
            raise WatchSourceError(str(item) or type(item).__name__) from item
        return item
