"""Client-local delivery status for a message the user just sent.

The ticks are presentational. While the send is in flight, timers walk the
optimistic message through sending -> sent -> delivered -> read. Once the
server returns the stored message, the tracker takes its id and mirrors
delivered/read to the database with best-effort updates that nobody waits
on. A failed send turns the message to error and stops everything; nothing
is retried.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from career_bot.db.models import MessageStatus

logger = logging.getLogger(__name__)

_RANK = {
    MessageStatus.SENDING: 0,
    MessageStatus.SENT: 1,
    MessageStatus.DELIVERED: 2,
    MessageStatus.READ: 3,
}

StatusCallback = Callable[[MessageStatus], None]
PersistCallback = Callable[[str, MessageStatus], Awaitable[Any]]


class StatusTimings(BaseModel):
    """Delay windows in seconds, each as (min, max) before jitter.

    Attributes:
        sent: Optimistic sending -> sent.
        delivered: Optimistic -> delivered.
        read: Optimistic -> read.
        confirmed_delivered: Persisted delivered after the server replied.
        confirmed_read: Persisted read after the server replied.
    """

    sent: tuple[float, float] = (0.3, 0.5)
    delivered: tuple[float, float] = (0.8, 1.2)
    read: tuple[float, float] = (2.0, 3.0)
    confirmed_delivered: tuple[float, float] = (1.0, 1.5)
    confirmed_read: tuple[float, float] = (2.5, 3.5)


def can_advance(current: MessageStatus, new: MessageStatus) -> bool:
    """Whether the displayed status may move from current to new.

    Error is terminal and reachable from any other status; otherwise the
    status only moves forward.
    """
    if current == MessageStatus.ERROR:
        return False
    if new == MessageStatus.ERROR:
        return True
    return _RANK[new] > _RANK[current]


class MessageStatusTracker:
    """Drives the status of one outgoing user message.

    Args:
        on_change: Called with each new displayed status.
        persist: Async callback ``(message_id, status)`` that stores a status;
            failures are logged and ignored.
        timings: Delay windows; defaults to the production values.
        rng: Random source for jitter.
    """

    def __init__(
        self,
        on_change: StatusCallback,
        persist: PersistCallback | None = None,
        timings: StatusTimings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.status = MessageStatus.SENDING
        self.message_id: str | None = None
        self._on_change = on_change
        self._persist = persist
        self._timings = timings or StatusTimings()
        self._rng = rng or random.Random()
        self._timers: set[asyncio.Task] = set()
        self._mirrors: set[asyncio.Task] = set()

    def _delay(self, window: tuple[float, float]) -> float:
        low, high = window
        return self._rng.uniform(low, high) if high > low else low

    def _spawn(self, coro: Awaitable[Any], bucket: set[asyncio.Task]) -> None:
        task = asyncio.ensure_future(coro)
        bucket.add(task)
        task.add_done_callback(bucket.discard)

    def _schedule(self, window: tuple[float, float], step: Callable[[], None]) -> None:
        async def fire() -> None:
            await asyncio.sleep(self._delay(window))
            step()

        self._spawn(fire(), self._timers)

    def advance(self, new: MessageStatus) -> bool:
        """Move the displayed status forward; returns whether it changed."""
        if not can_advance(self.status, new):
            return False
        self.status = new
        self._on_change(new)
        return True

    def _mirror(self, status: MessageStatus) -> None:
        if self.message_id is None or self._persist is None:
            return
        message_id = self.message_id

        async def store() -> None:
            try:
                await self._persist(message_id, status)
            except Exception as e:
                logger.warning(f"Failed to update message status for {message_id}: {e}")

        self._spawn(store(), self._mirrors)

    def start(self) -> None:
        """Begin the optimistic progression for an in-flight send."""
        self._schedule(self._timings.sent, lambda: self.advance(MessageStatus.SENT))
        self._schedule(self._timings.delivered, lambda: self.advance(MessageStatus.DELIVERED))
        self._schedule(self._timings.read, lambda: self.advance(MessageStatus.READ))

    def confirm(self, message_id: str, server_status: MessageStatus = MessageStatus.SENT) -> None:
        """Adopt the stored message and mirror delivered/read to the server."""
        if self.status == MessageStatus.ERROR:
            return
        self.cancel_timers()
        self.message_id = message_id
        self.advance(server_status)

        def confirmed(status: MessageStatus) -> Callable[[], None]:
            def step() -> None:
                if self.status == MessageStatus.ERROR:
                    return
                self.advance(status)
                self._mirror(status)

            return step

        self._schedule(self._timings.confirmed_delivered, confirmed(MessageStatus.DELIVERED))
        self._schedule(self._timings.confirmed_read, confirmed(MessageStatus.READ))

    def fail(self) -> None:
        """Mark the message as failed and stop all pending timers."""
        self.cancel_timers()
        if self.advance(MessageStatus.ERROR):
            self._mirror(MessageStatus.ERROR)

    def cancel_timers(self) -> None:
        # Cancelled tasks leave the set through their done callback
        for task in list(self._timers):
            task.cancel()

    async def wait(self) -> None:
        """Wait until every timer and status update has finished."""
        while self._timers or self._mirrors:
            await asyncio.gather(*self._timers, *self._mirrors, return_exceptions=True)
