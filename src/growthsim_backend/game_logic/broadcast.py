"""Publish/subscribe fan-out of session histories to connected clients."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from itertools import count
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from growthsim_backend.game_logic.persistence import History

logger = logging.getLogger(__name__)

_CLOSED = None


class Subscription:
    """A single client's queue of history updates for one session.

    Publishing never blocks: updates are queued and drained by the consumer
    of :meth:`stream`, so slow network sends happen outside any session lock.
    """

    def __init__(self, session_id: str, identifier: int) -> None:
        self.session_id = session_id
        self.identifier = identifier
        self._queue: asyncio.Queue[History | None] = asyncio.Queue()
        self._delivered_length = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the subscription stopped accepting updates."""
        return self._closed

    def deliver(self, history: History) -> None:
        """Queue *history* for this subscriber."""
        if self._closed:
            return
        self._queue.put_nowait(history)

    def close(self) -> None:
        """Stop the stream once already queued histories are drained."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def stream(self) -> AsyncIterator[History]:
        """Yield histories in publication order.

        A history that is not longer than the last one yielded is skipped, so
        the client never observes the session going backwards.
        """
        while True:
            history = await self._queue.get()
            if history is _CLOSED:
                return
            if len(history) <= self._delivered_length:
                continue
            self._delivered_length = len(history)
            yield history


class BroadcastHub:
    """Route history updates to every subscription of a session."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._ids = count(1)

    def subscribe(self, session_id: str) -> Subscription:
        """Register a new subscription for *session_id*."""
        subscription = Subscription(session_id, next(self._ids))
        self._subscriptions.setdefault(session_id, []).append(subscription)
        logger.debug(
            "Subscription %s joined session %s", subscription.identifier, session_id
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove *subscription*; other subscribers are unaffected."""
        subscription.close()
        subscribers = self._subscriptions.get(subscription.session_id)
        if subscribers is None:
            return
        with contextlib.suppress(ValueError):
            subscribers.remove(subscription)
        if not subscribers:
            self._subscriptions.pop(subscription.session_id, None)
        logger.debug(
            "Subscription %s left session %s",
            subscription.identifier,
            subscription.session_id,
        )

    def publish(self, session_id: str, history: History) -> int:
        """Queue *history* for every subscriber of *session_id*; return the count."""
        subscribers = list(self._subscriptions.get(session_id, ()))
        for subscription in subscribers:
            subscription.deliver(history)
        return len(subscribers)

    def subscriber_count(self, session_id: str) -> int:
        """Return the number of live subscriptions for *session_id*."""
        return len(self._subscriptions.get(session_id, ()))


__all__ = ["BroadcastHub", "Subscription"]
