"""Session history storage for the round coordinator.

The store is the only owner of a session's history. Histories are handed out
as tuples so callers never hold a mutable reference. Every session gets its
own lock so that rounds for one session are serialized while other sessions
proceed independently.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from growthsim_backend.game_logic.state import EconomicState  # noqa: TC001
from growthsim_backend.shared.errors import SessionNotFoundError

History = tuple[EconomicState, ...]


class SessionStore(Protocol):
    """Protocol describing how session histories are stored."""

    def join(self, session_id: str, initial: EconomicState) -> History:
        """Create *session_id* with *initial* unless it exists; return its history."""

    def get(self, session_id: str) -> History | None:
        """Return the history for *session_id* or ``None`` when it was never joined."""

    def append(self, session_id: str, state: EconomicState) -> History:
        """Append *state* to the history of *session_id* and return the new history."""

    def lock(self, session_id: str) -> asyncio.Lock:
        """Return the lock serializing rounds for *session_id*."""

    def session_ids(self) -> tuple[str, ...]:
        """Return the identifiers of every known session."""


class InMemorySessionStore:
    """In-process implementation of :class:`SessionStore`."""

    def __init__(self) -> None:
        self._histories: dict[str, History] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def join(self, session_id: str, initial: EconomicState) -> History:
        """Create the session with a single-state history on first join."""
        history = self._histories.get(session_id)
        if history is None:
            history = (initial,)
            self._histories[session_id] = history
        return history

    def get(self, session_id: str) -> History | None:
        """Return the stored history for *session_id* if available."""
        return self._histories.get(session_id)

    def append(self, session_id: str, state: EconomicState) -> History:
        """Extend the history of *session_id* by exactly one state."""
        history = self._histories.get(session_id)
        if not history:
            raise SessionNotFoundError(session_id)
        updated = (*history, state)
        self._histories[session_id] = updated
        return updated

    def lock(self, session_id: str) -> asyncio.Lock:
        """Return the lock for *session_id*, creating it on first use."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def session_ids(self) -> tuple[str, ...]:
        """Return the identifiers of all stored sessions."""
        return tuple(self._histories)


__all__ = ["History", "InMemorySessionStore", "SessionStore"]
