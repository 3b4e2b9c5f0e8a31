"""Round coordination connecting the growth model to transports.

The :class:`RoundCoordinator` is the only component that mutates session
histories. Transports translate wire messages into :meth:`RoundCoordinator.join`
and :meth:`RoundCoordinator.submit_round` calls and relay the histories that
the :class:`BroadcastHub` queues for each subscriber.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from growthsim_backend.game_logic.transition import (
    exogenous_index,
    initial_state,
    next_state,
)
from growthsim_backend.shared.errors import (
    EconomicValidationError,
    MissingExogenousDataError,
    SessionNotFoundError,
)

if TYPE_CHECKING:
    from growthsim_backend.game_logic.broadcast import BroadcastHub, Subscription
    from growthsim_backend.game_logic.parameters import ModelParameters
    from growthsim_backend.game_logic.persistence import History, SessionStore
    from growthsim_backend.game_logic.state import Controls, EconomicState

logger = logging.getLogger(__name__)


class RoundCoordinator:
    """Run rounds for sessions and publish the resulting histories.

    Rounds for the same session are serialized by the store's per-session
    lock: reading the last state, computing the next one and appending it
    happen atomically with respect to other submissions for that session.
    Publication only enqueues histories, so no network send happens while the
    lock is held.
    """

    def __init__(
        self,
        store: SessionStore,
        hub: BroadcastHub,
        parameters: ModelParameters,
    ) -> None:
        self._store = store
        self._hub = hub
        self._parameters = parameters
        self._initial_state: EconomicState | None = None

    @property
    def parameters(self) -> ModelParameters:
        """Parameter set used for every session."""
        return self._parameters

    def initial_state(self) -> EconomicState:
        """Return the state every new session starts from."""
        if self._initial_state is None:
            self._initial_state = initial_state(self._parameters)
        return self._initial_state

    async def join(self, session_id: str) -> History:
        """Return the history of *session_id*, creating the session if needed."""
        initial = self.initial_state()
        async with self._store.lock(session_id):
            created = self._store.get(session_id) is None
            history = self._store.join(session_id, initial)
        if created:
            logger.info("Session %s created", session_id)
        return history

    async def subscribe(self, session_id: str) -> tuple[Subscription, History]:
        """Join *session_id* and register a subscription for its updates.

        The current history is queued on the new subscription before any
        later round can be published to it.
        """
        initial = self.initial_state()
        async with self._store.lock(session_id):
            created = self._store.get(session_id) is None
            history = self._store.join(session_id, initial)
            subscription = self._hub.subscribe(session_id)
            subscription.deliver(history)
        if created:
            logger.info("Session %s created", session_id)
        logger.info(
            "Subscriber %s joined session %s at round %d",
            subscription.identifier,
            session_id,
            len(history) - 1,
        )
        return subscription, history

    def unsubscribe(self, subscription: Subscription) -> None:
        """Detach *subscription* without touching the session history."""
        self._hub.unsubscribe(subscription)

    def history(self, session_id: str) -> History:
        """Return the current history of *session_id*."""
        history = self._store.get(session_id)
        if not history:
            raise SessionNotFoundError(session_id)
        return history

    async def submit_round(self, session_id: str, controls: Controls) -> History:
        """Compute and commit the next round for *session_id*.

        Raises :class:`SessionNotFoundError` when the session was never joined,
        :class:`EconomicValidationError` when the computed state is out of
        bounds and :class:`MissingExogenousDataError` when the model data is
        unusable. The history is untouched on failure.
        """
        if self._store.get(session_id) is None:
            logger.warning("Round submitted for unknown session %s", session_id)
            raise SessionNotFoundError(session_id)

        async with self._store.lock(session_id):
            history = self._store.get(session_id)
            if not history:
                raise SessionNotFoundError(session_id)
            table = self._parameters.exogenous
            try:
                index = exogenous_index(len(history), len(table))
                prev = history[-1]
                state = next_state(prev, controls, table[index], self._parameters)
            except EconomicValidationError as exc:
                logger.warning(
                    "Round rejected for session %s: %s", session_id, exc.detail
                )
                raise
            except MissingExogenousDataError:
                logger.exception("Cannot run round for session %s", session_id)
                raise
            updated = self._store.append(session_id, state)
            receivers = self._hub.publish(session_id, updated)

        logger.info(
            "Session %s advanced to %d (round %d, %d subscribers)",
            session_id,
            state.year,
            len(updated) - 1,
            receivers,
        )
        return updated


__all__ = ["RoundCoordinator"]
