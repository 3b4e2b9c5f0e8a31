"""WebSocket endpoint streaming session histories to every joined client."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, TypeAdapter, ValidationError

from growthsim_backend.api.dependencies import get_round_coordinator
from growthsim_backend.api.models.session import (
    ErrorResponse,
    HeartbeatAckResponse,
    HeartbeatRequest,
    InboundWsMessage,
    JoinSessionRequest,
    SessionStateResponse,
    SubmitRoundRequest,
)
from growthsim_backend.game_logic import RoundCoordinator, Subscription
from growthsim_backend.shared import (
    EconomicValidationError,
    ErrorCode,
    MissingExogenousDataError,
    SessionNotFoundError,
    SimulationError,
)

router = APIRouter(tags=["session"])

logger = logging.getLogger(__name__)

ActionSender = Callable[[BaseModel], Awaitable[None]]

INBOUND_WS_MESSAGE_ADAPTER = TypeAdapter(InboundWsMessage)

ERROR_CODES: dict[type[SimulationError], ErrorCode] = {
    SessionNotFoundError: ErrorCode.SESSION_NOT_FOUND,
    EconomicValidationError: ErrorCode.VALIDATION_FAILED,
    MissingExogenousDataError: ErrorCode.MISSING_EXOGENOUS_DATA,
}


def _error_from(exc: SimulationError) -> ErrorResponse:
    code = ERROR_CODES[type(exc)]
    return ErrorResponse(code=code, message=str(exc), detail=exc.detail)


async def _relay_updates(subscription: Subscription, send: ActionSender) -> None:
    """Forward every history queued on *subscription* to the client."""
    try:
        async for history in subscription.stream():
            await send(
                SessionStateResponse(
                    session_id=subscription.session_id, history=list(history)
                )
            )
    except WebSocketDisconnect:  # pragma: no cover - network event
        logger.info(
            "Client for subscription %s disconnected during broadcast",
            subscription.identifier,
        )


class SessionConnection:
    """Per-socket subscription bookkeeping."""

    def __init__(self, coordinator: RoundCoordinator, send: ActionSender) -> None:
        self._coordinator = coordinator
        self._send = send
        self.subscription: Subscription | None = None
        self._relay: asyncio.Task[None] | None = None

    @property
    def session_id(self) -> str | None:
        """Session this connection is subscribed to, if any."""
        if self.subscription is None:
            return None
        return self.subscription.session_id

    async def join(self, session_id: str) -> None:
        """Move this connection's subscription to *session_id*.

        The previous subscription is dropped only once the new one exists, so a
        failed join leaves the connection where it was.
        """
        subscription, _history = await self._coordinator.subscribe(session_id)
        previous, previous_relay = self.subscription, self._relay
        self.subscription = subscription
        self._relay = asyncio.create_task(_relay_updates(subscription, self._send))
        await self._drop(previous, previous_relay)

    async def leave(self) -> None:
        """Drop the current subscription; the session history is unaffected."""
        previous, previous_relay = self.subscription, self._relay
        self.subscription = None
        self._relay = None
        await self._drop(previous, previous_relay)

    async def _drop(
        self, subscription: Subscription | None, relay: asyncio.Task[None] | None
    ) -> None:
        if subscription is not None:
            self._coordinator.unsubscribe(subscription)
        if relay is not None:
            relay.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await relay


async def _handle_message(
    message: JoinSessionRequest | SubmitRoundRequest | HeartbeatRequest,
    connection: SessionConnection,
    coordinator: RoundCoordinator,
    send: ActionSender,
) -> None:
    if isinstance(message, HeartbeatRequest):
        await send(HeartbeatAckResponse(nonce=message.nonce))
        return

    if isinstance(message, JoinSessionRequest):
        try:
            await connection.join(message.session_id)
        except MissingExogenousDataError as exc:
            await send(_error_from(exc))
        return

    session_id = message.session_id or connection.session_id
    if session_id is None:
        await send(
            ErrorResponse(
                code=ErrorCode.JOIN_REQUIRED,
                message="Join a session before submitting a round",
                detail={"received": message.type},
            )
        )
        return
    try:
        history = await coordinator.submit_round(session_id, message.controls)
    except SimulationError as exc:
        await send(_error_from(exc))
        return
    # Subscribers of the session get the update from their relay.
    if session_id != connection.session_id:
        await send(SessionStateResponse(session_id=session_id, history=list(history)))


@router.websocket("/ws/session")
async def session_socket(
    websocket: WebSocket,
    coordinator: RoundCoordinator = Depends(get_round_coordinator),  # noqa: B008
) -> None:
    """Accept join and round messages and stream history updates."""
    await websocket.accept()

    send_lock = asyncio.Lock()

    async def send(model: BaseModel) -> None:
        async with send_lock:
            await websocket.send_json(model.model_dump(mode="json", by_alias=True))

    connection = SessionConnection(coordinator, send)

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except WebSocketDisconnect:  # pragma: no cover - network event
                break

            try:
                message = INBOUND_WS_MESSAGE_ADAPTER.validate_python(data)
            except ValidationError as exc:
                await send(
                    ErrorResponse(
                        code=ErrorCode.INVALID_PAYLOAD,
                        message="Invalid payload",
                        detail={
                            "errors": exc.errors(
                                include_url=False, include_context=False
                            )
                        },
                    )
                )
                continue

            await _handle_message(message, connection, coordinator, send)
    finally:
        await connection.leave()


__all__ = ["router"]
