"""Pydantic models for the session WebSocket and HTTP contracts."""

# ruff: noqa: TC001

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from growthsim_backend.game_logic import (
    Controls,
    EconomicState,
    ExchangeOption,
    ModelParameters,
    Violation,
)
from growthsim_backend.shared import ErrorCode

MAX_SESSION_ID_LENGTH = 128


class JoinSessionRequest(BaseModel):
    """Subscribe the connection to a session and receive its history."""

    type: Literal["join"]
    session_id: str = Field(min_length=1, max_length=MAX_SESSION_ID_LENGTH)


class SubmitRoundRequest(BaseModel):
    """Run the next round of a session with the given controls."""

    type: Literal["submit_round"]
    session_id: str | None = Field(
        default=None, min_length=1, max_length=MAX_SESSION_ID_LENGTH
    )
    controls: Controls


class HeartbeatRequest(BaseModel):
    """Heartbeat message for connection keep-alive."""

    type: Literal["heartbeat"]
    nonce: str | None = None


InboundWsMessage = Annotated[
    JoinSessionRequest | SubmitRoundRequest | HeartbeatRequest,
    Field(discriminator="type"),
]


class SessionStateResponse(BaseModel):
    """Full history of a session, sent on join and after every round."""

    type: Literal["state"] = "state"
    session_id: str
    history: list[EconomicState]


class HeartbeatAckResponse(BaseModel):
    """Reply to a heartbeat."""

    type: Literal["heartbeat_ack"] = "heartbeat_ack"
    nonce: str | None = None


class ErrorResponse(BaseModel):
    """Structured error payload sent only to the requesting client."""

    type: Literal["error"] = "error"
    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


OutboundWsMessage = Annotated[
    SessionStateResponse | HeartbeatAckResponse | ErrorResponse,
    Field(discriminator="type"),
]


class HistoryResponse(BaseModel):
    """HTTP representation of a session history."""

    session_id: str
    rounds_played: int = Field(ge=0)
    history: list[EconomicState]


class ValidationFailureResponse(BaseModel):
    """HTTP body returned when a round is rejected by the value validator."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED
    message: str
    violations: list[Violation]


class ModelParametersResponse(BaseModel):
    """Active model parameters and the selectable exchange policies."""

    parameters: ModelParameters
    exchange_options: list[ExchangeOption]


__all__ = [
    "MAX_SESSION_ID_LENGTH",
    "ErrorResponse",
    "HeartbeatAckResponse",
    "HeartbeatRequest",
    "HistoryResponse",
    "InboundWsMessage",
    "JoinSessionRequest",
    "ModelParametersResponse",
    "OutboundWsMessage",
    "SessionStateResponse",
    "SubmitRoundRequest",
    "ValidationFailureResponse",
]
