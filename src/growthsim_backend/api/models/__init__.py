"""Models used for API request and response payloads."""

from growthsim_backend.api.models.session import (
    ErrorResponse,
    HeartbeatAckResponse,
    HeartbeatRequest,
    HistoryResponse,
    InboundWsMessage,
    JoinSessionRequest,
    ModelParametersResponse,
    OutboundWsMessage,
    SessionStateResponse,
    SubmitRoundRequest,
    ValidationFailureResponse,
)

__all__ = [
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
