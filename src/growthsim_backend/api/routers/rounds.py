"""HTTP endpoints for session histories, rounds and model parameters."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from growthsim_backend.api.dependencies import get_round_coordinator
from growthsim_backend.api.models import (
    HistoryResponse,
    ModelParametersResponse,
    ValidationFailureResponse,
)
from growthsim_backend.api.models.session import MAX_SESSION_ID_LENGTH
from growthsim_backend.game_logic import (
    EXCHANGE_OPTIONS,
    Controls,
    History,
    RoundCoordinator,
)
from growthsim_backend.shared import (
    EconomicValidationError,
    MissingExogenousDataError,
    SessionNotFoundError,
)

router = APIRouter(tags=["rounds"])

SessionId = Annotated[str, Path(min_length=1, max_length=MAX_SESSION_ID_LENGTH)]


def _history_response(session_id: str, history: History) -> HistoryResponse:
    return HistoryResponse(
        session_id=session_id, rounds_played=len(history) - 1, history=list(history)
    )


@router.get("/health")
def health() -> dict[str, str]:
    """Liveness probe."""

    return {"status": "ok"}


@router.get("/model/parameters", response_model=ModelParametersResponse)
def model_parameters(
    coordinator: RoundCoordinator = Depends(get_round_coordinator),
) -> ModelParametersResponse:
    """Return the active growth model parameters and exchange policies."""

    return ModelParametersResponse(
        parameters=coordinator.parameters, exchange_options=list(EXCHANGE_OPTIONS)
    )


@router.post("/sessions/{session_id}/join", response_model=HistoryResponse)
async def join_session(
    session_id: SessionId,
    coordinator: RoundCoordinator = Depends(get_round_coordinator),
) -> HistoryResponse:
    """Create the session if needed and return its full history."""

    try:
        history = await coordinator.join(session_id)
    except MissingExogenousDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
    return _history_response(session_id, history)


@router.get("/sessions/{session_id}/history", response_model=HistoryResponse)
def session_history(
    session_id: SessionId,
    coordinator: RoundCoordinator = Depends(get_round_coordinator),
) -> HistoryResponse:
    """Return the history of a joined session."""

    try:
        history = coordinator.history(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return _history_response(session_id, history)


@router.post(
    "/sessions/{session_id}/rounds",
    response_model=HistoryResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Session was never joined"},
        status.HTTP_409_CONFLICT: {"model": ValidationFailureResponse},
    },
)
async def submit_round(
    controls: Controls,
    session_id: SessionId,
    coordinator: RoundCoordinator = Depends(get_round_coordinator),
) -> HistoryResponse:
    """Run the next round and broadcast the updated history to subscribers."""

    try:
        history = await coordinator.submit_round(session_id, controls)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except EconomicValidationError as exc:
        body = ValidationFailureResponse(
            message=str(exc), violations=list(exc.violations)
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=body.model_dump(mode="json"),
        ) from exc
    except MissingExogenousDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
    return _history_response(session_id, history)


__all__ = ["router"]
