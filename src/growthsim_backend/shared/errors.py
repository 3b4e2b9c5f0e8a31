"""Typed failures raised by the simulation core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from growthsim_backend.game_logic.validation import Violation


class SimulationError(Exception):
    """Base class for every error surfaced by the round coordinator."""

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


class EconomicValidationError(SimulationError):
    """Raised when computed economic values fall outside their bounds."""

    def __init__(self, violations: tuple[Violation, ...]) -> None:
        fields = ", ".join(violation.field for violation in violations)
        payload = [violation.model_dump(mode="json") for violation in violations]
        super().__init__(
            f"Economic values out of bounds: {fields}", {"violations": payload}
        )
        self.violations = violations


class SessionNotFoundError(SimulationError):
    """Raised when a round is requested for a session that was never joined."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Session '{session_id}' has not been joined.",
            {"session_id": session_id},
        )
        self.session_id = session_id


class MissingExogenousDataError(SimulationError):
    """Raised when the exogenous table or the previous state is unavailable."""


__all__ = [
    "EconomicValidationError",
    "MissingExogenousDataError",
    "SessionNotFoundError",
    "SimulationError",
]
