"""Shared errors, enumerations and cross-cutting helpers for the backend."""

from growthsim_backend.shared.enums import ErrorCode
from growthsim_backend.shared.errors import (
    EconomicValidationError,
    MissingExogenousDataError,
    SessionNotFoundError,
    SimulationError,
)

__all__ = [
    "EconomicValidationError",
    "ErrorCode",
    "MissingExogenousDataError",
    "SessionNotFoundError",
    "SimulationError",
]
