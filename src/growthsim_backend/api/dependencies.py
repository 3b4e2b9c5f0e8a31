"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from functools import cache

from growthsim_backend.game_logic import (
    BroadcastHub,
    InMemorySessionStore,
    ModelParameters,
    RoundCoordinator,
    load_model_parameters,
)
from growthsim_backend.settings import get_settings


@cache
def get_model_parameters() -> ModelParameters:
    """Return the parameter set configured for this process."""

    return load_model_parameters(get_settings().model_parameters_file)


@cache
def get_round_coordinator() -> RoundCoordinator:
    """Return the process-wide :class:`RoundCoordinator`.

    Sessions live in memory for the lifetime of the process.
    """

    return RoundCoordinator(
        store=InMemorySessionStore(),
        hub=BroadcastHub(),
        parameters=get_model_parameters(),
    )


__all__ = ["get_model_parameters", "get_round_coordinator"]
