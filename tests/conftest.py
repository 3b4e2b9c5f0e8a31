"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from growthsim_backend.api import dependencies as dependency_module
from growthsim_backend.game_logic import (
    BroadcastHub,
    InMemorySessionStore,
    ModelParameters,
    RoundCoordinator,
    get_default_model_parameters,
)
from growthsim_backend.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator


def _clear_caches() -> None:
    get_settings.cache_clear()
    get_default_model_parameters.cache_clear()
    dependency_module.get_model_parameters.cache_clear()
    dependency_module.get_round_coordinator.cache_clear()


@pytest.fixture(autouse=True)
def _isolated_settings() -> Iterator[None]:
    """Ensure settings and process-wide services are rebuilt for every test."""
    _clear_caches()
    yield
    _clear_caches()


@pytest.fixture
def parameters() -> ModelParameters:
    return get_default_model_parameters()


@pytest.fixture
def coordinator(parameters: ModelParameters) -> RoundCoordinator:
    return RoundCoordinator(
        store=InMemorySessionStore(), hub=BroadcastHub(), parameters=parameters
    )


@pytest.fixture
def fragile_parameters(parameters: ModelParameters) -> ModelParameters:
    """Parameters whose large trade surplus drives investment negative at low saving."""
    return parameters.model_copy(
        update={"X0": 100.0, "M0": 1.0, "initial_saving_rate": 0.5}
    )
