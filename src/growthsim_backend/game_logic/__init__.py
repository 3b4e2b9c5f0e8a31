"""Growth model, validation and session coordination for the simulation."""

from growthsim_backend.game_logic.broadcast import BroadcastHub, Subscription
from growthsim_backend.game_logic.orchestration import RoundCoordinator
from growthsim_backend.game_logic.parameters import (
    EXCHANGE_OPTIONS,
    ExchangeOption,
    ExogenousRow,
    ModelDefaults,
    ModelParameters,
    get_default_model_parameters,
    load_model_parameters,
)
from growthsim_backend.game_logic.persistence import (
    History,
    InMemorySessionStore,
    SessionStore,
)
from growthsim_backend.game_logic.state import Controls, EconomicState
from growthsim_backend.game_logic.transition import (
    exogenous_index,
    initial_state,
    next_state,
)
from growthsim_backend.game_logic.validation import (
    VALUE_BOUNDS,
    ValidationResult,
    ValueBounds,
    Violation,
    validate_values,
)

__all__ = [
    "EXCHANGE_OPTIONS",
    "VALUE_BOUNDS",
    "BroadcastHub",
    "Controls",
    "EconomicState",
    "ExchangeOption",
    "ExogenousRow",
    "History",
    "InMemorySessionStore",
    "ModelDefaults",
    "ModelParameters",
    "RoundCoordinator",
    "SessionStore",
    "Subscription",
    "ValidationResult",
    "ValueBounds",
    "Violation",
    "exogenous_index",
    "get_default_model_parameters",
    "initial_state",
    "load_model_parameters",
    "next_state",
    "validate_values",
]
