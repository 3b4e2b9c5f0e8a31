"""Economic state and player control models exchanged by the simulation core."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from growthsim_backend.game_logic.parameters import (
    EXCHANGE_POLICY_VALUES,
    NEUTRAL_EXCHANGE_POLICY,
)

_STATE_FIELDS_BY_ALIAS = {
    "tildeE": "tilde_e",
    "savingRate": "saving_rate",
    "exchangePolicyValue": "exchange_policy_value",
}


class Controls(BaseModel):
    """Policy levers chosen by the players for a single round."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    saving_rate: float = Field(alias="savingRate", gt=0, lt=1)
    exchange_policy: float = Field(alias="exchangePolicy")

    @field_validator("exchange_policy")
    @classmethod
    def _validate_exchange_policy(cls, value: float) -> float:
        if value not in EXCHANGE_POLICY_VALUES:
            options = sorted(EXCHANGE_POLICY_VALUES)
            allowed = ", ".join(str(option) for option in options)
            msg = f"exchangePolicy must be one of {allowed}."
            raise ValueError(msg)
        return float(value)


class EconomicState(BaseModel):
    """Outcome of one round: updated stocks plus the flows observed during it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int
    K: float
    L: float
    A: float
    Y: float
    X: float
    M: float
    NX: float
    openness: float
    C: float
    I: float  # noqa: E741
    e: float
    tilde_e: float = Field(alias="tildeE")
    saving_rate: float = Field(alias="savingRate")
    exchange_policy_value: float = Field(
        alias="exchangePolicyValue", default=NEUTRAL_EXCHANGE_POLICY
    )

    @classmethod
    def from_values(
        cls,
        *,
        year: int,
        values: dict[str, float],
        controls: Controls,
    ) -> EconomicState:
        """Build a state from validated economic *values* and the *controls* used."""
        fields = {
            _STATE_FIELDS_BY_ALIAS.get(name, name): value
            for name, value in values.items()
            if name in cls.model_fields or name in _STATE_FIELDS_BY_ALIAS
        }
        return cls(
            year=year,
            saving_rate=controls.saving_rate,
            exchange_policy_value=controls.exchange_policy,
            **fields,
        )


__all__ = ["Controls", "EconomicState"]
