"""Structural constants and exogenous data driving the growth model."""

from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

NEUTRAL_EXCHANGE_POLICY = 1.0


class ExchangeOption(BaseModel):
    """A selectable exchange-rate policy multiplier."""

    model_config = ConfigDict(frozen=True)

    value: float = Field(gt=0)
    label: str


EXCHANGE_OPTIONS: tuple[ExchangeOption, ...] = (
    ExchangeOption(value=0.8, label="Overvalued (×0.8)"),
    ExchangeOption(value=NEUTRAL_EXCHANGE_POLICY, label="Market (×1.0)"),
    ExchangeOption(value=1.2, label="Undervalued (×1.2)"),
)

EXCHANGE_POLICY_VALUES: frozenset[float] = frozenset(
    option.value for option in EXCHANGE_OPTIONS
)


class ExogenousRow(BaseModel):
    """Externally given data for a single round."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int
    tilde_e: float = Field(alias="tildeE", gt=0)
    y_star: float = Field(alias="Ystar", gt=0)
    H: float = Field(gt=0)
    fdi_ratio: float = Field(alias="fdiRatio", ge=0)


def _row(
    year: int, tilde_e: float, y_star: float, h: float, fdi: float
) -> ExogenousRow:
    return ExogenousRow(year=year, tildeE=tilde_e, Ystar=y_star, H=h, fdiRatio=fdi)


# Counterfactual yuan/USD rate, world output (trillions USD), human capital
# index and inward FDI as a share of GDP, one row per five-year round.
# Placeholder series: replace them through MODEL_PARAMETERS_FILE for classroom use.
DEFAULT_EXOGENOUS: tuple[ExogenousRow, ...] = (
    _row(1980, 1.50, 11.2, 1.58, 0.0002),
    _row(1985, 2.94, 12.8, 1.66, 0.005),
    _row(1990, 4.78, 15.2, 1.77, 0.01),
    _row(1995, 8.35, 22.6, 1.90, 0.06),
    _row(2000, 8.28, 31.3, 2.05, 0.045),
    _row(2005, 8.19, 33.8, 2.22, 0.035),
    _row(2010, 6.77, 47.6, 2.40, 0.03),
    _row(2015, 6.23, 66.6, 2.57, 0.025),
    _row(2020, 6.90, 75.2, 2.73, 0.02),
    _row(2025, 7.10, 85.2, 2.90, 0.015),
)


class ModelParameters(BaseModel):
    """Immutable parameter set for the open-economy growth model."""

    model_config = ConfigDict(frozen=True)

    alpha: float = Field(gt=0, lt=1, description="Capital share of output.")
    delta: float = Field(ge=0, le=1, description="Depreciation per round.")
    g: float = Field(description="Baseline TFP growth per round.")
    n: float = Field(gt=-1, description="Labor force growth per round.")
    theta: float = Field(description="TFP response to trade openness.")
    phi: float = Field(description="TFP response to the FDI ratio.")
    epsilon_x: float = Field(description="Export elasticity to the exchange rate.")
    epsilon_m: float = Field(description="Import elasticity to the exchange rate.")
    mu_x: float = Field(description="Export elasticity to foreign income.")
    mu_m: float = Field(description="Import elasticity to domestic income.")
    X0: float = Field(gt=0)
    M0: float = Field(gt=0)
    Y0: float = Field(gt=0)
    K0: float = Field(gt=0)
    L0: float = Field(gt=0)
    A0: float = Field(gt=0)
    base_year: int = 1980
    year_step: int = Field(default=5, ge=1)
    initial_saving_rate: float = Field(default=0.1, gt=0, lt=1)
    exogenous: tuple[ExogenousRow, ...] = DEFAULT_EXOGENOUS


class ModelDefaults(BaseSettings):
    """Load default structural parameters from the environment.

    The values are placeholders, not an estimated calibration. With them a
    saving rate of 0.1 turns investment negative in the round ending in 2000
    under every exchange policy, while a saving rate of 0.3 runs through
    the whole exogenous table.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GROWTHSIM_MODEL_",
        extra="ignore",
    )

    alpha: float = 0.3
    delta: float = 0.1
    g: float = 0.005
    n: float = 0.00717
    theta: float = 0.1515
    phi: float = 0.1
    epsilon_x: float = 0.5
    epsilon_m: float = 0.5
    mu_x: float = 1.0
    mu_m: float = 1.0
    X0: float = 18.1
    M0: float = 21.2
    Y0: float = 773.0
    K0: float = 2050.0
    L0: float = 428.0
    A0: float = 0.82
    base_year: int = 1980
    year_step: int = 5
    initial_saving_rate: float = 0.1

    def to_parameters(self) -> ModelParameters:
        """Convert defaults into an immutable parameter set."""
        return ModelParameters(**self.model_dump(), exogenous=DEFAULT_EXOGENOUS)


@cache
def get_default_model_parameters() -> ModelParameters:
    """Return the cached default parameter set."""
    return ModelDefaults().to_parameters()


def load_model_parameters(path: Path | str | None = None) -> ModelParameters:
    """Read a JSON parameter file, falling back to the defaults when *path* is unset."""
    if path is None:
        return get_default_model_parameters()
    return ModelParameters.model_validate_json(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "DEFAULT_EXOGENOUS",
    "EXCHANGE_OPTIONS",
    "EXCHANGE_POLICY_VALUES",
    "NEUTRAL_EXCHANGE_POLICY",
    "ExchangeOption",
    "ExogenousRow",
    "ModelDefaults",
    "ModelParameters",
    "get_default_model_parameters",
    "load_model_parameters",
]
