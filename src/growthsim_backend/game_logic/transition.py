"""Pure state-transition function of the open-economy growth model."""

from __future__ import annotations

from growthsim_backend.game_logic.parameters import (
    NEUTRAL_EXCHANGE_POLICY,
    ExogenousRow,
    ModelParameters,
)
from growthsim_backend.game_logic.state import Controls, EconomicState
from growthsim_backend.game_logic.validation import validate_values
from growthsim_backend.shared.errors import MissingExogenousDataError


def nominal_exchange_rate(policy: float, tilde_e: float) -> float:
    """Nominal exchange rate after applying the policy multiplier."""
    return policy * tilde_e


def production(
    A: float, K: float, L: float, H: float, alpha: float  # noqa: N803
) -> float:
    """Cobb-Douglas output with labor augmented by human capital."""
    return A * K**alpha * (L * H) ** (1 - alpha)


def exports(
    e: float,
    base_e: float,
    y_star: float,
    base_y_star: float,
    parameters: ModelParameters,
) -> float:
    """Exports relative to the base year, driven by the exchange rate and foreign income."""
    return (
        parameters.X0
        * (e / base_e) ** parameters.epsilon_x
        * (y_star / base_y_star) ** parameters.mu_x
    )


def imports(
    e: float, base_e: float, Y: float, parameters: ModelParameters  # noqa: N803
) -> float:
    """Imports, falling with a weaker currency and rising with domestic output."""
    return (
        parameters.M0
        * (e / base_e) ** (-parameters.epsilon_m)
        * (Y / parameters.Y0) ** parameters.mu_m
    )


def net_exports(X: float, M: float) -> float:  # noqa: N803
    """Trade balance."""
    return X - M


def openness_ratio(X: float, M: float, Y: float) -> float:  # noqa: N803
    """Total trade as a share of output."""
    return (X + M) / Y


def consumption(Y: float, saving_rate: float) -> float:  # noqa: N803
    """Output that is not saved."""
    return (1 - saving_rate) * Y


def investment(Y: float, saving_rate: float, NX: float) -> float:  # noqa: N803
    """Domestic saving net of the trade surplus."""
    return saving_rate * Y - NX


def next_tfp(
    A: float,  # noqa: N803
    openness: float,
    fdi_ratio: float,
    parameters: ModelParameters,
) -> float:
    """Productivity after one round of baseline, trade and FDI driven growth."""
    return A * (
        1 + parameters.g + parameters.theta * openness + parameters.phi * fdi_ratio
    )


def next_capital(
    K: float, I: float, parameters: ModelParameters  # noqa: N803, E741
) -> float:
    """Depreciated capital plus the round's investment."""
    return (1 - parameters.delta) * K + I


def next_labor(L: float, parameters: ModelParameters) -> float:  # noqa: N803
    """Labor force after one round of growth."""
    return (1 + parameters.n) * L


def base_row(parameters: ModelParameters) -> ExogenousRow:
    """Return the round-0 row that anchors the exchange-rate and income indices."""
    if not parameters.exogenous:
        msg = "The exogenous data table is empty."
        raise MissingExogenousDataError(msg)
    return parameters.exogenous[0]


def exogenous_index(history_length: int, table_length: int) -> int:
    """Return the exogenous row index for the next round.

    Once the table is exhausted the last row is reused for every later round.
    """
    if table_length <= 0:
        msg = "The exogenous data table is empty."
        raise MissingExogenousDataError(msg)
    if history_length <= 0:
        msg = "The session history has no previous state."
        raise MissingExogenousDataError(msg)
    return min(history_length - 1, table_length - 1)


def _round_flows(
    *,
    A: float,  # noqa: N803
    K: float,  # noqa: N803
    L: float,  # noqa: N803
    controls: Controls,
    exog: ExogenousRow,
    parameters: ModelParameters,
) -> dict[str, float]:
    base = base_row(parameters)
    base_e = nominal_exchange_rate(NEUTRAL_EXCHANGE_POLICY, base.tilde_e)

    e = nominal_exchange_rate(controls.exchange_policy, exog.tilde_e)
    output = production(A, K, L, exog.H, parameters.alpha)
    x = exports(e, base_e, exog.y_star, base.y_star, parameters)
    m = imports(e, base_e, output, parameters)
    nx = net_exports(x, m)
    return {
        "Y": output,
        "X": x,
        "M": m,
        "NX": nx,
        "openness": openness_ratio(x, m, output),
        "C": consumption(output, controls.saving_rate),
        "I": investment(output, controls.saving_rate, nx),
        "e": e,
        "tildeE": exog.tilde_e,
        "fdiRatio": exog.fdi_ratio,
        "YStar": exog.y_star,
        "H": exog.H,
    }


def next_state(
    prev: EconomicState,
    controls: Controls,
    exog: ExogenousRow,
    parameters: ModelParameters,
) -> EconomicState:
    """Advance *prev* by one round.

    Computes the round's flows from the previous stocks, updates capital,
    labor and productivity, and validates every quantity before building the
    next state. Raises :class:`EconomicValidationError` listing every
    out-of-bounds field; nothing is clamped.
    """
    flows = _round_flows(
        A=prev.A,
        K=prev.K,
        L=prev.L,
        controls=controls,
        exog=exog,
        parameters=parameters,
    )
    candidate = {
        "K": next_capital(prev.K, flows["I"], parameters),
        "L": next_labor(prev.L, parameters),
        "A": next_tfp(prev.A, flows["openness"], exog.fdi_ratio, parameters),
        **flows,
    }
    values = validate_values(candidate).unwrap()
    return EconomicState.from_values(
        year=prev.year + parameters.year_step, values=values, controls=controls
    )


def initial_state(parameters: ModelParameters) -> EconomicState:
    """Return the base-year state every session starts from.

    Stocks are the calibrated ``K0``, ``L0`` and ``A0``; flows are evaluated
    at the neutral exchange policy, the initial saving rate and the round-0
    exogenous row without advancing the stocks.
    """
    controls = Controls(
        saving_rate=parameters.initial_saving_rate,
        exchange_policy=NEUTRAL_EXCHANGE_POLICY,
    )
    flows = _round_flows(
        A=parameters.A0,
        K=parameters.K0,
        L=parameters.L0,
        controls=controls,
        exog=base_row(parameters),
        parameters=parameters,
    )
    candidate = {"K": parameters.K0, "L": parameters.L0, "A": parameters.A0, **flows}
    values = validate_values(candidate).unwrap()
    return EconomicState.from_values(
        year=parameters.base_year, values=values, controls=controls
    )


__all__ = [
    "base_row",
    "consumption",
    "exogenous_index",
    "exports",
    "imports",
    "initial_state",
    "investment",
    "net_exports",
    "next_capital",
    "next_labor",
    "next_state",
    "next_tfp",
    "nominal_exchange_rate",
    "openness_ratio",
    "production",
]
