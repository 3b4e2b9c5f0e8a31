"""Tests for the growth model transition function."""

import pytest
from pydantic import ValidationError

from growthsim_backend.game_logic import (
    Controls,
    EconomicState,
    ModelParameters,
    exogenous_index,
    initial_state,
    next_state,
)
from growthsim_backend.game_logic.transition import (
    consumption,
    investment,
    production,
)
from growthsim_backend.shared import (
    EconomicValidationError,
    MissingExogenousDataError,
)


def make_controls(saving_rate: float = 0.1, policy: float = 1.0) -> Controls:
    return Controls(savingRate=saving_rate, exchangePolicy=policy)


def test_initial_state_uses_calibrated_stocks(parameters: ModelParameters) -> None:
    state = initial_state(parameters)

    assert state.year == parameters.base_year
    assert state.K == parameters.K0
    assert state.L == parameters.L0
    assert state.A == parameters.A0
    assert state.e == parameters.exogenous[0].tilde_e
    assert state.tilde_e == parameters.exogenous[0].tilde_e
    assert state.X == pytest.approx(parameters.X0)


def test_next_state_is_deterministic(parameters: ModelParameters) -> None:
    prev = initial_state(parameters)
    controls = make_controls(0.25, 1.2)
    row = parameters.exogenous[3]

    first = next_state(prev, controls, row, parameters)
    second = next_state(prev, controls, row, parameters)

    assert first == second
    assert first.model_dump() == second.model_dump()


def test_first_round_matches_documented_equations(
    parameters: ModelParameters,
) -> None:
    prev = initial_state(parameters)
    row = parameters.exogenous[0]

    state = next_state(prev, make_controls(0.1, 1.0), row, parameters)

    e = 1.0 * row.tilde_e
    output = prev.A * prev.K**parameters.alpha * (prev.L * row.H) ** (
        1 - parameters.alpha
    )
    x = parameters.X0 * (e / row.tilde_e) ** parameters.epsilon_x
    m = (
        parameters.M0
        * (e / row.tilde_e) ** (-parameters.epsilon_m)
        * (output / parameters.Y0) ** parameters.mu_m
    )
    nx = x - m
    invest = 0.1 * output - nx

    assert state.year == prev.year + 5
    assert state.Y == pytest.approx(output)
    assert state.NX == pytest.approx(nx)
    assert state.I == pytest.approx(invest)
    assert state.C == pytest.approx(0.9 * output)
    assert state.openness == pytest.approx((x + m) / output)
    assert state.K == pytest.approx((1 - parameters.delta) * prev.K + invest)
    assert state.L == pytest.approx((1 + parameters.n) * prev.L)
    assert state.A == pytest.approx(
        prev.A
        * (
            1
            + parameters.g
            + parameters.theta * state.openness
            + parameters.phi * row.fdi_ratio
        )
    )
    assert state.saving_rate == 0.1
    assert state.exchange_policy_value == 1.0


def test_exchange_policy_scales_nominal_rate(parameters: ModelParameters) -> None:
    prev = initial_state(parameters)
    row = parameters.exogenous[2]

    weak = next_state(prev, make_controls(0.3, 1.2), row, parameters)
    strong = next_state(prev, make_controls(0.3, 0.8), row, parameters)

    assert weak.e == pytest.approx(1.2 * row.tilde_e)
    assert strong.e == pytest.approx(0.8 * row.tilde_e)
    assert weak.X > strong.X
    assert weak.M < strong.M


def test_zero_saving_rate_consumes_all_output(parameters: ModelParameters) -> None:
    with pytest.raises(ValidationError):
        make_controls(0.0)

    controls = Controls.model_construct(saving_rate=0.0, exchange_policy=1.0)
    state = next_state(
        initial_state(parameters), controls, parameters.exogenous[0], parameters
    )

    assert state.C == state.Y
    assert state.I == -state.NX


@pytest.mark.parametrize("policy", [0.5, 1.1, 2.0])
def test_controls_reject_unknown_exchange_policy(policy: float) -> None:
    with pytest.raises(ValidationError):
        make_controls(0.2, policy)


@pytest.mark.parametrize("saving_rate", [-0.1, 1.0, 1.5])
def test_controls_reject_saving_rate_outside_open_interval(
    saving_rate: float,
) -> None:
    with pytest.raises(ValidationError):
        make_controls(saving_rate)


def test_validation_failure_reports_every_field(
    fragile_parameters: ModelParameters,
) -> None:
    prev = initial_state(fragile_parameters)

    with pytest.raises(EconomicValidationError) as excinfo:
        next_state(
            prev,
            make_controls(0.05, 1.2),
            fragile_parameters.exogenous[0],
            fragile_parameters,
        )

    fields = {violation.field for violation in excinfo.value.violations}
    assert "I" in fields
    violation = next(v for v in excinfo.value.violations if v.field == "I")
    assert violation.value < 0
    assert "Investment" in violation.reason


@pytest.mark.parametrize(
    ("history_length", "table_length", "expected"),
    [(1, 10, 0), (5, 10, 4), (10, 10, 9), (11, 10, 9), (40, 10, 9), (3, 1, 0)],
)
def test_exogenous_index_clamps_to_last_row(
    history_length: int, table_length: int, expected: int
) -> None:
    assert exogenous_index(history_length, table_length) == expected


def test_exogenous_index_requires_data() -> None:
    with pytest.raises(MissingExogenousDataError):
        exogenous_index(3, 0)
    with pytest.raises(MissingExogenousDataError):
        exogenous_index(0, 10)


def test_empty_exogenous_table_is_missing_data(parameters: ModelParameters) -> None:
    empty = parameters.model_copy(update={"exogenous": ()})

    with pytest.raises(MissingExogenousDataError):
        initial_state(empty)


def test_equation_helpers() -> None:
    assert production(1.0, 8.0, 1.0, 1.0, 1 / 3) == pytest.approx(2.0)
    assert consumption(100.0, 0.2) == pytest.approx(80.0)
    assert investment(100.0, 0.2, -5.0) == pytest.approx(25.0)


def _play(
    parameters: ModelParameters, controls: Controls, rounds: int
) -> tuple[list[EconomicState], EconomicValidationError | None]:
    history = [initial_state(parameters)]
    for _ in range(rounds):
        index = exogenous_index(len(history), len(parameters.exogenous))
        try:
            history.append(
                next_state(history[-1], controls, parameters.exogenous[index], parameters)
            )
        except EconomicValidationError as exc:
            return history, exc
    return history, None


@pytest.mark.parametrize("policy", [0.8, 1.0, 1.2])
def test_default_saving_rate_runs_out_of_investment_in_2000(
    parameters: ModelParameters, policy: float
) -> None:
    history, error = _play(parameters, make_controls(0.1, policy), rounds=15)

    assert [state.year for state in history] == [1980, 1985, 1990, 1995]
    assert error is not None
    assert [violation.field for violation in error.violations] == ["I"]


@pytest.mark.parametrize("saving_rate", [0.3, 0.6, 0.99])
@pytest.mark.parametrize("policy", [0.8, 1.0, 1.2])
def test_higher_saving_rates_survive_the_whole_table(
    parameters: ModelParameters, saving_rate: float, policy: float
) -> None:
    history, error = _play(parameters, make_controls(saving_rate, policy), rounds=15)

    assert error is None
    assert len(history) == 16
    assert history[-1].year == 2055
