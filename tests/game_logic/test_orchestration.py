"""Tests for the round coordinator."""

import asyncio

import pytest

from growthsim_backend.game_logic import (
    BroadcastHub,
    Controls,
    InMemorySessionStore,
    ModelParameters,
    RoundCoordinator,
    initial_state,
)
from growthsim_backend.shared import (
    EconomicValidationError,
    MissingExogenousDataError,
    SessionNotFoundError,
)

STEADY = Controls(savingRate=0.4, exchangePolicy=0.8)


def test_join_returns_initial_history(
    coordinator: RoundCoordinator, parameters: ModelParameters
) -> None:
    history = asyncio.run(coordinator.join("s1"))

    assert history == (initial_state(parameters),)
    assert history[0].K == parameters.K0
    assert history[0].L == parameters.L0
    assert history[0].A == parameters.A0
    assert history[0].year == parameters.base_year


def test_join_twice_returns_identical_history(
    coordinator: RoundCoordinator,
) -> None:
    async def scenario() -> None:
        await coordinator.join("s1")
        await coordinator.submit_round("s1", STEADY)
        first = await coordinator.join("s1")
        second = await coordinator.join("s1")
        assert first == second
        assert len(second) == 2

    asyncio.run(scenario())


def test_submit_round_appends_exactly_one_state(
    coordinator: RoundCoordinator, parameters: ModelParameters
) -> None:
    async def scenario() -> None:
        before = await coordinator.join("s1")
        after = await coordinator.submit_round(
            "s1", Controls(savingRate=0.1, exchangePolicy=1.0)
        )
        assert after[:-1] == before
        assert len(after) == len(before) + 1
        assert after[-1].year == before[-1].year + 5
        expected_k = (1 - parameters.delta) * parameters.K0 + after[-1].I
        assert after[-1].K == pytest.approx(expected_k)

    asyncio.run(scenario())


def test_history_invariants_hold_past_the_exogenous_table(
    coordinator: RoundCoordinator, parameters: ModelParameters
) -> None:
    rounds = len(parameters.exogenous) + 3

    async def scenario() -> tuple:
        await coordinator.join("s1")
        history = ()
        for _ in range(rounds):
            history = await coordinator.submit_round("s1", STEADY)
        return history

    history = asyncio.run(scenario())

    assert len(history) == rounds + 1
    for previous, current in zip(history, history[1:], strict=False):
        assert current.year == previous.year + 5
    for state in history:
        assert state.K > 0
        assert state.L > 0
        assert state.A > 0
    last_row = parameters.exogenous[-1]
    assert history[-1].tilde_e == last_row.tilde_e
    assert history[-2].tilde_e == last_row.tilde_e


def test_submit_round_for_unknown_session_does_not_create_it(
    coordinator: RoundCoordinator,
) -> None:
    with pytest.raises(SessionNotFoundError):
        asyncio.run(coordinator.submit_round("ghost", STEADY))

    with pytest.raises(SessionNotFoundError):
        coordinator.history("ghost")


def test_validation_failure_leaves_history_untouched(
    fragile_parameters: ModelParameters,
) -> None:
    hub = BroadcastHub()
    coordinator = RoundCoordinator(
        store=InMemorySessionStore(), hub=hub, parameters=fragile_parameters
    )

    async def scenario() -> None:
        subscription, before = await coordinator.subscribe("s1")
        with pytest.raises(EconomicValidationError) as excinfo:
            await coordinator.submit_round(
                "s1", Controls(savingRate=0.05, exchangePolicy=1.2)
            )
        assert "I" in {violation.field for violation in excinfo.value.violations}
        assert coordinator.history("s1") == before
        subscription.close()
        delivered = [len(history) async for history in subscription.stream()]
        assert delivered == [1]

    asyncio.run(scenario())


def test_empty_exogenous_table_is_reported(parameters: ModelParameters) -> None:
    coordinator = RoundCoordinator(
        store=InMemorySessionStore(),
        hub=BroadcastHub(),
        parameters=parameters.model_copy(update={"exogenous": ()}),
    )

    with pytest.raises(MissingExogenousDataError):
        asyncio.run(coordinator.join("s1"))


def test_concurrent_rounds_for_one_session_are_serialized(
    coordinator: RoundCoordinator,
) -> None:
    async def scenario() -> tuple:
        await coordinator.join("s1")
        results = await asyncio.gather(
            *(coordinator.submit_round("s1", STEADY) for _ in range(12))
        )
        assert sorted(len(history) for history in results) == list(range(2, 14))
        return coordinator.history("s1")

    history = asyncio.run(scenario())

    assert len(history) == 13
    years = [state.year for state in history]
    assert years == [years[0] + 5 * index for index in range(13)]


def test_sessions_do_not_block_each_other(parameters: ModelParameters) -> None:
    store = InMemorySessionStore()
    coordinator = RoundCoordinator(
        store=store, hub=BroadcastHub(), parameters=parameters
    )

    async def scenario() -> int:
        await coordinator.join("busy")
        await coordinator.join("free")
        async with store.lock("busy"):
            history = await asyncio.wait_for(
                coordinator.submit_round("free", STEADY), timeout=1
            )
        return len(history)

    assert asyncio.run(scenario()) == 2


def test_subscribers_receive_every_committed_round(
    coordinator: RoundCoordinator,
) -> None:
    async def scenario() -> tuple[list[int], list[int]]:
        first, _ = await coordinator.subscribe("s1")
        second, _ = await coordinator.subscribe("s1")
        await coordinator.submit_round("s1", STEADY)
        await coordinator.submit_round("s1", STEADY)
        coordinator.unsubscribe(first)
        coordinator.unsubscribe(second)
        return (
            [len(history) async for history in first.stream()],
            [len(history) async for history in second.stream()],
        )

    assert asyncio.run(scenario()) == ([1, 2, 3], [1, 2, 3])
