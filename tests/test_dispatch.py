"""Tests for the bounded-concurrency batch dispatcher."""

import asyncio
from uuid import uuid4

import pytest

from diet_coach.domain.dispatch import DispatchTarget, TargetState
from diet_coach.services.dispatch import BatchDispatcher


def _targets(count: int) -> list[DispatchTarget]:
    return [DispatchTarget(user_id=uuid4(), token=f"token-{i}") for i in range(count)]


def test_failures_are_isolated_and_every_target_terminates() -> None:
    targets = _targets(10)
    failing = {targets[2].token, targets[7].token}
    states: dict[str, list[TargetState]] = {}

    def record(target: DispatchTarget, state: TargetState) -> None:
        states.setdefault(target.token, []).append(state)

    async def operation(target: DispatchTarget) -> None:
        await asyncio.sleep(0)
        if target.token in failing:
            raise RuntimeError("boom")

    dispatcher = BatchDispatcher(concurrency=3, on_transition=record)
    outcome = asyncio.run(dispatcher.run(targets, operation))

    assert outcome.total == 10
    assert outcome.succeeded == 8
    assert outcome.failed == 2
    assert set(outcome.failure_reasons) == {targets[2].user_id, targets[7].user_id}
    assert outcome.failure_reasons[targets[2].user_id] == "RuntimeError: boom"
    for target in targets:
        history = states[target.token]
        assert history[:2] == [TargetState.PENDING, TargetState.IN_FLIGHT]
        assert history[-1] in {TargetState.SUCCEEDED, TargetState.FAILED}
        assert len(history) == 3


def test_in_flight_never_exceeds_concurrency() -> None:
    in_flight = 0
    peak = 0

    def record(target: DispatchTarget, state: TargetState) -> None:
        nonlocal in_flight, peak
        if state is TargetState.IN_FLIGHT:
            in_flight += 1
            peak = max(peak, in_flight)
        elif state in {TargetState.SUCCEEDED, TargetState.FAILED}:
            in_flight -= 1

    async def operation(target: DispatchTarget) -> None:
        await asyncio.sleep(0.01)

    dispatcher = BatchDispatcher(concurrency=3, on_transition=record)
    outcome = asyncio.run(dispatcher.run(_targets(12), operation))

    assert outcome.succeeded == 12
    assert peak == 3
    assert in_flight == 0


def test_outcomes_keep_submission_order() -> None:
    targets = _targets(5)

    async def operation(target: DispatchTarget) -> None:
        # later targets finish first
        await asyncio.sleep(0.01 * (5 - int(target.token.split("-")[1])))

    dispatcher = BatchDispatcher(concurrency=5)
    outcome = asyncio.run(dispatcher.run(targets, operation))

    assert [item.target for item in outcome.outcomes] == targets


def test_empty_batch_returns_empty_outcome() -> None:
    async def operation(target: DispatchTarget) -> None:
        raise AssertionError("should not be called")

    outcome = asyncio.run(BatchDispatcher(concurrency=3).run([], operation))

    assert outcome.total == 0
    assert outcome.failure_reasons == {}


def test_slow_targets_time_out_without_blocking_others() -> None:
    targets = _targets(3)

    async def operation(target: DispatchTarget) -> None:
        if target is targets[1]:
            await asyncio.sleep(1)

    dispatcher = BatchDispatcher(concurrency=2, target_timeout_seconds=0.05)
    outcome = asyncio.run(dispatcher.run(targets, operation))

    assert outcome.succeeded == 2
    assert outcome.failure_reasons == {targets[1].user_id: "timed out"}


def test_timeout_raised_by_the_operation_keeps_its_reason() -> None:
    targets = _targets(2)

    async def operation(target: DispatchTarget) -> None:
        if target is targets[0]:
            raise TimeoutError("upstream slow")

    for timeout in (None, 5.0):
        dispatcher = BatchDispatcher(concurrency=2, target_timeout_seconds=timeout)
        outcome = asyncio.run(dispatcher.run(targets, operation))

        assert outcome.failure_reasons == {
            targets[0].user_id: "TimeoutError: upstream slow"
        }
        assert outcome.succeeded == 1


def test_invalid_configuration_is_rejected() -> None:
    with pytest.raises(ValueError):
        BatchDispatcher(concurrency=0)
    with pytest.raises(ValueError):
        BatchDispatcher(concurrency=1, target_timeout_seconds=0)
