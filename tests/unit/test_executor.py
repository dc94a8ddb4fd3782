import asyncio

import pytest

from trippio_stats.domain.exceptions import ProbeStatusError
from trippio_stats.domain.models import ProbeStatus
from trippio_stats.fanout.executor import (
    BoundedFanOutExecutor,
    CancellationToken,
    ProbeTask,
)


def _value_task(name: str, value):
    async def call():
        await asyncio.sleep(0)
        return value

    return ProbeTask(name, call)


def _failing_task(name: str, error: Exception):
    async def call():
        await asyncio.sleep(0)
        raise error

    return ProbeTask(name, call)


def test_executor_rejects_non_positive_width():
    with pytest.raises(ValueError):
        BoundedFanOutExecutor(0)


def test_run_preserves_input_order_and_settles_failures():
    executor = BoundedFanOutExecutor(3)
    tasks = [
        _value_task("a", 1),
        _failing_task("b", ProbeStatusError(context={"status_code": 404})),
        _value_task("c", 3),
    ]

    results = asyncio.run(executor.run(tasks))

    assert [result.probe for result in results] == ["a", "b", "c"]
    assert [result.status for result in results] == [
        ProbeStatus.FULFILLED,
        ProbeStatus.REJECTED,
        ProbeStatus.FULFILLED,
    ]
    assert results[1].reason.kind == "status"
    assert results[1].reason.status_code == 404
    assert results[2].value == 3


def test_unexpected_exception_becomes_rejected_result():
    executor = BoundedFanOutExecutor()

    result = asyncio.run(executor.run_one(_failing_task("boom", KeyError("x"))))

    assert not result.ok
    assert result.reason.kind == "unexpected"


def test_run_never_exceeds_width():
    executor = BoundedFanOutExecutor(4)
    active = 0
    peak = 0

    def make(index: int) -> ProbeTask:
        async def call():
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.001)
            active -= 1
            return index

        return ProbeTask(f"p{index}", call)

    results = asyncio.run(executor.run([make(i) for i in range(20)]))

    assert [result.value for result in results] == list(range(20))
    assert peak == 4


def test_cancelled_token_prevents_launch():
    executor = BoundedFanOutExecutor()
    token = CancellationToken()
    token.cancel()
    launched = []

    async def call():
        launched.append(True)
        return 1

    results = asyncio.run(executor.run([ProbeTask("x", call)] * 3, token))

    assert launched == []
    assert all(result.reason.kind == "cancelled" for result in results)


def test_cancellation_mid_batch_stops_remaining_tasks():
    executor = BoundedFanOutExecutor(1)
    token = CancellationToken()
    launched = []

    def make(index: int) -> ProbeTask:
        async def call():
            launched.append(index)
            if index == 1:
                token.cancel()
            return index

        return ProbeTask(f"p{index}", call)

    results = asyncio.run(executor.run([make(i) for i in range(5)], token))

    assert launched == [0, 1]
    assert [result.ok for result in results] == [True, True, False, False, False]


def test_empty_batch_returns_empty_list():
    assert asyncio.run(BoundedFanOutExecutor().run([])) == []
