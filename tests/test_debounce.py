"""Tests for the coalescing debouncer."""

import asyncio

from mcnutrition.services.debounce import CoalescingDebouncer


def test_rearming_supersedes_pending_action() -> None:
    calls: list[str] = []

    def recorder(label: str):  # type: ignore[no-untyped-def]
        async def action() -> None:
            calls.append(label)

        return action

    async def scenario() -> None:
        debouncer = CoalescingDebouncer(0.02)
        for label in ["a", "b", "c"]:
            debouncer.arm(recorder(label))
        assert debouncer.pending
        await debouncer.join()

    asyncio.run(scenario())

    assert calls == ["c"]


def test_flush_runs_pending_action_immediately() -> None:
    calls: list[int] = []

    async def action() -> None:
        calls.append(1)

    async def scenario() -> None:
        debouncer = CoalescingDebouncer(60)
        debouncer.arm(action)
        await debouncer.flush()
        assert not debouncer.pending
        await debouncer.flush()

    asyncio.run(scenario())

    assert calls == [1]


def test_cancel_drops_pending_action() -> None:
    calls: list[int] = []

    async def action() -> None:
        calls.append(1)

    async def scenario() -> None:
        debouncer = CoalescingDebouncer(0.01)
        debouncer.arm(action)
        assert debouncer.cancel()
        assert not debouncer.cancel()
        await asyncio.sleep(0.03)

    asyncio.run(scenario())

    assert calls == []


def test_running_action_is_not_cancelled_by_rearm() -> None:
    calls: list[str] = []

    async def scenario() -> None:
        first_started = asyncio.Event()

        async def slow() -> None:
            first_started.set()
            await asyncio.sleep(0.03)
            calls.append("slow")

        async def fast() -> None:
            calls.append("fast")

        debouncer = CoalescingDebouncer(0)
        debouncer.arm(slow)
        await first_started.wait()
        debouncer.arm(fast)
        await debouncer.join()

    asyncio.run(scenario())

    assert sorted(calls) == ["fast", "slow"]
