"""Tests for the scheduler implementations."""

import asyncio

import pytest

from werewolf_host.engine import AsyncioScheduler, VirtualScheduler


class TestVirtualScheduler:

    def test_fires_in_due_order(self):
        scheduler = VirtualScheduler()
        fired = []
        scheduler.call_later(2, lambda: fired.append("late"))
        scheduler.call_later(1, lambda: fired.append("early"))
        scheduler.call_later(1, lambda: fired.append("early-second"))

        assert scheduler.advance(1.5) == 2
        assert fired == ["early", "early-second"]
        assert scheduler.now == 1.5
        assert scheduler.pending == 1

        scheduler.advance(1)
        assert fired == ["early", "early-second", "late"]

    def test_cancelled_timer_does_not_fire(self):
        scheduler = VirtualScheduler()
        fired = []
        handle = scheduler.call_later(1, lambda: fired.append("x"))
        handle.cancel()
        assert scheduler.pending == 0
        assert scheduler.advance(5) == 0
        assert fired == []

    def test_callbacks_scheduled_during_advance(self):
        scheduler = VirtualScheduler()
        fired = []

        def tick():
            fired.append(scheduler.now)
            if len(fired) < 3:
                scheduler.call_later(1, tick)

        scheduler.call_later(1, tick)
        scheduler.advance(10)
        assert fired == [1, 2, 3]

    def test_run_until_idle(self):
        scheduler = VirtualScheduler()
        fired = []
        scheduler.call_later(30, lambda: fired.append(1))
        scheduler.call_later(60, lambda: scheduler.call_later(5, lambda: fired.append(2)))
        assert scheduler.run_until_idle() == 3
        assert fired == [1, 2]
        assert scheduler.now == 65


class TestAsyncioScheduler:

    @pytest.mark.asyncio
    async def test_call_later_on_running_loop(self):
        scheduler = AsyncioScheduler()
        done = asyncio.Event()
        scheduler.call_later(0.01, done.set)
        await asyncio.wait_for(done.wait(), timeout=1)
        assert done.is_set()

    @pytest.mark.asyncio
    async def test_cancel(self):
        scheduler = AsyncioScheduler(asyncio.get_running_loop())
        fired = []
        handle = scheduler.call_later(0.01, lambda: fired.append(1))
        handle.cancel()
        await asyncio.sleep(0.05)
        assert fired == []
