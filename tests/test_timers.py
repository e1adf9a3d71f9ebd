from __future__ import annotations

import pytest

from conftest import FakeClock, settle
from maximus.timers import ActivityTimer


@pytest.mark.asyncio
async def test_timer_ticks_on_interval(clock: FakeClock) -> None:
    fired: list[float] = []
    timer = ActivityTimer(10, lambda: fired.append(clock.now()), clock=clock)
    timer.start()
    await clock.advance(35)
    assert fired == [10, 20, 30]
    assert await timer.stop() == 3
    assert not timer.running


@pytest.mark.asyncio
async def test_stop_cancels_future_ticks(clock: FakeClock) -> None:
    fired: list[int] = []
    timer = ActivityTimer(10, lambda: fired.append(1), clock=clock)
    timer.start()
    await clock.advance(15)
    await timer.stop()
    await clock.advance(100)
    assert len(fired) == 1


@pytest.mark.asyncio
async def test_restart_replaces_schedule(clock: FakeClock) -> None:
    fired: list[int] = []
    timer = ActivityTimer(10, lambda: fired.append(1), clock=clock)
    timer.start()
    await clock.advance(5)
    timer.start()
    await settle()
    await clock.advance(9)
    # The first schedule would have fired at t=10
    assert fired == []
    await clock.advance(1)
    assert fired == [1]
    await timer.stop()


@pytest.mark.asyncio
async def test_context_manager_releases_timer(clock: FakeClock) -> None:
    fired: list[int] = []
    async with ActivityTimer(1, lambda: fired.append(1), clock=clock) as timer:
        await clock.advance(3)
        assert timer.running
    assert not timer.running
    await clock.advance(10)
    assert len(fired) == 3


@pytest.mark.asyncio
async def test_stop_without_start_is_harmless() -> None:
    timer = ActivityTimer(1, lambda: None)
    assert await timer.stop() == 0


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ActivityTimer(0, lambda: None)
