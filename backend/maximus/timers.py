from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SystemClock:
    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ActivityTimer:
    """Cancellable periodic task calling ``on_tick`` every ``interval`` seconds.

    The timer is a scoped resource: whoever calls ``start`` owns a matching
    ``stop`` on every exit path. ``async with`` does this automatically.
    Restarting a running timer cancels the previous schedule first, so two
    schedules never run at once.
    """

    def __init__(
        self,
        interval: float,
        on_tick: Callable[[], None],
        *,
        clock: Optional[SystemClock] = None,
        name: str = "activity",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.name = name
        self.ticks = 0
        self._on_tick = on_tick
        self._clock = clock or SystemClock()
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            self._task.cancel()
        self.ticks = 0
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"timer:{self.name}")

    async def stop(self) -> int:
        """Cancel the schedule and return how many ticks fired."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        return self.ticks

    async def _run(self) -> None:
        while True:
            await self._clock.sleep(self.interval)
            self.ticks += 1
            logger.debug("%s timer tick %d", self.name, self.ticks)
            self._on_tick()

    async def __aenter__(self) -> "ActivityTimer":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
