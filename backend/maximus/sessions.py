"""Learner sessions: one currency ledger plus the modules mounted beside it."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from typing import Callable, Dict, Optional, Type, TypeVar

from .errors import MaximusError, NotFound
from .ledger import CurrencyLedger
from .modules.arithmetic import MathStrategy
from .modules.base import ModuleController, RoundSession
from .modules.coding import CodingSession
from .modules.drawing import DrawingSession
from .modules.kindness import KindnessStrategy
from .modules.reading import ReadingStrategy
from .modules.typing_drill import TypingStrategy
from .settings import Settings, settings
from .timers import SystemClock

logger = logging.getLogger(__name__)

ModuleFactory = Callable[[CurrencyLedger], ModuleController]
ControllerT = TypeVar("ControllerT", bound=ModuleController)


def default_factories(config: Settings, clock: Optional[SystemClock] = None) -> Dict[str, ModuleFactory]:
    clock = clock or SystemClock()
    return {
        "math": lambda ledger: RoundSession(MathStrategy(), ledger, clock=clock),
        "reading": lambda ledger: RoundSession(
            ReadingStrategy(tick_interval=config.reading_tick_seconds), ledger, clock=clock
        ),
        "typing": lambda ledger: RoundSession(TypingStrategy(), ledger, clock=clock),
        "kindness": lambda ledger: RoundSession(KindnessStrategy(), ledger, clock=clock),
        "draw": lambda ledger: DrawingSession(
            ledger,
            width=config.canvas_width,
            height=config.canvas_height,
            tick_seconds=config.draw_tick_seconds,
            clock=clock,
        ),
        "coding": lambda ledger: CodingSession(ledger),
    }


class LearnerSession:
    def __init__(
        self,
        session_id: str,
        ledger: CurrencyLedger,
        factories: Dict[str, ModuleFactory],
        *,
        now: float = 0.0,
    ) -> None:
        self.session_id = session_id
        self.ledger = ledger
        self.modules: Dict[str, ModuleController] = {}
        self.last_active = now
        self._factories = factories

    def touch(self, now: float) -> None:
        self.last_active = now

    async def mount(self, module: str) -> ModuleController:
        controller = self.modules.get(module)
        if controller is not None:
            return controller
        factory = self._factories.get(module)
        if factory is None:
            raise NotFound(f"unknown module: {module}")
        controller = factory(self.ledger)
        # Registered before start so a concurrent mount sees the loading controller
        self.modules[module] = controller
        logger.info("session %s: mounting %s", self.session_id, module)
        await controller.start()
        return controller

    async def unmount(self, module: str) -> bool:
        controller = self.modules.pop(module, None)
        if controller is None:
            return False
        logger.info("session %s: unmounting %s", self.session_id, module)
        await controller.close()
        return True

    def get(self, module: str, kind: Type[ControllerT]) -> ControllerT:
        controller = self.modules.get(module)
        if controller is None:
            raise NotFound(f"{module} module is not mounted")
        if not isinstance(controller, kind):
            raise NotFound(f"{module} module is not a {kind.__name__}")
        return controller

    async def close(self) -> None:
        for module in list(self.modules):
            await self.unmount(module)


class SessionRegistry:
    """Open learner sessions keyed by id.

    A session nobody has touched for ``idle_seconds`` is closed by the
    sweeper, which stops every timer its modules still hold.
    """

    def __init__(
        self,
        factories: Optional[Dict[str, ModuleFactory]] = None,
        *,
        tier_size: Optional[int] = None,
        idle_seconds: Optional[float] = None,
        sweep_seconds: Optional[float] = None,
        clock: Optional[SystemClock] = None,
    ) -> None:
        self._factories = factories if factories is not None else default_factories(settings)
        self._tier_size = tier_size or settings.tier_size
        self.idle_seconds = idle_seconds or settings.session_idle_seconds
        self.sweep_seconds = sweep_seconds or settings.session_sweep_seconds
        self._clock = clock or SystemClock()
        self._sessions: Dict[str, LearnerSession] = {}
        self._sweeper: Optional[asyncio.Task[None]] = None

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self) -> LearnerSession:
        session_id = uuid.uuid4().hex
        session = LearnerSession(
            session_id,
            CurrencyLedger(self._tier_size),
            self._factories,
            now=self._clock.now(),
        )
        self._sessions[session_id] = session
        logger.info("learner session %s opened", session_id)
        return session

    def get(self, session_id: str) -> LearnerSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFound("Session not found")
        session.touch(self._clock.now())
        return session

    async def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise NotFound("Session not found")
        await session.close()
        logger.info("learner session %s closed (total %d)", session_id, session.ledger.total)

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)

    async def sweep_idle(self) -> int:
        """Close every session idle for at least ``idle_seconds``; return how many."""
        cutoff = self._clock.now() - self.idle_seconds
        idle = [sid for sid, s in self._sessions.items() if s.last_active <= cutoff]
        for session_id in idle:
            if session_id in self._sessions:
                logger.info("learner session %s idle, closing", session_id)
                await self.close(session_id)
        return len(idle)

    async def _sweep_loop(self) -> None:
        while True:
            await self._clock.sleep(self.sweep_seconds)
            try:
                await self.sweep_idle()
            except MaximusError:
                logger.exception("idle session sweep failed")

    def start_sweeper(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop(), name="session-sweeper")

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


_registry: Optional[SessionRegistry] = None


def get_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry
