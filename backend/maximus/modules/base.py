from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel

from ..errors import ChallengeUnavailable, OracleError, SessionBusy, SessionClosed
from ..ledger import CurrencyLedger
from ..timers import ActivityTimer, SystemClock

logger = logging.getLogger(__name__)

ChallengeT = TypeVar("ChallengeT")


class Phase(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    EVALUATING = "evaluating"
    REWARDING = "rewarding"


class Notice(BaseModel):
    title: str
    description: str
    kind: Literal["success", "info", "warning", "error"] = "info"


class Streaks(BaseModel):
    consecutive_correct: int = 0
    consecutive_incorrect: int = 0

    def record(self, correct: Optional[bool]) -> None:
        if correct is None:
            return
        if correct:
            self.consecutive_correct += 1
            self.consecutive_incorrect = 0
        else:
            self.consecutive_incorrect += 1
            self.consecutive_correct = 0


@dataclass
class RoundTiming:
    seconds: float
    ticks: int


@dataclass
class Evaluation:
    reward: int
    correct: Optional[bool]
    feedback: str
    details: Dict[str, Any] = field(default_factory=dict)
    notices: List[Notice] = field(default_factory=list)


@dataclass
class NextRound(Generic[ChallengeT]):
    challenge: ChallengeT
    difficulty: int
    notices: List[Notice] = field(default_factory=list)


@dataclass
class RoundResult:
    evaluation: Evaluation
    previous_difficulty: int
    difficulty: int
    notices: List[Notice]


class ModuleController:
    """Common lifetime handling for every mounted module."""

    module = "module"

    def __init__(self, ledger: CurrencyLedger) -> None:
        self.ledger = ledger
        self.closed = False

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosed(f"{self.module} module is not mounted")

    def _reward(self, amount: int) -> int:
        return self.ledger.add(amount)

    async def start(self) -> None:
        return None

    async def close(self) -> None:
        self.closed = True

    def state(self) -> Dict[str, Any]:
        return {"module": self.module}


class RoundStrategy(ABC, Generic[ChallengeT]):
    """Module-specific half of a round session.

    ``first_round``/``next_round`` may raise ``OracleError`` (the session
    falls back to ``fallback_round``) or ``ChallengeUnavailable`` (the
    session blocks until retried).
    """

    module = "module"
    initial_difficulty = 1
    requires_input = True
    # When set, a timer counts ticks while the round is active
    tick_interval: Optional[float] = None

    def normalize_answer(self, answer: str) -> str:
        return answer.strip()

    @abstractmethod
    async def first_round(self, difficulty: int) -> NextRound[ChallengeT]:
        ...

    @abstractmethod
    def evaluate(self, challenge: ChallengeT, answer: str, difficulty: int, timing: RoundTiming) -> Evaluation:
        ...

    @abstractmethod
    async def next_round(
        self,
        challenge: ChallengeT,
        answer: str,
        evaluation: Evaluation,
        difficulty: int,
        streaks: Streaks,
    ) -> NextRound[ChallengeT]:
        ...

    @abstractmethod
    def fallback_round(self, challenge: Optional[ChallengeT], difficulty: int) -> NextRound[ChallengeT]:
        ...

    @abstractmethod
    def public_challenge(self, challenge: ChallengeT) -> Dict[str, Any]:
        ...


class RoundSession(ModuleController, Generic[ChallengeT]):
    """loading -> active -> evaluating -> rewarding -> loading, forever."""

    def __init__(
        self,
        strategy: RoundStrategy[ChallengeT],
        ledger: CurrencyLedger,
        *,
        clock: Optional[SystemClock] = None,
    ) -> None:
        super().__init__(ledger)
        self.strategy = strategy
        self.module = strategy.module
        self.clock = clock or SystemClock()
        self.phase = Phase.LOADING
        self.difficulty = strategy.initial_difficulty
        self.challenge: Optional[ChallengeT] = None
        self.streaks = Streaks()
        self.rounds_completed = 0
        self.error: Optional[str] = None
        self.last_notices: List[Notice] = []
        self._started_at = 0.0
        self._pending: Optional[asyncio.Task[Any]] = None
        self._round_timer: Optional[ActivityTimer] = None
        if strategy.tick_interval is not None:
            self._round_timer = ActivityTimer(
                strategy.tick_interval,
                lambda: None,
                clock=self.clock,
                name=f"{strategy.module}-round",
            )

    @property
    def blocked(self) -> bool:
        return self.error is not None

    async def start(self) -> None:
        self._ensure_open()
        await self._load(self.strategy.first_round(self.difficulty), None)

    async def retry(self) -> bool:
        """Reload content after a blocking failure; False when nothing was blocked."""
        self._ensure_open()
        if not self.blocked:
            return False
        if self._pending is not None:
            raise SessionBusy(f"{self.module} is already loading")
        self.error = None
        await self._load(self.strategy.first_round(self.difficulty), self.challenge)
        return True

    async def submit(self, answer: str, *, elapsed_seconds: Optional[float] = None) -> Optional[RoundResult]:
        """Evaluate one answer and load the next challenge.

        ``elapsed_seconds`` is the client-measured time from the first
        keystroke; it can only shorten the server-measured round time.
        """
        self._ensure_open()
        if self.blocked:
            raise ChallengeUnavailable(self.error or "no challenge available")
        if self.phase is not Phase.ACTIVE or self.challenge is None:
            raise SessionBusy(f"{self.module} is not accepting answers right now")
        answer = self.strategy.normalize_answer(answer or "")
        if self.strategy.requires_input and not answer:
            return None

        challenge = self.challenge
        difficulty = self.difficulty
        self.phase = Phase.EVALUATING
        timing = await self._stop_round_timer()
        # close() may have run while the timer was stopping
        if self.closed:
            raise SessionClosed(f"{self.module} module was unmounted")
        if elapsed_seconds is not None:
            timing.seconds = max(0.0, min(elapsed_seconds, timing.seconds))
        evaluation = self.strategy.evaluate(challenge, answer, difficulty, timing)

        self.phase = Phase.REWARDING
        self._reward(evaluation.reward)
        self.streaks.record(evaluation.correct)
        self.rounds_completed += 1
        logger.info(
            "%s round %d: reward=%d correct=%s difficulty=%d",
            self.module,
            self.rounds_completed,
            evaluation.reward,
            evaluation.correct,
            difficulty,
        )

        await self._load(
            self.strategy.next_round(challenge, answer, evaluation, difficulty, self.streaks.model_copy()),
            challenge,
        )
        return RoundResult(
            evaluation=evaluation,
            previous_difficulty=difficulty,
            difficulty=self.difficulty,
            notices=evaluation.notices + self.last_notices,
        )

    async def _load(self, loader: Any, previous: Optional[ChallengeT]) -> None:
        if self.closed:
            loader.close()
            raise SessionClosed(f"{self.module} module was unmounted")
        self.phase = Phase.LOADING
        self.last_notices = []
        self._pending = asyncio.ensure_future(loader)
        try:
            nxt = await self._pending
        except OracleError as exc:
            logger.warning("%s oracle failed, keeping difficulty %d: %s", self.module, self.difficulty, exc)
            self._recover(previous)
            return
        except ChallengeUnavailable as exc:
            self._block(exc.message)
            return
        except asyncio.CancelledError:
            if self.closed:
                raise SessionClosed(f"{self.module} module was unmounted") from None
            self._recover(previous)
            raise
        finally:
            self._pending = None
        self._activate(nxt)

    def _recover(self, previous: Optional[ChallengeT]) -> None:
        try:
            nxt = self.strategy.fallback_round(previous, self.difficulty)
        except ChallengeUnavailable as exc:
            self._block(exc.message)
            return
        self._activate(nxt)

    def _block(self, message: str) -> None:
        logger.warning("%s blocked: %s", self.module, message)
        self.error = message
        self.last_notices = [Notice(title="Oops!", description=message, kind="error")]

    def _activate(self, nxt: NextRound[ChallengeT]) -> None:
        self.challenge = nxt.challenge
        self.difficulty = nxt.difficulty
        self.last_notices = list(nxt.notices)
        self.error = None
        self.phase = Phase.ACTIVE
        self._started_at = self.clock.now()
        if self._round_timer is not None and not self.closed:
            self._round_timer.start()

    async def _stop_round_timer(self) -> RoundTiming:
        seconds = self.clock.now() - self._started_at
        ticks = 0
        if self._round_timer is not None:
            ticks = await self._round_timer.stop()
        return RoundTiming(seconds=seconds, ticks=ticks)

    async def close(self) -> None:
        self.closed = True
        if self._pending is not None:
            self._pending.cancel()
        if self._round_timer is not None:
            await self._round_timer.stop()

    def state(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "phase": self.phase.value,
            "difficulty": self.difficulty,
            "challenge": self.strategy.public_challenge(self.challenge) if self.challenge is not None and not self.blocked else None,
            "streaks": self.streaks.model_dump(),
            "rounds_completed": self.rounds_completed,
            "blocked": self.blocked,
            "error": self.error,
        }
