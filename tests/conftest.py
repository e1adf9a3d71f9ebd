"""Shared pytest fixtures: a controllable clock, scripted oracles and a ledger."""

from __future__ import annotations

import asyncio
import random
from typing import Any

import pytest

from maximus.errors import OracleError
from maximus.ledger import CurrencyLedger
from maximus.oracles import DifficultyAdjustment, KindnessScenario, TypingChallenge


async def settle() -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(5):
        await asyncio.sleep(0)


class FakeClock:
    """Virtual time. ``sleep`` only returns when ``advance`` moves past it."""

    def __init__(self) -> None:
        self._now = 0.0
        self._sleepers: list[tuple[float, asyncio.Future[None]]] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._sleepers.append((self._now + seconds, fut))
        await fut

    async def advance(self, seconds: float) -> None:
        target = self._now + seconds
        await settle()
        while True:
            due = [s for s in self._sleepers if s[0] <= target and not s[1].done()]
            if not due:
                break
            sleeper = min(due, key=lambda s: s[0])
            self._sleepers.remove(sleeper)
            self._now = sleeper[0]
            sleeper[1].set_result(None)
            await settle()
        self._sleepers = [s for s in self._sleepers if not s[1].done()]
        self._now = target


class ScriptedOracle:
    """Hands out queued results in order; a queued exception is raised instead."""

    def __init__(self, *results: Any) -> None:
        self.results = list(results)
        self.calls: list[dict[str, Any]] = []

    async def _next(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if not self.results:
            raise OracleError("no scripted answer left")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def adjust(self, **kwargs: Any) -> Any:
        return await self._next(**kwargs)

    async def generate(self, **kwargs: Any) -> Any:
        return await self._next(**kwargs)


class GatedOracle(ScriptedOracle):
    """Like ScriptedOracle, but each call waits until ``gate`` is set."""

    def __init__(self, *results: Any) -> None:
        super().__init__(*results)
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    async def _next(self, **kwargs: Any) -> Any:
        self.entered.set()
        await self.gate.wait()
        return await super()._next(**kwargs)


def adjustment(level: int, rationale: str = "steady") -> DifficultyAdjustment:
    return DifficultyAdjustment(new_difficulty=level, rationale=rationale)


def typing_challenge(text: str, level: int, feedback: str = "Nice typing!") -> TypingChallenge:
    return TypingChallenge(text=text, difficulty=level, feedback=feedback)


def scenario(correct: str = "B") -> KindnessScenario:
    return KindnessScenario(
        scenario_text="A classmate dropped their crayons all over the floor.",
        choice_a="Walk past and keep playing.",
        choice_b="Help pick the crayons up.",
        correct_choice=correct,
        explanation="Helping others shows you care.",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger() -> CurrencyLedger:
    return CurrencyLedger(tier_size=100)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
