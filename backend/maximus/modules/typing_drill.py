from __future__ import annotations

from typing import Any, Dict, Optional

from ..content import INITIAL_TYPING_TEXT
from ..ledger import CURRENCY_NAME
from ..oracles import TypingDifficultyOracle
from ..scoring import typing_performance, typing_reward
from .base import Evaluation, NextRound, Notice, RoundStrategy, RoundTiming, Streaks

GOOD_ACCURACY = 80


class TypingStrategy(RoundStrategy[str]):
    module = "typing"

    def __init__(self, oracle: Optional[TypingDifficultyOracle] = None) -> None:
        self.oracle = oracle or TypingDifficultyOracle()

    def normalize_answer(self, answer: str) -> str:
        # Leading spaces count against positional accuracy, so keep them
        return answer if answer.strip() else ""

    async def first_round(self, difficulty: int) -> NextRound[str]:
        return await self._ask("", "", difficulty)

    def evaluate(self, challenge: str, answer: str, difficulty: int, timing: RoundTiming) -> Evaluation:
        wpm, accuracy = typing_performance(challenge, answer, timing.seconds)
        reward = typing_reward(wpm, accuracy, difficulty)
        return Evaluation(
            reward=reward,
            correct=accuracy >= GOOD_ACCURACY,
            feedback=f"SPEED: {wpm} WPM, SMARTS: {accuracy}% accuracy! +{reward} {CURRENCY_NAME}!",
            details={"wpm": wpm, "accuracy": accuracy},
            notices=[Notice(
                title="Round Done!",
                description=f"SPEED: {wpm} WPM, SMARTS: {accuracy}% accuracy! +{reward} {CURRENCY_NAME}!",
                kind="success" if accuracy > 85 else "info",
            )],
        )

    async def next_round(
        self,
        challenge: str,
        answer: str,
        evaluation: Evaluation,
        difficulty: int,
        streaks: Streaks,
    ) -> NextRound[str]:
        return await self._ask(challenge, answer, difficulty)

    async def _ask(self, previous_text: str, typed_text: str, difficulty: int) -> NextRound[str]:
        result = await self.oracle.adjust(
            previous_text=previous_text,
            typed_text=typed_text,
            current_difficulty=difficulty,
        )
        return NextRound(
            result.text,
            result.difficulty,
            [Notice(
                title="New Challenge!",
                description=result.feedback or f"Get ready! Difficulty: {result.difficulty}",
            )],
        )

    def fallback_round(self, challenge: Optional[str], difficulty: int) -> NextRound[str]:
        return NextRound(
            challenge or INITIAL_TYPING_TEXT,
            difficulty or self.initial_difficulty,
            [Notice(
                title="Oh no!",
                description="Couldn't get a new challenge. Let's try this one again!",
                kind="warning",
            )],
        )

    def public_challenge(self, challenge: str) -> Dict[str, Any]:
        return {"text": challenge}
