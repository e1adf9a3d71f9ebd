from __future__ import annotations

import random
from typing import Any, Dict, Optional

from ..content import generate_reading_passage
from ..ledger import CURRENCY_NAME
from ..oracles import ReadingDifficultyOracle
from ..scoring import READING_TOTAL_QUESTIONS, reading_reward, reading_score, round_half_up
from .base import Evaluation, NextRound, Notice, RoundStrategy, RoundTiming, Streaks


class ReadingStrategy(RoundStrategy[str]):
    """Read-aloud passages timed by a one-second ticker.

    There is no typed answer: finishing the passage is the submission, and
    the time taken stands in for a comprehension score.
    """

    module = "reading"
    requires_input = False

    def __init__(
        self,
        oracle: Optional[ReadingDifficultyOracle] = None,
        rng: Optional[random.Random] = None,
        tick_interval: float = 1.0,
    ) -> None:
        self.oracle = oracle or ReadingDifficultyOracle()
        self.rng = rng or random.Random()
        self.tick_interval = tick_interval

    async def first_round(self, difficulty: int) -> NextRound[str]:
        return NextRound(generate_reading_passage(difficulty, self.rng), difficulty)

    def evaluate(self, challenge: str, answer: str, difficulty: int, timing: RoundTiming) -> Evaluation:
        seconds = int(timing.ticks * (self.tick_interval or 1.0))
        score = reading_score(seconds, difficulty)
        reward = reading_reward(score)
        return Evaluation(
            reward=reward,
            correct=score >= 50,
            feedback=f"Great Reading! You earned {reward} {CURRENCY_NAME}!",
            details={"seconds": seconds, "score": score},
            notices=[Notice(
                title="Great Reading!",
                description=f"You earned {reward} {CURRENCY_NAME}!",
                kind="success",
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
        score = min(100.0, evaluation.details["score"])
        adjustment = await self.oracle.adjust(
            level=difficulty,
            score=score,
            correct_answers=round_half_up(score / 20),
            total_questions=READING_TOTAL_QUESTIONS,
        )
        notices = []
        if adjustment.new_difficulty != difficulty:
            notices.append(Notice(
                title="Way to go!",
                description=f"New reading level: {adjustment.new_difficulty}! {adjustment.rationale}",
            ))
        return NextRound(generate_reading_passage(adjustment.new_difficulty, self.rng), adjustment.new_difficulty, notices)

    def fallback_round(self, challenge: Optional[str], difficulty: int) -> NextRound[str]:
        return NextRound(
            generate_reading_passage(difficulty, self.rng),
            difficulty,
            [Notice(
                title="Oops!",
                description="A little hiccup! We'll get a new story at this level.",
                kind="warning",
            )],
        )

    def public_challenge(self, challenge: str) -> Dict[str, Any]:
        return {"passage": challenge}
