from __future__ import annotations

import random
from typing import Any, Dict, Optional

from ..content import MathProblem, generate_math_problem
from ..ledger import CURRENCY_NAME
from ..oracles import MathDifficultyOracle
from ..scoring import math_reward
from .base import Evaluation, NextRound, Notice, RoundStrategy, RoundTiming, Streaks


class MathStrategy(RoundStrategy[MathProblem]):
    module = "math"

    def __init__(self, oracle: Optional[MathDifficultyOracle] = None, rng: Optional[random.Random] = None) -> None:
        self.oracle = oracle or MathDifficultyOracle()
        self.rng = rng or random.Random()

    async def first_round(self, difficulty: int) -> NextRound[MathProblem]:
        return NextRound(generate_math_problem(difficulty, self.rng), difficulty)

    def evaluate(self, challenge: MathProblem, answer: str, difficulty: int, timing: RoundTiming) -> Evaluation:
        try:
            value: Optional[int] = int(answer)
        except ValueError:
            value = None
        correct = value == challenge.answer
        reward = math_reward(difficulty, correct)
        if correct:
            return Evaluation(
                reward=reward,
                correct=True,
                feedback=f"Correct! +{reward} {CURRENCY_NAME}!",
                details={"answer": challenge.answer},
                notices=[Notice(
                    title="Victory Royale!",
                    description=f"That's the right answer! You earned {reward} {CURRENCY_NAME}!",
                    kind="success",
                )],
            )
        return Evaluation(
            reward=0,
            correct=False,
            feedback=f"Not quite! The answer was {challenge.answer}. Keep going!",
            details={"answer": challenge.answer},
            notices=[Notice(
                title="So Close!",
                description=f"Keep trying! The correct answer was {challenge.answer}. You'll get it next time!",
                kind="error",
            )],
        )

    async def next_round(
        self,
        challenge: MathProblem,
        answer: str,
        evaluation: Evaluation,
        difficulty: int,
        streaks: Streaks,
    ) -> NextRound[MathProblem]:
        adjustment = await self.oracle.adjust(
            current_difficulty=difficulty,
            correct_answers=streaks.consecutive_correct,
            incorrect_answers=streaks.consecutive_incorrect,
        )
        notices = []
        if adjustment.new_difficulty != difficulty:
            notices.append(Notice(
                title="Difficulty Shift!",
                description=f"Threat Level changed to {adjustment.new_difficulty}. {adjustment.rationale}",
            ))
        return NextRound(generate_math_problem(adjustment.new_difficulty, self.rng), adjustment.new_difficulty, notices)

    def fallback_round(self, challenge: Optional[MathProblem], difficulty: int) -> NextRound[MathProblem]:
        return NextRound(
            generate_math_problem(difficulty, self.rng),
            difficulty,
            [Notice(
                title="Storm Interference!",
                description="A little glitch! We'll stick to this Threat Level for now.",
                kind="warning",
            )],
        )

    def public_challenge(self, challenge: MathProblem) -> Dict[str, Any]:
        return {"text": challenge.text}
