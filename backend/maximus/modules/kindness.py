from __future__ import annotations

from typing import Any, Dict, Optional

from ..errors import ChallengeUnavailable, InvalidAction, OracleError
from ..ledger import CURRENCY_NAME
from ..oracles import KindnessScenario, KindnessScenarioGenerator
from ..scoring import kindness_reward
from .base import Evaluation, NextRound, Notice, RoundStrategy, RoundTiming, Streaks

SCENARIO_ERROR = "Couldn't load a new scenario. Please try again later."


class KindnessStrategy(RoundStrategy[KindnessScenario]):
    """Two-choice social scenarios. Every answer earns something."""

    module = "kindness"

    def __init__(self, generator: Optional[KindnessScenarioGenerator] = None) -> None:
        self.generator = generator or KindnessScenarioGenerator()

    def normalize_answer(self, answer: str) -> str:
        choice = answer.strip().upper()
        if not choice:
            return ""
        if choice not in ("A", "B"):
            raise InvalidAction("choice must be 'A' or 'B'")
        return choice

    async def first_round(self, difficulty: int) -> NextRound[KindnessScenario]:
        try:
            scenario = await self.generator.generate()
        except OracleError as exc:
            raise ChallengeUnavailable(SCENARIO_ERROR) from exc
        return NextRound(scenario, difficulty)

    def evaluate(self, challenge: KindnessScenario, answer: str, difficulty: int, timing: RoundTiming) -> Evaluation:
        kind = answer == challenge.correct_choice
        reward = kindness_reward(kind)
        if kind:
            feedback = f"Great choice! That was very kind. {challenge.explanation}"
            notice = Notice(title="Kindness Champion!", description=f"You chose wisely! +{reward} {CURRENCY_NAME}!", kind="success")
        else:
            feedback = f"That's one way to think about it. Here's another idea: {challenge.explanation}"
            notice = Notice(title="Good Try!", description=f"Learning to be kind is a journey! +{reward} {CURRENCY_NAME}!")
        return Evaluation(
            reward=reward,
            correct=kind,
            feedback=feedback,
            details={"choice": answer, "correct_choice": challenge.correct_choice},
            notices=[notice],
        )

    async def next_round(
        self,
        challenge: KindnessScenario,
        answer: str,
        evaluation: Evaluation,
        difficulty: int,
        streaks: Streaks,
    ) -> NextRound[KindnessScenario]:
        return await self.first_round(difficulty)

    def fallback_round(self, challenge: Optional[KindnessScenario], difficulty: int) -> NextRound[KindnessScenario]:
        # A scenario that was already answered is never served again
        raise ChallengeUnavailable(SCENARIO_ERROR)

    def public_challenge(self, challenge: KindnessScenario) -> Dict[str, Any]:
        return {
            "scenario_text": challenge.scenario_text,
            "choice_a": challenge.choice_a,
            "choice_b": challenge.choice_b,
        }
