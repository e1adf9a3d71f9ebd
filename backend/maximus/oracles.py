"""LLM-backed difficulty oracles and the kindness scenario generator.

Each adapter builds a prompt, asks Gemini for a compact JSON object and
validates it against a fixed schema. Anything that goes wrong (no API key,
network failure, unparsable output, schema mismatch) becomes an
``OracleError``; callers decide how to fall back.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Literal, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError

from .errors import OracleError
from .gemini_client import GeminiClient
from .scoring import clamp, round_half_up
from .settings import settings

logger = logging.getLogger(__name__)

Number = Union[StrictInt, StrictFloat]
AnswerT = TypeVar("AnswerT", bound=BaseModel)


class _Answer(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class MathDifficultyAnswer(_Answer):
    new_difficulty: Number = Field(alias="newDifficulty")
    reasoning: StrictStr


class ReadingDifficultyAnswer(_Answer):
    new_level: Number = Field(alias="newLevel")
    reason: StrictStr


class TypingDifficultyAnswer(_Answer):
    new_text: StrictStr = Field(alias="newText", min_length=1)
    new_difficulty_level: Number = Field(alias="newDifficultyLevel")
    feedback: StrictStr


class KindnessScenario(_Answer):
    scenario_text: StrictStr = Field(alias="scenarioText", min_length=1)
    choice_a: StrictStr = Field(alias="choiceA", min_length=1)
    choice_b: StrictStr = Field(alias="choiceB", min_length=1)
    correct_choice: Literal["A", "B"] = Field(alias="correctChoice")
    explanation: StrictStr


class DifficultyAdjustment(BaseModel):
    new_difficulty: int
    rationale: str


class TypingChallenge(BaseModel):
    text: str
    difficulty: int
    feedback: str = ""


def extract_json_object(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if data is None:
        code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
        if code_block:
            try:
                data = json.loads(code_block.group(1))
            except ValueError:
                data = None
    if data is None:
        first = text.find("{")
        last = text.rfind("}")
        if first != -1 and last > first:
            try:
                data = json.loads(text[first : last + 1])
            except ValueError:
                data = None
    if not isinstance(data, dict):
        raise OracleError("LLM did not return a JSON object")
    return data


def _default_client() -> GeminiClient:
    return GeminiClient()


class LLMOracle:
    name = "oracle"

    def __init__(self, client_factory: Optional[Callable[[], GeminiClient]] = None) -> None:
        self._client_factory = client_factory or _default_client

    async def _ask(self, prompt: str, answer_model: Type[AnswerT]) -> AnswerT:
        try:
            client = self._client_factory()
        except ValueError as exc:
            raise OracleError(str(exc)) from exc
        try:
            raw = await client.generate(prompt, thinking_budget=0, json_mode=True)
        except (httpx.HTTPError, RuntimeError) as exc:
            raise OracleError(f"{self.name} call failed: {exc}") from exc
        finally:
            await client.aclose()
        data = extract_json_object(raw)
        try:
            return answer_model.model_validate(data)
        except ValidationError as exc:
            raise OracleError(f"{self.name} answer does not match schema: {exc}") from exc


class MathDifficultyOracle(LLMOracle):
    name = "math difficulty"
    min_level = 1

    async def adjust(self, current_difficulty: int, correct_answers: int, incorrect_answers: int) -> DifficultyAdjustment:
        prompt = (
            "You are an AI math tutor adjusting the difficulty of math problems for a young student.\n"
            "You receive the current difficulty level and how many problems in a row were answered correctly and incorrectly.\n"
            "If several answers in a row were correct, increase the difficulty. If several in a row were incorrect, decrease it.\n"
            "With a mix of correct and incorrect answers, keep the difficulty the same.\n\n"
            f"Current Difficulty: {current_difficulty}\n"
            f"Correct Answers in a Row: {correct_answers}\n"
            f"Incorrect Answers in a Row: {incorrect_answers}\n\n"
            "Return ONLY compact JSON with keys: newDifficulty (integer), reasoning (string, one short sentence).\n"
            "No markdown, no extra commentary."
        )
        answer = await self._ask(prompt, MathDifficultyAnswer)
        return DifficultyAdjustment(
            new_difficulty=clamp(round_half_up(answer.new_difficulty), self.min_level),
            rationale=answer.reasoning.strip(),
        )


class ReadingDifficultyOracle(LLMOracle):
    name = "reading difficulty"
    min_level = 1
    max_level = 10

    async def adjust(self, level: int, score: float, correct_answers: int, total_questions: int) -> DifficultyAdjustment:
        prompt = (
            "You are an AI reading tutor choosing the level of the next reading passage for Maximus.\n"
            "You receive the current level, the score, and the correct answers out of the total questions for the previous passage.\n"
            "If the score is above 80%, increase the level by 1. If it is below 50%, decrease the level by 1.\n"
            f"The new level must be between {self.min_level} and {self.max_level} (inclusive).\n\n"
            f"Current Level: {level}\n"
            f"Score: {score:.1f}\n"
            f"Correct Answers: {correct_answers}\n"
            f"Total Questions: {total_questions}\n\n"
            "Return ONLY compact JSON with keys: newLevel (integer), reason (string, one short sentence).\n"
            "No markdown, no extra commentary."
        )
        answer = await self._ask(prompt, ReadingDifficultyAnswer)
        return DifficultyAdjustment(
            new_difficulty=clamp(round_half_up(answer.new_level), self.min_level, self.max_level),
            rationale=answer.reason.strip(),
        )


class TypingDifficultyOracle(LLMOracle):
    name = "typing difficulty"
    min_level = 1

    async def adjust(self, previous_text: str, typed_text: str, current_difficulty: int) -> TypingChallenge:
        prompt = (
            "You are an AI typing tutor helping Maximus improve his typing.\n"
            "You receive the text he was asked to type, what he actually typed, and the current difficulty level (1 to 10).\n"
            "Generate a new text to type, pick the new difficulty level and give one or two sentences of encouraging feedback.\n"
            "If he is doing well, increase the difficulty: longer words, harder words, longer text.\n"
            "If he is struggling, decrease it: shorter words, simpler words, shorter text.\n\n"
            f"Previous Text: {previous_text}\n"
            f"User Typing Result: {typed_text}\n"
            f"Current Difficulty Level: {current_difficulty}\n\n"
            "Return ONLY compact JSON with keys: newText (string), newDifficultyLevel (integer), feedback (string).\n"
            "No markdown, no extra commentary."
        )
        answer = await self._ask(prompt, TypingDifficultyAnswer)
        return TypingChallenge(
            text=answer.new_text.strip(),
            difficulty=clamp(round_half_up(answer.new_difficulty_level), self.min_level),
            feedback=answer.feedback.strip(),
        )


def _scenario_client() -> GeminiClient:
    return GeminiClient(model=settings.gemini_model_scenarios)


class KindnessScenarioGenerator(LLMOracle):
    name = "kindness scenario"

    def __init__(self, client_factory: Optional[Callable[[], GeminiClient]] = None) -> None:
        super().__init__(client_factory or _scenario_client)

    async def generate(self) -> KindnessScenario:
        prompt = (
            "You create simple social scenarios that teach kindness to children aged 6-9, in a fun game-like tone.\n"
            "Describe an everyday situation (sharing, helping, including others, honesty, empathy) in 2-3 short sentences,\n"
            "then give two clearly distinct choices. One must be noticeably kinder than the other.\n"
            "Explain in 1-2 simple sentences why the kinder choice is better. Avoid complex vocabulary.\n\n"
            "Example:\n"
            '{"scenarioText": "You see a new kid at the playground looking lonely while everyone else is playing a game.", '
            '"choiceA": "Ignore the new kid and keep playing with your friends.", '
            '"choiceB": "Ask the new kid if they want to join your game.", '
            '"correctChoice": "B", '
            '"explanation": "Including others is a kind way to make new friends and help someone feel welcome."}\n\n'
            "Return ONLY compact JSON with keys: scenarioText, choiceA, choiceB, correctChoice (\"A\" or \"B\"), explanation.\n"
            "No markdown, no extra commentary."
        )
        return await self._ask(prompt, KindnessScenario)
