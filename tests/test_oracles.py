from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from maximus.errors import OracleError
from maximus.gemini_client import GeminiClient
from maximus.oracles import (
    KindnessScenarioGenerator,
    MathDifficultyOracle,
    ReadingDifficultyOracle,
    TypingDifficultyOracle,
    extract_json_object,
)
from maximus.settings import settings


def gemini_reply(payload: Any) -> httpx.Response:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def client_factory(handler: Callable[[httpx.Request], httpx.Response]) -> Callable[[], GeminiClient]:
    transport = httpx.MockTransport(handler)
    return lambda: GeminiClient(api_key="test-key", transport=transport)


@pytest.fixture(autouse=True)
def no_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "openrouter_api_key", None)
    monkeypatch.setattr(settings, "gemini_provider", "ai_studio")


def test_extract_json_object_variants() -> None:
    assert extract_json_object('{"a": 1}') == {"a": 1}
    assert extract_json_object('```json\n{"a": 2}\n```') == {"a": 2}
    assert extract_json_object('Sure! Here it is: {"a": 3} Have fun.') == {"a": 3}
    with pytest.raises(OracleError):
        extract_json_object("no json here")
    with pytest.raises(OracleError):
        extract_json_object("[1, 2, 3]")


@pytest.mark.asyncio
async def test_math_oracle_clamps_to_level_one() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        assert request.url.params["key"] == "test-key"
        return gemini_reply({"newDifficulty": 0, "reasoning": " Let's slow down. "})

    oracle = MathDifficultyOracle(client_factory(handler))
    result = await oracle.adjust(current_difficulty=1, correct_answers=0, incorrect_answers=3)

    assert result.new_difficulty == 1
    assert result.rationale == "Let's slow down."
    assert "thinkingConfig" not in seen[0]
    assert seen[0]["generationConfig"] == {
        "responseMimeType": "application/json",
        "thinkingConfig": {"thinkingBudget": 0},
    }
    assert len(seen) == 1
    prompt = seen[0]["contents"][0]["parts"][0]["text"]
    assert "Current Difficulty: 1" in prompt
    assert "Incorrect Answers in a Row: 3" in prompt


@pytest.mark.asyncio
async def test_reading_oracle_clamps_to_ten() -> None:
    oracle = ReadingDifficultyOracle(client_factory(lambda r: gemini_reply({"newLevel": 14, "reason": "Great"})))
    result = await oracle.adjust(level=10, score=100.0, correct_answers=5, total_questions=5)
    assert result.new_difficulty == 10


@pytest.mark.asyncio
async def test_typing_oracle_parses_fenced_json() -> None:
    reply = '```json\n{"newText": "Cats nap.", "newDifficultyLevel": 2, "feedback": "Nice!"}\n```'
    oracle = TypingDifficultyOracle(client_factory(lambda r: gemini_reply(reply)))
    result = await oracle.adjust(previous_text="cat", typed_text="cat", current_difficulty=1)
    assert result.text == "Cats nap."
    assert result.difficulty == 2
    assert result.feedback == "Nice!"


@pytest.mark.asyncio
async def test_kindness_generator_returns_scenario() -> None:
    body = {
        "scenarioText": "Your friend forgot their lunch.",
        "choiceA": "Share your sandwich.",
        "choiceB": "Eat in front of them.",
        "correctChoice": "A",
        "explanation": "Sharing helps friends.",
    }
    generator = KindnessScenarioGenerator(client_factory(lambda r: gemini_reply(body)))
    scenario = await generator.generate()
    assert scenario.correct_choice == "A"
    assert scenario.choice_a == "Share your sandwich."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"scenarioText": "x", "choiceA": "a", "choiceB": "b", "correctChoice": "C", "explanation": "e"},
        {"scenarioText": "x", "choiceA": "a", "choiceB": "b", "explanation": "e"},
        {"scenarioText": "x", "choiceA": "a", "choiceB": "b", "correctChoice": "A", "explanation": "e", "extra": 1},
    ],
)
async def test_kindness_schema_mismatch_is_oracle_error(body: dict[str, Any]) -> None:
    generator = KindnessScenarioGenerator(client_factory(lambda r: gemini_reply(body)))
    with pytest.raises(OracleError):
        await generator.generate()


@pytest.mark.asyncio
async def test_string_difficulty_is_rejected() -> None:
    oracle = MathDifficultyOracle(client_factory(lambda r: gemini_reply({"newDifficulty": "2", "reasoning": "r"})))
    with pytest.raises(OracleError):
        await oracle.adjust(current_difficulty=1, correct_answers=1, incorrect_answers=0)


@pytest.mark.asyncio
async def test_unparsable_reply_is_oracle_error() -> None:
    oracle = MathDifficultyOracle(client_factory(lambda r: gemini_reply("I think level 3 is good")))
    with pytest.raises(OracleError):
        await oracle.adjust(current_difficulty=2, correct_answers=1, incorrect_answers=0)


@pytest.mark.asyncio
async def test_http_failure_retries_without_thinking_config() -> None:
    payloads: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        payloads.append(json.loads(request.content))
        return httpx.Response(500, json={"error": "boom"})

    oracle = MathDifficultyOracle(client_factory(handler))
    with pytest.raises(OracleError):
        await oracle.adjust(current_difficulty=2, correct_answers=1, incorrect_answers=0)

    assert len(payloads) == 2
    assert "thinkingConfig" in payloads[0]["generationConfig"]
    assert payloads[1]["generationConfig"] == {"responseMimeType": "application/json"}


@pytest.mark.asyncio
async def test_missing_api_key_is_oracle_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "gemini_api_key", None)
    with pytest.raises(OracleError):
        await MathDifficultyOracle().adjust(current_difficulty=1, correct_answers=1, incorrect_answers=0)


@pytest.mark.asyncio
async def test_openrouter_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "openrouter_api_key", "or-key")

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "openrouter.ai":
            assert request.headers["Authorization"] == "Bearer or-key"
            content = json.dumps({"newDifficulty": 3, "reasoning": "Fallback says harder"})
            return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})
        return httpx.Response(503)

    oracle = MathDifficultyOracle(client_factory(handler))
    result = await oracle.adjust(current_difficulty=2, correct_answers=3, incorrect_answers=0)
    assert result.new_difficulty == 3
