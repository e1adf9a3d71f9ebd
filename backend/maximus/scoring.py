"""Reward formulas. Rounding is half-up to match the scores the UI shows."""

from __future__ import annotations

import math
from typing import Optional, Tuple

MIN_ROUND_REWARD = 5

MATH_POINTS_PER_LEVEL = 10

READING_MAX_SECONDS = 60
READING_TOTAL_QUESTIONS = 5

KINDNESS_KIND_REWARD = 25
KINDNESS_OTHER_REWARD = 5

DRAW_COLOR_REWARD = 2
DRAW_BRUSH_REWARD = 2
DRAW_CLEAR_REWARD = 5
DRAW_SAVE_REWARD = 20
DRAW_STROKE_REWARD = 1
DRAW_TICK_REWARD = 1

CODING_BLOCK_REWARD = 2
CODING_CLEAR_REWARD = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int, high: Optional[int] = None) -> int:
    value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def math_reward(difficulty: int, correct: bool) -> int:
    return MATH_POINTS_PER_LEVEL * difficulty if correct else 0


def reading_score(seconds: int, difficulty: int) -> float:
    # A zero reading time counts as the full minute
    taken = seconds or READING_MAX_SECONDS
    raw = (1 - taken / (READING_MAX_SECONDS * (difficulty * 0.3 + 1))) * 120
    return max(0.0, min(100.0, raw))


def reading_reward(score: float) -> int:
    return max(MIN_ROUND_REWARD, round_half_up(score / 10))


def typing_accuracy(target: str, typed: str) -> int:
    """Percentage of target positions the typed text matches exactly.

    Compared position by position, so an inserted character shifts every
    later position out of alignment.
    """
    if not target:
        return 0
    matches = sum(1 for expected, actual in zip(target, typed) if expected == actual)
    return matches * 100 // len(target)


def typing_performance(target: str, typed: str, elapsed_seconds: float) -> Tuple[int, int]:
    """Return ``(words_per_minute, accuracy_percent)`` for one round."""
    if not target or not typed.strip() or elapsed_seconds <= 0:
        return 0, 0
    words = len(typed.split())
    wpm = round_half_up(words / elapsed_seconds * 60)
    return wpm, typing_accuracy(target, typed)


def typing_reward(wpm: int, accuracy: int, difficulty: int) -> int:
    return max(MIN_ROUND_REWARD, round_half_up(wpm * 0.3 + accuracy * 0.7 + difficulty * 2))


def kindness_reward(kind_choice: bool) -> int:
    return KINDNESS_KIND_REWARD if kind_choice else KINDNESS_OTHER_REWARD


def coding_run_reward(block_count: int) -> int:
    return block_count * 5 + 10
