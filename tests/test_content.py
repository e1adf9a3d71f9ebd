from __future__ import annotations

import operator
import random

import pytest

from maximus.content import READING_PASSAGES, generate_math_problem, generate_reading_passage

_OPS = {"+": operator.add, "-": operator.sub, "*": operator.mul, "÷": operator.floordiv}


def _solve(text: str) -> int:
    left, op, right, eq, mark = text.split()
    assert (eq, mark) == ("=", "?")
    a, b = int(left), int(right)
    if op == "÷":
        assert a % b == 0
    return _OPS[op](a, b)


@pytest.mark.parametrize("difficulty", [1, 2, 3, 4, 5, 8])
def test_math_problem_answer_matches_text(difficulty: int) -> None:
    rnd = random.Random(difficulty)
    for _ in range(200):
        problem = generate_math_problem(difficulty, rnd)
        assert problem.answer == _solve(problem.text)


def test_low_levels_only_add() -> None:
    rnd = random.Random(3)
    for difficulty in (1, 2):
        for _ in range(50):
            assert " + " in generate_math_problem(difficulty, rnd).text


def test_operands_scale_with_difficulty() -> None:
    rnd = random.Random(11)
    for _ in range(100):
        left, _, right, _, _ = generate_math_problem(1, rnd).text.split()
        assert 1 <= int(left) <= 5
        assert 1 <= int(right) <= 5


def test_easy_subtraction_never_negative() -> None:
    rnd = random.Random(5)
    for _ in range(300):
        problem = generate_math_problem(4, rnd)
        if " - " in problem.text:
            assert problem.answer >= 0


@pytest.mark.parametrize(("difficulty", "level"), [(0, 1), (1, 1), (2, 2), (3, 3), (9, 3)])
def test_reading_passage_level_is_clamped(difficulty: int, level: int) -> None:
    passage = generate_reading_passage(difficulty, random.Random(0))
    assert passage in READING_PASSAGES[level]
