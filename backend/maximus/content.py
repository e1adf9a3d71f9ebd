"""Local challenge generators used when no oracle is involved or it fails."""

from __future__ import annotations

import random
from typing import Dict, List, Optional

from pydantic import BaseModel

INITIAL_TYPING_TEXT = "The quick brown fox jumps over the lazy dog."


class MathProblem(BaseModel):
    text: str
    answer: int


READING_PASSAGES: Dict[int, List[str]] = {
    1: [
        "A red cat sat.",
        "The big dog ran.",
        "A bug is on the rug.",
        "See the sun.",
        "My toy is fun.",
    ],
    2: [
        "The fluffy cat sleeps on the mat.",
        "A small bird sings a sweet song.",
        "Frogs jump in the green pond.",
        "The yellow bus goes to school.",
        "I like to read my new book.",
    ],
    3: [
        "Colorful fish swim in the clear blue water.",
        "A friendly squirrel gathers nuts for the winter.",
        "The tall oak tree has many green leaves.",
        "Children play happily in the sunny park.",
        "We went to the zoo and saw a lion.",
    ],
}

_OPERATIONS = ["+", "-", "*", "/"]


def generate_math_problem(difficulty: int, rng: Optional[random.Random] = None) -> MathProblem:
    rng = rng or random.Random()
    difficulty = max(1, difficulty)
    num1 = rng.randint(1, difficulty * 5)
    num2 = rng.randint(1, difficulty * 5)
    operation = "+"
    if difficulty > 2:
        # Higher levels unlock one more operation each, up to division
        operation = _OPERATIONS[rng.randrange(min(difficulty - 1, len(_OPERATIONS)))]

    if operation == "-":
        if num1 < num2 and difficulty < 5:
            return MathProblem(text=f"{num2} - {num1} = ?", answer=num2 - num1)
        return MathProblem(text=f"{num1} - {num2} = ?", answer=num1 - num2)
    if operation == "*":
        return MathProblem(text=f"{num1} * {num2} = ?", answer=num1 * num2)
    if operation == "/":
        # Built from a product so the quotient is always whole
        return MathProblem(text=f"{num1 * num2} ÷ {num1} = ?", answer=num2)
    return MathProblem(text=f"{num1} + {num2} = ?", answer=num1 + num2)


def generate_reading_passage(difficulty: int, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    level = max(1, min(difficulty, len(READING_PASSAGES)))
    return rng.choice(READING_PASSAGES[level])
