from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..constants import CODE_BLOCKS
from ..errors import InvalidAction
from ..ledger import CURRENCY_NAME, CurrencyLedger
from ..scoring import CODING_BLOCK_REWARD, CODING_CLEAR_REWARD, coding_run_reward
from .base import ModuleController, Notice

# Headings clockwise from "up": (dx, dy)
_HEADINGS: List[Tuple[int, int]] = [(0, 1), (1, 0), (0, -1), (-1, 0)]


def simulate(blocks: List[str]) -> Tuple[int, int, int]:
    """Run a block program from (0, 0) facing up.

    Returns ``(x, y, heading_index)``. ``repeat2`` runs the block after it
    twice; a trailing ``repeat2`` has nothing to repeat.
    """
    x = y = heading = 0

    def step(block: str) -> None:
        nonlocal x, y, heading
        if block == "moveForward":
            dx, dy = _HEADINGS[heading]
            x += dx
            y += dy
        elif block == "turnLeft":
            heading = (heading - 1) % 4
        elif block == "turnRight":
            heading = (heading + 1) % 4

    i = 0
    while i < len(blocks):
        block = blocks[i]
        if block == "repeat2" and i + 1 < len(blocks):
            step(blocks[i + 1])
            step(blocks[i + 1])
            i += 2
            continue
        step(block)
        i += 1
    return x, y, heading


class CodingSession(ModuleController):
    module = "coding"

    def __init__(self, ledger: CurrencyLedger) -> None:
        super().__init__(ledger)
        self.blocks: List[str] = []
        self.position = (0, 0)
        self.heading = 0
        self.runs = 0

    def add_block(self, block_id: str) -> List[Notice]:
        self._ensure_open()
        if block_id not in CODE_BLOCKS:
            raise InvalidAction(f"block must be one of {list(CODE_BLOCKS)}")
        self.blocks.append(block_id)
        self._reward(CODING_BLOCK_REWARD)
        name, _ = CODE_BLOCKS[block_id]
        return [Notice(
            title="Block Added!",
            description=f"You added '{name}' to your program! +{CODING_BLOCK_REWARD} {CURRENCY_NAME}",
        )]

    def run(self) -> Tuple[int, List[Notice]]:
        self._ensure_open()
        if not self.blocks:
            return 0, [Notice(
                title="Empty Program!",
                description="Drag some blocks into the workspace to build your program!",
                kind="error",
            )]
        x, y, self.heading = simulate(self.blocks)
        self.position = (x, y)
        reward = coding_run_reward(len(self.blocks))
        self._reward(reward)
        self.runs += 1
        return reward, [Notice(
            title="Program Executed!",
            description=f"Awesome! Your program ran. You earned {reward} {CURRENCY_NAME}!",
            kind="success",
        )]

    def clear(self) -> List[Notice]:
        self._ensure_open()
        self.blocks = []
        self.position = (0, 0)
        self.heading = 0
        self._reward(CODING_CLEAR_REWARD)
        return [Notice(
            title="Workspace Cleared!",
            description=f"Ready for a new program! +{CODING_CLEAR_REWARD} {CURRENCY_NAME}",
        )]

    def state(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "blocks": list(self.blocks),
            "available_blocks": [
                {"id": block_id, "name": name, "category": category}
                for block_id, (name, category) in CODE_BLOCKS.items()
            ],
            "position": {"x": self.position[0], "y": self.position[1]},
            "heading": self.heading,
            "runs": self.runs,
        }
