from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel

APP_NAME = "MAXIMUS"


class ModuleInfo(BaseModel):
    key: str
    name: str
    path: str
    description: str


MODULE_DATA: Dict[str, ModuleInfo] = {
    "math": ModuleInfo(
        key="math",
        name="Math Mission",
        path="/learn/math",
        description="Solve math challenges and earn V-Bucks!",
    ),
    "reading": ModuleInfo(
        key="reading",
        name="Reading Quest",
        path="/learn/reading",
        description="Explore lore and complete reading quests for V-Bucks!",
    ),
    "typing": ModuleInfo(
        key="typing",
        name="Typing Drill",
        path="/learn/typing",
        description="Master the keyboard in typing drills to win V-Bucks!",
    ),
    "draw": ModuleInfo(
        key="draw",
        name="Creative Mode",
        path="/learn/draw",
        description="Unleash your inner artist and design for V-Bucks!",
    ),
    "coding": ModuleInfo(
        key="coding",
        name="Coding Combat",
        path="/learn/coding",
        description="Snap code blocks together and run programs for V-Bucks!",
    ),
    "kindness": ModuleInfo(
        key="kindness",
        name="Kindness Arena",
        path="/learn/being-nice",
        description="Choose the kindest action to earn V-Bucks!",
    ),
}

ALL_MODULES: List[ModuleInfo] = list(MODULE_DATA.values())

# Drawing
PALETTE: List[str] = [
    "#FF0000",
    "#00FF00",
    "#0000FF",
    "#FFFF00",
    "#FF00FF",
    "#00FFFF",
    "#FFA500",
    "#800080",
    "#008000",
    "#FFC0CB",
    "#A52A2A",
    "#000000",
    "#FFFFFF",
]
BRUSH_SIZES: List[int] = [2, 5, 10, 20, 30]
DEFAULT_COLOR = "#000000"
DEFAULT_BRUSH_SIZE = 5
EXPORT_FILENAME = "maximus-art.png"

# Coding blocks: id -> (display name, category)
CODE_BLOCKS: Dict[str, tuple[str, str]] = {
    "moveForward": ("Move Forward", "action"),
    "turnLeft": ("Turn Left", "action"),
    "turnRight": ("Turn Right", "action"),
    "repeat2": ("Repeat 2x", "loop"),
    "onStart": ("On Start", "event"),
}
