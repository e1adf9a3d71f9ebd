from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..canvas import DrawingSurface, Point
from ..constants import BRUSH_SIZES, DEFAULT_BRUSH_SIZE, DEFAULT_COLOR, EXPORT_FILENAME, PALETTE
from ..errors import InvalidAction
from ..ledger import CURRENCY_NAME, CurrencyLedger
from ..scoring import (
    DRAW_BRUSH_REWARD,
    DRAW_CLEAR_REWARD,
    DRAW_COLOR_REWARD,
    DRAW_SAVE_REWARD,
    DRAW_STROKE_REWARD,
    DRAW_TICK_REWARD,
)
from ..timers import ActivityTimer, SystemClock
from .base import ModuleController, Notice, Phase

logger = logging.getLogger(__name__)

STROKE_NOTICE_EVERY = 50


class DrawingSession(ModuleController):
    """Free drawing with flat rewards per action.

    Holding the pointer down earns a passive reward every ``tick_seconds``.
    The activity timer is started on stroke start and stopped on stroke end
    and on close, so no ticks can land after the stroke is over.
    """

    module = "draw"

    def __init__(
        self,
        ledger: CurrencyLedger,
        *,
        width: int = 300,
        height: int = 200,
        tick_seconds: float = 10.0,
        clock: Optional[SystemClock] = None,
    ) -> None:
        super().__init__(ledger)
        self.surface = DrawingSurface(width, height)
        self.color = DEFAULT_COLOR
        self.brush_size = DEFAULT_BRUSH_SIZE
        self.strokes = 0
        self.passive_ticks = 0
        self.phase = Phase.ACTIVE
        self._timer = ActivityTimer(tick_seconds, self._on_tick, clock=clock, name="draw-activity")

    @property
    def stroke_active(self) -> bool:
        return self.surface.drawing

    def _on_tick(self) -> None:
        self.passive_ticks += 1
        self._reward(DRAW_TICK_REWARD)

    def select_color(self, color: str) -> List[Notice]:
        self._ensure_open()
        color = color.upper()
        if color not in PALETTE:
            raise InvalidAction(f"color must be one of {PALETTE}")
        self.color = color
        self._reward(DRAW_COLOR_REWARD)
        return [Notice(
            title="Color Changed!",
            description=f"Switched to a new color! +{DRAW_COLOR_REWARD} {CURRENCY_NAME}",
        )]

    def select_brush(self, size: int) -> List[Notice]:
        self._ensure_open()
        if size not in BRUSH_SIZES:
            raise InvalidAction(f"brush size must be one of {BRUSH_SIZES}")
        self.brush_size = size
        self._reward(DRAW_BRUSH_REWARD)
        return [Notice(
            title="Brush Resized!",
            description=f"New brush size selected! +{DRAW_BRUSH_REWARD} {CURRENCY_NAME}",
        )]

    def clear(self) -> List[Notice]:
        self._ensure_open()
        self.surface.clear()
        self._reward(DRAW_CLEAR_REWARD)
        return [Notice(title="Canvas Cleared!", description=f"Fresh start! +{DRAW_CLEAR_REWARD} {CURRENCY_NAME}")]

    def save(self) -> Dict[str, Any]:
        self._ensure_open()
        data_url = self.surface.to_data_url()
        self._reward(DRAW_SAVE_REWARD)
        return {
            "filename": EXPORT_FILENAME,
            "data_url": data_url,
            "notices": [Notice(
                title="Artwork Saved!",
                description=f"Your masterpiece is saved! +{DRAW_SAVE_REWARD} {CURRENCY_NAME}",
                kind="success",
            )],
        }

    def stroke_start(self, point: Point) -> List[Notice]:
        """Begin a stroke. A stroke still in progress is completed first."""
        self._ensure_open()
        notices = self._finish_stroke() if self.surface.drawing else []
        self.surface.begin_stroke(point, self.color, self.brush_size)
        # Restarting cancels the previous schedule
        self._timer.start()
        return notices

    def stroke_move(self, points: Iterable[Point]) -> int:
        self._ensure_open()
        return self.surface.extend(points)

    async def stroke_end(self) -> List[Notice]:
        """Finish the stroke; a release without an active stroke is ignored."""
        self._ensure_open()
        if not self.surface.drawing:
            return []
        self.phase = Phase.EVALUATING
        await self._timer.stop()
        return self._finish_stroke()

    def _finish_stroke(self) -> List[Notice]:
        self.surface.end_stroke()
        self.phase = Phase.REWARDING
        self._reward(DRAW_STROKE_REWARD)
        self.strokes += 1
        self.phase = Phase.ACTIVE
        if self.strokes % STROKE_NOTICE_EVERY == 0:
            return [Notice(
                title="Stroke of Genius!",
                description=f"+{DRAW_STROKE_REWARD} {CURRENCY_NAME} for your art! Keep up the great work!",
                kind="success",
            )]
        return []

    async def close(self) -> None:
        self.closed = True
        await self._timer.stop()
        self.surface.end_stroke()
        logger.debug("draw module closed after %d strokes", self.strokes)

    def state(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "phase": self.phase.value,
            "color": self.color,
            "brush_size": self.brush_size,
            "stroke_active": self.stroke_active,
            "strokes": self.strokes,
            "palette": PALETTE,
            "brush_sizes": BRUSH_SIZES,
            "width": self.surface.width,
            "height": self.surface.height,
        }
