from __future__ import annotations

import base64
from io import BytesIO
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw

Point = Tuple[float, float]

BACKGROUND = "white"


class DrawingSurface:
    """White raster that renders strokes and exports PNG data URIs."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._image = Image.new("RGB", (width, height), BACKGROUND)
        self._draw = ImageDraw.Draw(self._image)
        self._last: Optional[Point] = None
        self._color = "#000000"
        self._width = 5
        self.strokes_rendered = 0

    @property
    def drawing(self) -> bool:
        return self._last is not None

    def clear(self) -> None:
        self._draw.rectangle((0, 0, self.width, self.height), fill=BACKGROUND)

    def begin_stroke(self, point: Point, color: str, width: int) -> None:
        self._color = color
        self._width = width
        self._last = point
        self._dot(point)

    def extend(self, points: Iterable[Point]) -> int:
        if self._last is None:
            return 0
        segments = 0
        for point in points:
            self._draw.line([self._last, point], fill=self._color, width=self._width)
            # Round caps and joins
            self._dot(point)
            self._last = point
            segments += 1
        return segments

    def end_stroke(self) -> None:
        if self._last is not None:
            self.strokes_rendered += 1
        self._last = None

    def _dot(self, point: Point) -> None:
        r = self._width / 2
        x, y = point
        self._draw.ellipse((x - r, y - r, x + r, y + r), fill=self._color)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        return self._image.getpixel((x, y))

    def to_png(self) -> bytes:
        buf = BytesIO()
        self._image.save(buf, format="PNG")
        return buf.getvalue()

    def to_data_url(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.to_png()).decode("ascii")

