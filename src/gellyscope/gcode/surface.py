"""Drawing surfaces the viewport renderer can paint onto."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

__all__ = ["Color", "PillowSurface", "Surface", "clip_segment", "dash_segments"]

Color = tuple[int, int, int, int]
Matrix = tuple[float, float, float, float, float, float]

_IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


class Surface(Protocol):
    """Minimal canvas-style drawing API.

    Coordinates, line widths, dash lengths and font sizes are expressed in
    the current user space and follow every ``translate``/``scale`` applied
    since the last ``restore``.
    """

    def resize(self, width: int, height: int) -> None: ...

    def clear(self, color: Color) -> None: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, dx: float, dy: float) -> None: ...

    def scale(self, sx: float, sy: float) -> None: ...

    def polyline(self, points: Sequence[tuple[float, float]], color: Color, width: float) -> None: ...

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Color, width: float) -> None: ...

    def rectangle(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Color,
        line_width: float,
        dash: tuple[float, float] | None = None,
    ) -> None: ...

    def text(
        self,
        x: float,
        y: float,
        text: str,
        color: Color,
        size: float,
        align: str = "left",
    ) -> None: ...


def dash_segments(
    start: tuple[float, float],
    end: tuple[float, float],
    dash: tuple[float, float],
    *,
    phase: float = 0.0,
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Split the segment *start*-*end* into the visible pieces of a dash pattern.

    *phase* is the distance already travelled along the pattern before
    *start*, so a clipped edge keeps the dashes of the full edge.
    """

    on, off = dash
    length = math.dist(start, end)
    if length == 0 or on <= 0:
        return [(start, end)]

    period = on + max(off, 0.0)
    ux = (end[0] - start[0]) / length
    uy = (end[1] - start[1]) / length
    pieces = []
    position = -(phase % period)
    while position < length:
        begin = max(position, 0.0)
        stop = min(position + on, length)
        if stop > begin:
            pieces.append(
                (
                    (start[0] + ux * begin, start[1] + uy * begin),
                    (start[0] + ux * stop, start[1] + uy * stop),
                )
            )
        position += period
    return pieces


def clip_segment(
    start: tuple[float, float],
    end: tuple[float, float],
    box: tuple[float, float, float, float],
) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Clip *start*-*end* to the ``(left, top, right, bottom)`` *box*.

    Returns ``None`` when the segment lies entirely outside.
    """

    left, top, right, bottom = box
    x0, y0 = start
    dx = end[0] - x0
    dy = end[1] - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - left), (dx, right - x0), (-dy, y0 - top), (dy, bottom - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            t0 = max(t0, t)
        else:
            t1 = min(t1, t)
        if t0 > t1:
            return None
    clipped_start = start if t0 == 0.0 else (x0 + dx * t0, y0 + dy * t0)
    clipped_end = end if t1 == 1.0 else (x0 + dx * t1, y0 + dy * t1)
    return clipped_start, clipped_end


class PillowSurface:
    """Raster :class:`Surface` backed by a Pillow RGBA image."""

    def __init__(self, width: int = 1, height: int = 1) -> None:
        self._matrix: Matrix = _IDENTITY
        self._stack: list[Matrix] = []
        self._fonts: dict[int, ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}
        self.resize(width, height)

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def resize(self, width: int, height: int) -> None:
        size = (max(1, int(width)), max(1, int(height)))
        self._image = Image.new("RGBA", size, (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self._image, "RGBA")
        self._matrix = _IDENTITY
        self._stack.clear()

    def clear(self, color: Color) -> None:
        width, height = self._image.size
        self._draw.rectangle([0, 0, width, height], fill=color)

    def save(self) -> None:
        self._stack.append(self._matrix)

    def restore(self) -> None:
        if self._stack:
            self._matrix = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        a, b, c, d, e, f = self._matrix
        self._matrix = (a, b, c, d, e + a * dx + c * dy, f + b * dx + d * dy)

    def scale(self, sx: float, sy: float) -> None:
        a, b, c, d, e, f = self._matrix
        self._matrix = (a * sx, b * sx, c * sy, d * sy, e, f)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------
    def polyline(self, points: Sequence[tuple[float, float]], color: Color, width: float) -> None:
        if len(points) < 2:
            return
        pixels = self._pixels(width)
        box = self._clip_box(pixels)
        mapped = [self._map(x, y) for x, y in points]

        # Unclipped neighbours share an endpoint and stay in one joined run.
        runs: list[list[tuple[float, float]]] = []
        run: list[tuple[float, float]] = []
        for start, end in zip(mapped, mapped[1:]):
            clipped = clip_segment(start, end, box)
            if clipped is None:
                run = []
                continue
            head, tail = clipped
            if run and run[-1] == head:
                run.append(tail)
            else:
                run = [head, tail]
                runs.append(run)

        for run in runs:
            self._draw.line(run, fill=color, width=pixels, joint="curve")

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Color, width: float) -> None:
        pixels = self._pixels(width)
        clipped = clip_segment(self._map(x0, y0), self._map(x1, y1), self._clip_box(pixels))
        if clipped is not None:
            self._draw.line(list(clipped), fill=color, width=pixels)

    def rectangle(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Color,
        line_width: float,
        dash: tuple[float, float] | None = None,
    ) -> None:
        corners = [
            self._map(x, y),
            self._map(x + width, y),
            self._map(x + width, y + height),
            self._map(x, y + height),
        ]
        pixels = self._pixels(line_width)
        box = self._clip_box(pixels)

        # Dashes are laid out in device pixels on the visible part of each
        # edge only, so their count is bounded by the image size.
        pattern = None
        if dash:
            unit = self._unit()
            pattern = (dash[0] * unit, dash[1] * unit)
            if pattern[0] + max(pattern[1], 0.0) < 2.0:
                pattern = None

        for index, start in enumerate(corners):
            end = corners[(index + 1) % len(corners)]
            clipped = clip_segment(start, end, box)
            if clipped is None:
                continue
            if pattern is None:
                pieces = [clipped]
            else:
                pieces = dash_segments(*clipped, pattern, phase=math.dist(start, clipped[0]))
            for piece_start, piece_end in pieces:
                self._draw.line([piece_start, piece_end], fill=color, width=pixels)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        color: Color,
        size: float,
        align: str = "left",
    ) -> None:
        font_px = max(1, round(size * self._unit()))
        font = self._font(font_px)
        px, py = self._map(x, y)
        if align == "center":
            px -= self._draw.textlength(text, font=font) / 2.0
        # ``y`` is the text baseline.
        self._draw.text((px, py - font_px), text, fill=color, font=font)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _map(self, x: float, y: float) -> tuple[float, float]:
        a, b, c, d, e, f = self._matrix
        return a * x + c * y + e, b * x + d * y + f

    def _unit(self) -> float:
        a, b, c, d, _, _ = self._matrix
        return math.sqrt(abs(a * d - b * c))

    def _pixels(self, width: float) -> int:
        return max(1, round(width * self._unit()))

    def _clip_box(self, pixels: int) -> tuple[float, float, float, float]:
        margin = pixels + 2.0
        width, height = self._image.size
        return (-margin, -margin, width + margin, height + margin)

    def _font(self, size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
        font = self._fonts.get(size)
        if font is None:
            font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font
