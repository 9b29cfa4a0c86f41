"""Extract pen strokes from plotter G-code.

The gellyroller dialect is tiny: ``G0``/``G1`` linear moves carrying optional
``X``/``Y`` words and ``M42 P<pin> S<value>`` toggling the pen solenoid
(``S0`` lowers the pen, ``S1`` lifts it).  Everything else is ignored.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import NamedTuple

__all__ = [
    "Bounds",
    "GCodeDrawing",
    "PenState",
    "Point",
    "Stroke",
    "parse_gcode",
]

logger = logging.getLogger(__name__)

_X_WORD_PATTERN = re.compile(r"X(-?\d+(?:\.\d+)?)")
_Y_WORD_PATTERN = re.compile(r"Y(-?\d+(?:\.\d+)?)")
_S_WORD_PATTERN = re.compile(r"S(\d+)")

_PEN_CONTROL_CODE = "M42"
_MOVEMENT_PREFIXES = ("G0", "G00", "G1", "G01")

PEN_DOWN = 0
PEN_UP = 1


class Point(NamedTuple):
    """Position in millimetres."""

    x: float
    y: float


Stroke = list[Point]
"""Ordered points drawn while the pen stays down."""


@dataclass(slots=True)
class Bounds:
    """Running extent of every position the program travels to."""

    min_x: float = math.inf
    max_x: float = -math.inf
    min_y: float = math.inf
    max_y: float = -math.inf

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no position has been recorded."""

        return self.min_x > self.max_x or self.min_y > self.max_y

    def include(self, x: float, y: float) -> None:
        self.min_x = min(self.min_x, x)
        self.max_x = max(self.max_x, x)
        self.min_y = min(self.min_y, y)
        self.max_y = max(self.max_y, y)

    def as_dict(self) -> dict[str, float]:
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(slots=True)
class PenState:
    """Transient state carried from one G-code line to the next."""

    current_x: float = 0.0
    current_y: float = 0.0
    pen_down: bool = False
    stroke: Stroke = field(default_factory=list)

    @property
    def position(self) -> Point:
        return Point(self.current_x, self.current_y)


@dataclass(slots=True)
class GCodeDrawing:
    """Strokes and extent extracted from one G-code program."""

    strokes: list[Stroke]
    bounds: Bounds
    movement_count: int = 0
    line_count: int = 0

    @property
    def has_paths(self) -> bool:
        return bool(self.strokes)

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when there is nothing the renderer can show."""

        return not self.strokes or self.bounds.is_empty


def parse_gcode(text: str) -> GCodeDrawing:
    """Parse *text* into pen strokes and the bounds of all travel.

    Malformed coordinate words are skipped for their axis rather than
    reported; a program without any movement keeps the empty sentinel
    bounds (``min_x > max_x``).
    """

    state = PenState()
    strokes: list[Stroke] = []
    bounds = Bounds()
    movement_count = 0
    line_count = 0

    for raw_line in text.splitlines():
        line = raw_line.split(";", 1)[0].strip().upper()
        if not line:
            continue
        line_count += 1

        if _PEN_CONTROL_CODE in line:
            _apply_pen_control(line, state, strokes)

        if line.startswith(_MOVEMENT_PREFIXES):
            movement_count += 1
            x_match = _X_WORD_PATTERN.search(line)
            y_match = _Y_WORD_PATTERN.search(line)
            if x_match:
                state.current_x = float(x_match.group(1))
            if y_match:
                state.current_y = float(y_match.group(1))

            bounds.include(state.current_x, state.current_y)
            if state.pen_down:
                state.stroke.append(state.position)

    if state.stroke:
        strokes.append(state.stroke)
        state.stroke = []

    logger.debug(
        "Parsed %d G-code lines into %d strokes (%d movements)",
        line_count,
        len(strokes),
        movement_count,
    )
    return GCodeDrawing(
        strokes=strokes,
        bounds=bounds,
        movement_count=movement_count,
        line_count=line_count,
    )


def _apply_pen_control(line: str, state: PenState, strokes: list[Stroke]) -> None:
    match = _S_WORD_PATTERN.search(line)
    if match is None:
        return

    value = int(match.group(1))
    if value == PEN_UP:
        if state.stroke:
            strokes.append(state.stroke)
            state.stroke = []
        state.pen_down = False
    elif value == PEN_DOWN:
        state.pen_down = True
        state.stroke.append(state.position)
