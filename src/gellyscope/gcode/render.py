"""Viewport renderer for parsed G-code drawings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .camera import DEFAULT_PADDING, Camera
from .parser import GCodeDrawing
from .surface import Color, Surface

__all__ = [
    "DEFAULT_WORK_AREA_MM",
    "EMPTY_DRAWING_MESSAGE",
    "MM_PER_INCH",
    "RenderStyle",
    "WorkArea",
    "draw",
    "format_dimension",
]

MM_PER_INCH: Final[float] = 25.4
MM_PER_CM: Final[float] = 10.0

DEFAULT_WORK_AREA_MM: Final[tuple[float, float]] = (400.0, 400.0)
"""Plotter bed size used until the hardware settings say otherwise."""

EMPTY_DRAWING_MESSAGE: Final[str] = "No drawing commands found in G-code"

_CALLOUT_OFFSET = 20.0
_CALLOUT_TICK = 5.0


@dataclass(slots=True)
class WorkArea:
    """Physical plotting area in millimetres, centred on the G-code origin."""

    width_mm: float = DEFAULT_WORK_AREA_MM[0]
    height_mm: float = DEFAULT_WORK_AREA_MM[1]


@dataclass(frozen=True, slots=True)
class RenderStyle:
    """Colours and sizes used when painting the viewport."""

    background: Color = (26, 26, 26, 255)
    stroke: Color = (0, 255, 0, 255)
    stroke_width: float = 0.5
    work_area: Color = (255, 165, 0, 220)
    work_area_width: float = 1.0
    work_area_dash: tuple[float, float] = (5.0, 5.0)
    callout: Color = (190, 190, 190, 230)
    text: Color = (255, 255, 255, 204)
    font_size: float = 12.0
    padding: float = DEFAULT_PADDING


DEFAULT_STYLE: Final[RenderStyle] = RenderStyle()


def format_dimension(mm: float) -> str:
    """Return *mm* as ``inches" / cm cm / mm mm``."""

    return f'{mm / MM_PER_INCH:.2f}" / {mm / MM_PER_CM:.1f} cm / {_trim(mm)} mm'


def draw(
    surface: Surface,
    width: int,
    height: int,
    drawing: GCodeDrawing,
    work_area: WorkArea,
    camera: Camera,
    *,
    style: RenderStyle = DEFAULT_STYLE,
) -> bool:
    """Paint *drawing* into *surface* through *camera*.

    ``camera.base_scale`` is refitted on every call. Returns ``False`` when
    the drawing has nothing to show and only the empty-state message was
    painted.
    """

    # The surface must match the current container before any scale math.
    surface.resize(width, height)

    if drawing.is_empty:
        surface.clear(style.background)
        surface.text(width / 2.0, height / 2.0, EMPTY_DRAWING_MESSAGE, style.text, style.font_size, "center")
        return False

    bounds = drawing.bounds
    camera.fit(bounds, width, height, padding=style.padding)
    scale = camera.effective_scale

    surface.clear(style.background)

    surface.save()
    surface.translate(width / 2.0 + camera.pan_x, height / 2.0 + camera.pan_y)
    # G-code Y grows upwards, screen Y grows downwards.
    surface.scale(scale, -scale)
    surface.translate(-bounds.min_x - bounds.width / 2.0, -bounds.min_y - bounds.height / 2.0)

    for stroke in drawing.strokes:
        if len(stroke) < 2:
            continue
        surface.polyline(stroke, style.stroke, style.stroke_width / scale)

    _draw_work_area(surface, work_area, scale, style)
    surface.restore()

    _draw_overlay(surface, drawing, camera, style)
    _draw_callouts(surface, width, height, work_area, camera, style)
    return True


def _draw_work_area(surface: Surface, work_area: WorkArea, scale: float, style: RenderStyle) -> None:
    half_width = work_area.width_mm / 2.0
    half_height = work_area.height_mm / 2.0
    on, off = style.work_area_dash
    surface.rectangle(
        -half_width,
        -half_height,
        work_area.width_mm,
        work_area.height_mm,
        style.work_area,
        style.work_area_width / scale,
        dash=(on / scale, off / scale),
    )

    surface.save()
    surface.translate(-half_width, half_height)
    surface.scale(1.0, -1.0)
    surface.text(5.0 / scale, 15.0 / scale, "Work Area", style.work_area, style.font_size / scale)
    surface.restore()


def _draw_overlay(surface: Surface, drawing: GCodeDrawing, camera: Camera, style: RenderStyle) -> None:
    bounds = drawing.bounds
    lines = (
        f"Dimensions: {bounds.width:.2f} × {bounds.height:.2f} mm",
        f"Paths: {len(drawing.strokes)}",
        f"Zoom: {camera.zoom * 100:.0f}%",
    )
    for index, text in enumerate(lines):
        surface.text(10.0, 20.0 + 15.0 * index, text, style.text, style.font_size)


def _draw_callouts(
    surface: Surface,
    width: int,
    height: int,
    work_area: WorkArea,
    camera: Camera,
    style: RenderStyle,
) -> None:
    scale = camera.effective_scale
    center_x = width / 2.0 + camera.pan_x
    center_y = height / 2.0 + camera.pan_y
    half_width = work_area.width_mm / 2.0 * scale
    half_height = work_area.height_mm / 2.0 * scale
    left, right = center_x - half_width, center_x + half_width
    top, bottom = center_y - half_height, center_y + half_height

    y = top - _CALLOUT_OFFSET
    surface.line(left, y, right, y, style.callout, 1.0)
    surface.line(left, y - _CALLOUT_TICK, left, y + _CALLOUT_TICK, style.callout, 1.0)
    surface.line(right, y - _CALLOUT_TICK, right, y + _CALLOUT_TICK, style.callout, 1.0)
    surface.text(center_x, y - 6.0, format_dimension(work_area.width_mm), style.callout, style.font_size, "center")

    x = right + _CALLOUT_OFFSET
    surface.line(x, top, x, bottom, style.callout, 1.0)
    surface.line(x - _CALLOUT_TICK, top, x + _CALLOUT_TICK, top, style.callout, 1.0)
    surface.line(x - _CALLOUT_TICK, bottom, x + _CALLOUT_TICK, bottom, style.callout, 1.0)
    surface.text(x + 8.0, center_y + 4.0, format_dimension(work_area.height_mm), style.callout, style.font_size)


def _trim(value: float) -> str:
    return f"{value:.1f}".rstrip("0").rstrip(".")
