"""Zoom and pan state for the G-code viewport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .parser import Bounds

__all__ = ["Camera", "DEFAULT_PADDING", "MIN_SCALE", "ZOOM_FACTOR", "fit_scale"]

ZOOM_FACTOR: Final[float] = 1.2
"""Multiplier applied by a single zoom step."""

DEFAULT_PADDING: Final[float] = 40.0
"""Pixels kept free around the drawing when fitting it to the viewport."""

MIN_SCALE: Final[float] = 1e-6
"""Lower clamp for fitted scales so transforms stay invertible."""


def fit_scale(
    bounds: Bounds,
    width: float,
    height: float,
    *,
    padding: float = DEFAULT_PADDING,
) -> float:
    """Return the scale that fits *bounds* into a ``width`` x ``height`` viewport.

    Axes with no extent do not constrain the fit. When neither axis has an
    extent the drawing is shown at one pixel per millimetre.
    """

    candidates: list[float] = []
    if bounds.width > 0:
        candidates.append((width - 2 * padding) / bounds.width)
    if bounds.height > 0:
        candidates.append((height - 2 * padding) / bounds.height)
    if not candidates:
        return 1.0
    return max(min(candidates), MIN_SCALE)


@dataclass(slots=True)
class Camera:
    """Viewport camera: multiplicative zoom plus a pixel offset from the centre."""

    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    base_scale: float = 1.0
    _pan_start: tuple[float, float] | None = field(default=None, repr=False, compare=False)

    @property
    def effective_scale(self) -> float:
        return self.base_scale * self.zoom

    @property
    def is_panning(self) -> bool:
        return self._pan_start is not None

    def fit(
        self,
        bounds: Bounds,
        width: float,
        height: float,
        *,
        padding: float = DEFAULT_PADDING,
    ) -> float:
        self.base_scale = fit_scale(bounds, width, height, padding=padding)
        return self.base_scale

    def zoom_in(self) -> None:
        self.zoom *= ZOOM_FACTOR

    def zoom_out(self) -> None:
        self.zoom /= ZOOM_FACTOR

    def reset(self) -> None:
        """Return to the fitted view with no zoom or pan applied."""

        self.zoom = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0
        self._pan_start = None

    def wheel(self, delta_y: float) -> None:
        # Scrolling up (negative delta) zooms in.
        if delta_y < 0:
            self.zoom_in()
        else:
            self.zoom_out()

    def begin_pan(self, x: float, y: float) -> None:
        self._pan_start = (x - self.pan_x, y - self.pan_y)

    def pan_to(self, x: float, y: float) -> bool:
        """Move the view with the pointer; return ``True`` when it moved."""

        if self._pan_start is None:
            return False
        start_x, start_y = self._pan_start
        self.pan_x = x - start_x
        self.pan_y = y - start_y
        return True

    def end_pan(self) -> None:
        self._pan_start = None
