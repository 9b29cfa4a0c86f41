"""Stateful G-code viewer tying a parsed program to its camera and work area."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from .camera import Camera
from .errors import GCodeLoadError
from .parser import GCodeDrawing, parse_gcode
from .render import DEFAULT_STYLE, RenderStyle, WorkArea, draw
from .surface import PillowSurface, Surface

__all__ = ["GCodeViewer"]

logger = logging.getLogger(__name__)


class GCodeViewer:
    """Own one loaded G-code program together with its view state.

    Loading a program discards the previous strokes and resets the camera;
    the work area is independent of the program and survives reloads.
    """

    def __init__(
        self,
        work_area: WorkArea | None = None,
        *,
        style: RenderStyle = DEFAULT_STYLE,
    ) -> None:
        self.work_area = work_area or WorkArea()
        self.camera = Camera()
        self.style = style
        self._drawing: GCodeDrawing | None = None
        self._source_path: Path | None = None
        self._text = ""

    # ------------------------------------------------------------------
    # Program lifecycle
    # ------------------------------------------------------------------
    @property
    def drawing(self) -> GCodeDrawing | None:
        return self._drawing

    @property
    def source_path(self) -> Path | None:
        return self._source_path

    @property
    def text(self) -> str:
        """Source text of the loaded program, empty when nothing is loaded."""

        return self._text

    @property
    def has_paths(self) -> bool:
        return self._drawing is not None and self._drawing.has_paths

    def load(self, text: str, *, source: Path | None = None) -> GCodeDrawing:
        """Parse *text* and make it the displayed program."""

        drawing = parse_gcode(text)
        self._drawing = drawing
        self._source_path = source
        self._text = text
        self.camera.reset()
        logger.info(
            "Loaded G-code %s: %d paths, %.2f x %.2f mm",
            source or "<text>",
            len(drawing.strokes),
            drawing.bounds.width if not drawing.bounds.is_empty else 0.0,
            drawing.bounds.height if not drawing.bounds.is_empty else 0.0,
        )
        return drawing

    def load_file(self, path: str | Path) -> GCodeDrawing:
        """Read *path* as UTF-8 text and load it."""

        source = Path(path).expanduser()
        try:
            text = source.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise GCodeLoadError(f"Unable to read {source!s}: {exc}") from exc
        return self.load(text, source=source)

    def clear(self) -> None:
        self._drawing = None
        self._source_path = None
        self._text = ""
        self.camera.reset()

    def set_work_area(self, width_mm: float, height_mm: float) -> None:
        self.work_area = WorkArea(float(width_mm), float(height_mm))

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self, surface: Surface, width: int, height: int) -> bool:
        """Paint the current program; return ``False`` for the empty state."""

        drawing = self._drawing or parse_gcode("")
        return draw(surface, width, height, drawing, self.work_area, self.camera, style=self.style)

    def render_image(self, size: tuple[int, int]) -> Image.Image:
        """Return a Pillow image of the current view at *size* pixels."""

        width, height = size
        surface = PillowSurface(width, height)
        self.draw(surface, width, height)
        return surface.image

    def should_redraw_on_resize(self, visible: bool) -> bool:
        return visible and self.has_paths

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    def zoom_in(self) -> bool:
        self.camera.zoom_in()
        return self.has_paths

    def zoom_out(self) -> bool:
        self.camera.zoom_out()
        return self.has_paths

    def reset_view(self) -> bool:
        self.camera.reset()
        return self.has_paths

    def wheel(self, delta_y: float) -> bool:
        if delta_y == 0:
            return False
        self.camera.wheel(delta_y)
        return self.has_paths

    def begin_pan(self, x: float, y: float) -> None:
        self.camera.begin_pan(x, y)

    def pan_to(self, x: float, y: float) -> bool:
        return self.camera.pan_to(x, y) and self.has_paths

    def end_pan(self) -> None:
        self.camera.end_pan()
