"""Qt widgets for the Gellyscope shell."""

from __future__ import annotations

from .render_view import GCodeRenderView, QPainterSurface
from .render_window import RenderWindow

__all__ = [
    "GCodeRenderView",
    "QPainterSurface",
    "RenderWindow",
]
