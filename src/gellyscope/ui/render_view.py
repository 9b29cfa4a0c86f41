"""Qt widget that shows a G-code drawing with zoom and pan."""

from __future__ import annotations

import math
from collections.abc import Sequence
from pathlib import Path

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import QWidget

from ..gcode.parser import GCodeDrawing
from ..gcode.surface import Color
from ..gcode.viewer import GCodeViewer

__all__ = ["GCodeRenderView", "QPainterSurface"]


def _qcolor(color: Color) -> QColor:
    r, g, b, a = color
    return QColor(r, g, b, a)


class QPainterSurface:
    """Adapt an active :class:`QPainter` to the renderer's surface API."""

    def __init__(self, painter: QPainter) -> None:
        self._painter = painter

    def resize(self, width: int, height: int) -> None:
        # The widget already owns its size; painting always covers it.
        self._painter.resetTransform()

    def clear(self, color: Color) -> None:
        device = self._painter.device()
        self._painter.fillRect(0, 0, device.width(), device.height(), _qcolor(color))

    def save(self) -> None:
        self._painter.save()

    def restore(self) -> None:
        self._painter.restore()

    def translate(self, dx: float, dy: float) -> None:
        self._painter.translate(dx, dy)

    def scale(self, sx: float, sy: float) -> None:
        self._painter.scale(sx, sy)

    def polyline(self, points: Sequence[tuple[float, float]], color: Color, width: float) -> None:
        if len(points) < 2:
            return
        self._painter.setPen(self._pen(color, width))
        self._painter.drawPolyline(QPolygonF([QPointF(x, y) for x, y in points]))

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Color, width: float) -> None:
        self._painter.setPen(self._pen(color, width))
        self._painter.drawLine(QPointF(x0, y0), QPointF(x1, y1))

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
        pen = self._pen(color, line_width)
        if dash and line_width > 0:
            # Qt measures dash patterns in pen widths and clips them itself.
            on, off = dash
            pen.setCapStyle(Qt.FlatCap)
            pen.setDashPattern([on / line_width, off / line_width])
        self._painter.setPen(pen)
        self._painter.setBrush(Qt.NoBrush)
        self._painter.drawRect(QRectF(x, y, width, height))

    def text(
        self,
        x: float,
        y: float,
        text: str,
        color: Color,
        size: float,
        align: str = "left",
    ) -> None:
        transform = self._painter.transform()
        anchor = transform.map(QPointF(x, y))
        unit = math.sqrt(abs(transform.determinant()))
        font = QFont("monospace")
        font.setPixelSize(max(1, round(size * unit)))

        self._painter.save()
        self._painter.resetTransform()
        self._painter.setFont(font)
        self._painter.setPen(_qcolor(color))
        if align == "center":
            anchor.setX(anchor.x() - QFontMetricsF(font).horizontalAdvance(text) / 2.0)
        self._painter.drawText(anchor, text)
        self._painter.restore()

    def _pen(self, color: Color, width: float) -> QPen:
        pen = QPen(_qcolor(color))
        pen.setWidthF(width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        return pen


class GCodeRenderView(QWidget):
    """Interactive viewport: wheel zooms, left-drag pans."""

    def __init__(self, viewer: GCodeViewer | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._viewer = viewer or GCodeViewer()
        self.setMinimumSize(320, 240)
        self.setFocusPolicy(Qt.StrongFocus)

    @property
    def viewer(self) -> GCodeViewer:
        return self._viewer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load_file(self, path: str | Path) -> GCodeDrawing:
        drawing = self._viewer.load_file(path)
        self.update()
        return drawing

    def load_text(self, text: str) -> GCodeDrawing:
        drawing = self._viewer.load(text)
        self.update()
        return drawing

    def clear(self) -> None:
        self._viewer.clear()
        self.update()

    def zoom_in(self) -> None:
        if self._viewer.zoom_in():
            self.update()

    def zoom_out(self) -> None:
        if self._viewer.zoom_out():
            self.update()

    def reset_view(self) -> None:
        if self._viewer.reset_view():
            self.update()

    def set_work_area(self, width_mm: float, height_mm: float) -> None:
        self._viewer.set_work_area(width_mm, height_mm)
        if self._viewer.has_paths:
            self.update()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            self._viewer.draw(QPainterSurface(painter), self.width(), self.height())
        finally:
            painter.end()

    def wheelEvent(self, event) -> None:  # type: ignore[override]
        if event.modifiers() != Qt.NoModifier:
            super().wheelEvent(event)
            return
        # Qt reports scrolling up as a positive angle.
        if self._viewer.wheel(-event.angleDelta().y()):
            self.update()
        event.accept()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        position = event.position()
        self._viewer.begin_pan(position.x(), position.y())
        self.setCursor(Qt.ClosedHandCursor)

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        position = event.position()
        if self._viewer.pan_to(position.x(), position.y()):
            self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        self._viewer.end_pan()
        self.unsetCursor()

    def leaveEvent(self, event) -> None:  # type: ignore[override]
        self._viewer.end_pan()
        self.unsetCursor()
        super().leaveEvent(event)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        if self._viewer.should_redraw_on_resize(self.isVisible()):
            self.update()
