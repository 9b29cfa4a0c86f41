"""Main window listing gellyroller programs beside the render view."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ..gcode.errors import GCodeLoadError
from ..gcode.library import delete_gcode_file, list_gcode_files
from ..gcode.viewer import GCodeViewer
from ..hardware import HardwareSettings
from .render_view import GCodeRenderView

__all__ = ["RenderWindow"]

logger = logging.getLogger(__name__)


class RenderWindow(QMainWindow):
    """Browse G-code files and preview the selected one."""

    def __init__(
        self,
        *,
        gcode_root: Path | None = None,
        hardware: HardwareSettings | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Gellyscope")
        self._gcode_root = gcode_root
        self._hardware = hardware or HardwareSettings()

        self._file_list = QListWidget()
        self._file_list.itemClicked.connect(self._handle_item_clicked)

        delete_button = QPushButton("Delete")
        delete_button.clicked.connect(self._delete_selected)

        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self.refresh_files)

        list_buttons = QHBoxLayout()
        list_buttons.addWidget(refresh_button)
        list_buttons.addWidget(delete_button)

        list_panel = QWidget()
        list_layout = QVBoxLayout(list_panel)
        list_layout.addWidget(self._file_list)
        list_layout.addLayout(list_buttons)

        self._view = GCodeRenderView(GCodeViewer(self._hardware.work_area))

        zoom_in = QPushButton("+")
        zoom_in.clicked.connect(self._view.zoom_in)
        zoom_out = QPushButton("−")
        zoom_out.clicked.connect(self._view.zoom_out)
        zoom_reset = QPushButton("Reset")
        zoom_reset.clicked.connect(self._view.reset_view)

        zoom_row = QHBoxLayout()
        zoom_row.addStretch(1)
        zoom_row.addWidget(zoom_out)
        zoom_row.addWidget(zoom_reset)
        zoom_row.addWidget(zoom_in)

        self._gcode_toggle = QToolButton()
        self._gcode_toggle.setText("G-code")
        self._gcode_toggle.setCheckable(True)
        self._gcode_toggle.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self._gcode_toggle.setArrowType(Qt.DownArrow)
        self._gcode_toggle.toggled.connect(self._set_gcode_expanded)

        self._gcode_text = QPlainTextEdit()
        self._gcode_text.setObjectName("renderGcodeText")
        self._gcode_text.setReadOnly(True)
        self._gcode_text.setLineWrapMode(QPlainTextEdit.NoWrap)
        self._gcode_text.setVisible(False)

        self._gcode_section = QWidget()
        gcode_layout = QVBoxLayout(self._gcode_section)
        gcode_layout.setContentsMargins(0, 0, 0, 0)
        gcode_layout.addWidget(self._gcode_toggle, 0, Qt.AlignLeft)
        gcode_layout.addWidget(self._gcode_text)
        self._gcode_section.setVisible(False)

        view_panel = QWidget()
        view_layout = QVBoxLayout(view_panel)
        view_layout.addWidget(self._view, 1)
        view_layout.addLayout(zoom_row)
        view_layout.addWidget(self._gcode_section)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(list_panel)
        splitter.addWidget(view_panel)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.resize(1100, 720)
        self.refresh_files()

    @property
    def view(self) -> GCodeRenderView:
        return self._view

    def refresh_files(self) -> None:
        self._file_list.clear()
        entries = list_gcode_files(self._gcode_root)
        for entry in entries:
            label = f"{entry.name}\n{entry.size_text}  {entry.modified:%Y-%m-%d %H:%M}"
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, str(entry.path))
            self._file_list.addItem(item)
        self.statusBar().showMessage(
            f"{len(entries)} G-code files" if entries else "No G-code files in gellyroller directory"
        )

    def open_file(self, path: str | Path) -> None:
        try:
            drawing = self._view.load_file(path)
        except GCodeLoadError as exc:
            logger.warning("Could not load G-code %s: %s", path, exc)
            self._view.clear()
            self._show_gcode_text("")
            self.statusBar().showMessage("Error loading G-code file")
            return
        self._show_gcode_text(self._view.viewer.text)
        self.statusBar().showMessage(f"{Path(path).name}: {len(drawing.strokes)} paths")

    def _show_gcode_text(self, text: str) -> None:
        self._gcode_text.setPlainText(text)
        self._gcode_section.setVisible(bool(text))

    def _set_gcode_expanded(self, expanded: bool) -> None:
        self._gcode_text.setVisible(expanded)
        self._gcode_toggle.setArrowType(Qt.UpArrow if expanded else Qt.DownArrow)

    def _handle_item_clicked(self, item: QListWidgetItem) -> None:
        self.open_file(item.data(Qt.UserRole))

    def _delete_selected(self) -> None:
        item = self._file_list.currentItem()
        if item is None:
            return
        path = Path(item.data(Qt.UserRole))
        answer = QMessageBox.question(
            self,
            "Delete G-code",
            f'Are you sure you want to delete "{path.name}"?\n\nThis action cannot be undone.',
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        try:
            delete_gcode_file(path)
        except GCodeLoadError as exc:
            QMessageBox.warning(self, "Delete G-code", f"Error deleting file: {exc}")
            return
        if self._view.viewer.source_path == path:
            self._view.clear()
            self._show_gcode_text("")
        self.refresh_files()
