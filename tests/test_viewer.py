from __future__ import annotations

import time
from pathlib import Path

import pytest

from gellyscope.gcode import GCodeLoadError, GCodeViewer, WorkArea


def test_load_file_parses_and_resets_camera(sample_gcode_path: Path) -> None:
    viewer = GCodeViewer()
    viewer.camera.zoom = 3.0
    viewer.camera.pan_x = 40.0

    drawing = viewer.load_file(sample_gcode_path)

    assert viewer.has_paths
    assert len(drawing.strokes) == 2
    assert viewer.source_path == sample_gcode_path
    assert viewer.text == sample_gcode_path.read_text(encoding="utf-8")
    assert (viewer.camera.zoom, viewer.camera.pan_x, viewer.camera.pan_y) == (1.0, 0.0, 0.0)


def test_loading_replaces_previous_program() -> None:
    viewer = GCodeViewer()
    viewer.load("M42 S0\nG1 X5 Y5\nM42 S1\nM42 S0\nG1 X9 Y9\n")

    drawing = viewer.load("G0 X1 Y1\nM42 S0\nG1 X2 Y2\n")

    assert viewer.drawing is drawing
    assert len(drawing.strokes) == 1
    assert drawing.bounds.max_x == 2.0


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    viewer = GCodeViewer()

    with pytest.raises(GCodeLoadError):
        viewer.load_file(tmp_path / "missing.gcode")
    assert viewer.drawing is None


def test_work_area_survives_reload() -> None:
    viewer = GCodeViewer(WorkArea(300.0, 200.0))
    viewer.load("M42 S0\nG1 X1 Y1\n")

    viewer.set_work_area(420, 297)
    viewer.load("M42 S0\nG1 X3 Y3\n")

    assert viewer.work_area == WorkArea(420.0, 297.0)


def test_interaction_requests_redraw_only_with_paths() -> None:
    viewer = GCodeViewer()

    assert viewer.zoom_in() is False
    assert viewer.camera.zoom == pytest.approx(1.2)

    viewer.load("M42 S0\nG1 X10 Y10\n")
    assert viewer.zoom_in() is True
    assert viewer.wheel(-1) is True
    assert viewer.wheel(0) is False

    viewer.begin_pan(10, 10)
    assert viewer.pan_to(30, 5) is True
    viewer.end_pan()
    assert viewer.pan_to(50, 50) is False

    assert viewer.reset_view() is True
    assert (viewer.camera.zoom, viewer.camera.pan_x, viewer.camera.pan_y) == (1.0, 0.0, 0.0)


def test_resize_redraw_policy() -> None:
    viewer = GCodeViewer()
    assert viewer.should_redraw_on_resize(True) is False

    viewer.load("M42 S0\nG1 X10 Y10\n")
    assert viewer.should_redraw_on_resize(True) is True
    assert viewer.should_redraw_on_resize(False) is False

    viewer.clear()
    assert viewer.should_redraw_on_resize(True) is False
    assert viewer.text == ""


def test_render_image_without_program_shows_empty_state() -> None:
    viewer = GCodeViewer()

    image = viewer.render_image((200, 120))

    assert image.size == (200, 120)
    assert image.getpixel((0, 0)) == viewer.style.background


def test_render_image_with_program(sample_gcode_path: Path) -> None:
    viewer = GCodeViewer()
    viewer.load_file(sample_gcode_path)

    image = viewer.render_image((400, 300))

    assert image.mode == "RGBA"
    assert viewer.camera.base_scale == pytest.approx(min(320 / 60, 220 / 40))


def test_render_image_stays_fast_at_deep_zoom() -> None:
    viewer = GCodeViewer()
    viewer.load("G0 X0 Y0\nM42 S0\nG1 X100 Y0\nG1 X100 Y50\nG1 X0 Y50\nG1 X0 Y0\nM42 S1\n")
    viewer.set_work_area(100, 50)
    for _ in range(50):
        viewer.zoom_in()

    started = time.perf_counter()
    image = viewer.render_image((800, 600))
    elapsed = time.perf_counter() - started

    assert image.size == (800, 600)
    assert elapsed < 2.0
