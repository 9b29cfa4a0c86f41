"""Command line and desktop entry points for Gellyscope."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .config import get_config
from .gcode import GCodeLoadError, GCodeViewer, list_gcode_files
from .hardware import HardwareSettings, load_hardware_settings

WINDOW_TITLE: Final[str] = "Gellyscope"
"""Default title applied to the main Qt window."""

DEFAULT_RENDER_SIZE: Final[tuple[int, int]] = (800, 600)

__all__ = ["WINDOW_TITLE", "main", "parse_size"]

logger = logging.getLogger(__name__)


def parse_size(value: str) -> tuple[float, float]:
    """Parse ``"WIDTHxHEIGHT"`` into two positive numbers."""

    text = value.strip().lower().replace("mm", "")
    for separator in ("x", "×", "*"):
        if separator in text:
            parts = [part for part in text.split(separator) if part]
            if len(parts) == 2:
                try:
                    width, height = float(parts[0]), float(parts[1])
                except ValueError:
                    break
                if width > 0 and height > 0:
                    return width, height
            break
    raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gellyscope",
        description="Preview pen-plotter G-code from the gellyroller folder.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command")

    render = subparsers.add_parser("render", help="Render a G-code file to a PNG image.")
    render.add_argument("source", type=Path, help="G-code file to render.")
    render.add_argument("-o", "--output", type=Path, help="Destination PNG (defaults beside the source).")
    render.add_argument(
        "--size",
        type=parse_size,
        default=DEFAULT_RENDER_SIZE,
        help="Image size in pixels as WIDTHxHEIGHT (default 800x600).",
    )
    render.add_argument(
        "--work-area",
        help="Work area as WIDTHxHEIGHT in mm or a paper size name such as A4.",
    )
    render.add_argument("--landscape", action="store_true", help="Rotate a named paper size.")
    render.add_argument("--zoom", type=float, default=1.0, help="Zoom factor applied after fitting.")

    subparsers.add_parser("list", help="List G-code files in the gellyroller folder.")

    view = subparsers.add_parser("view", help="Open the desktop preview window.")
    view.add_argument("source", type=Path, nargs="?", help="Optional G-code file to open.")

    return parser.parse_args(argv)


def _resolve_work_area(value: str | None, landscape: bool, settings: HardwareSettings) -> tuple[float, float]:
    if not value:
        return settings.work_area.width_mm, settings.work_area.height_mm
    if value in settings.page_sizes:
        return settings.page_sizes.dimensions(value, landscape=landscape)
    try:
        return parse_size(value)
    except argparse.ArgumentTypeError:
        raise ValueError(f"Unknown work area {value!r}") from None


def _run_render(args: argparse.Namespace) -> int:
    settings = load_hardware_settings()
    try:
        width_mm, height_mm = _resolve_work_area(args.work_area, args.landscape, settings)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 2
    if args.zoom <= 0:
        print("Zoom must be positive", file=sys.stderr)
        return 2

    viewer = GCodeViewer()
    viewer.set_work_area(width_mm, height_mm)
    try:
        drawing = viewer.load_file(args.source)
    except GCodeLoadError as exc:
        print(exc, file=sys.stderr)
        return 1

    viewer.camera.zoom = args.zoom
    width, height = (int(value) for value in args.size)
    image = viewer.render_image((width, height))
    output = args.output or args.source.with_suffix(".png")
    try:
        image.save(output, format="PNG")
    except OSError as exc:
        print(f"Unable to write {output}: {exc}", file=sys.stderr)
        return 1
    logger.info("Wrote %s", output)
    print(f"{output} ({len(drawing.strokes)} paths)")
    return 0 if drawing.has_paths else 3


def _run_list() -> int:
    entries = list_gcode_files()
    if not entries:
        print(f"No G-code files in {get_config().gcode_root}")
        return 0
    for entry in entries:
        print(f"{entry.name}\t{entry.size_text}\t{entry.modified:%Y-%m-%d %H:%M}")
    return 0


def _run_view(args: argparse.Namespace) -> int:
    from PySide6.QtWidgets import QApplication

    from .ui.render_window import RenderWindow

    app = QApplication.instance()
    owns_application = False
    if app is None:
        logger.info("Creating new QApplication")
        app = QApplication(sys.argv[:1])
        owns_application = True

    window = RenderWindow(hardware=load_hardware_settings())
    window.setWindowTitle(WINDOW_TITLE)
    source = getattr(args, "source", None)
    if source is not None:
        window.open_file(source)
    window.show()

    if owns_application:
        result = app.exec()
        logger.info("Qt event loop exited with code: %s", result)
        return result
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Gellyscope command line interface."""

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "render":
        return _run_render(args)
    if args.command == "list":
        return _run_list()
    return _run_view(args)
