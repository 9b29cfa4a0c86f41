"""Utilities for parsing and rendering plotter G-code."""

from .camera import DEFAULT_PADDING, ZOOM_FACTOR, Camera, fit_scale
from .errors import GCodeError, GCodeLoadError
from .library import GCODE_EXTENSIONS, GCodeFileEntry, delete_gcode_file, list_gcode_files
from .parser import Bounds, GCodeDrawing, PenState, Point, Stroke, parse_gcode
from .render import RenderStyle, WorkArea, draw, format_dimension
from .surface import PillowSurface, Surface
from .viewer import GCodeViewer

__all__ = [
    "Bounds",
    "Camera",
    "DEFAULT_PADDING",
    "GCODE_EXTENSIONS",
    "GCodeDrawing",
    "GCodeError",
    "GCodeFileEntry",
    "GCodeLoadError",
    "GCodeViewer",
    "PenState",
    "PillowSurface",
    "Point",
    "RenderStyle",
    "Stroke",
    "Surface",
    "WorkArea",
    "ZOOM_FACTOR",
    "delete_gcode_file",
    "draw",
    "fit_scale",
    "format_dimension",
    "list_gcode_files",
    "parse_gcode",
]
