"""Tests for extracting pen strokes from plotter G-code."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from gellyscope.gcode import Bounds, Point, parse_gcode


def test_square_stroke_and_bounds() -> None:
    drawing = parse_gcode("G1 X0 Y0\nM42 S0\nG1 X10 Y0\nG1 X10 Y10\nM42 S1\n")

    assert drawing.strokes == [[(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]]
    assert drawing.bounds.as_dict() == {
        "min_x": 0.0,
        "max_x": 10.0,
        "min_y": 0.0,
        "max_y": 10.0,
        "width": 10.0,
        "height": 10.0,
    }


def test_pen_down_then_up_keeps_single_point_stroke() -> None:
    drawing = parse_gcode("M42 P0 S0\nM42 P0 S1\n")

    assert len(drawing.strokes) == 1
    assert drawing.strokes[0] == [Point(0.0, 0.0)]


def test_pen_up_without_points_does_not_push_empty_stroke() -> None:
    drawing = parse_gcode("M42 P0 S1\nG0 X5 Y5\nM42 P0 S1\n")

    assert drawing.strokes == []
    assert drawing.bounds.min_x == 5.0


def test_two_pen_cycles_produce_two_ordered_strokes() -> None:
    text = "\n".join(
        [
            "M42 P0 S0",
            "G1 X1 Y1",
            "G1 X2 Y1",
            "M42 P0 S1",
            "G0 X5 Y5",
            "M42 P0 S0",
            "G1 X6 Y7",
            "M42 P0 S1",
        ]
    )
    drawing = parse_gcode(text)

    assert drawing.strokes == [
        [(0.0, 0.0), (1.0, 1.0), (2.0, 1.0)],
        [(5.0, 5.0), (6.0, 7.0)],
    ]


def test_stroke_left_open_is_finalized_at_end_of_input() -> None:
    drawing = parse_gcode("G0 X3 Y4\nM42 S0\nG1 X8\n")

    assert drawing.strokes == [[(3.0, 4.0), (8.0, 4.0)]]


def test_single_axis_move_keeps_other_axis() -> None:
    drawing = parse_gcode("G1 X3 Y4\nM42 S0\nG1 Y5\n")

    assert drawing.strokes == [[(3.0, 4.0), (3.0, 5.0)]]
    assert drawing.bounds.min_x == drawing.bounds.max_x == 3.0
    assert drawing.bounds.max_y == 5.0


def test_travel_moves_extend_bounds() -> None:
    drawing = parse_gcode("G0 X-20 Y-5\nM42 S0\nG1 X10 Y10\nM42 S1\nG0 X40 Y0\n")

    bounds = drawing.bounds
    assert (bounds.min_x, bounds.max_x) == (-20.0, 40.0)
    assert (bounds.min_y, bounds.max_y) == (-5.0, 10.0)
    assert bounds.width == 60.0
    assert bounds.height == 15.0


def test_no_movement_leaves_empty_sentinel_bounds() -> None:
    drawing = parse_gcode("G21\nG90\nM42 P0 S0\nM42 P0 S1\n")

    assert drawing.bounds.min_x > drawing.bounds.max_x
    assert drawing.bounds.is_empty
    assert math.isinf(drawing.bounds.min_y)
    assert drawing.is_empty


@pytest.mark.parametrize("text", ["", "   \n\t\n", "; only a comment\n"])
def test_blank_input_yields_nothing(text: str) -> None:
    drawing = parse_gcode(text)

    assert drawing.strokes == []
    assert drawing.bounds == Bounds()
    assert drawing.line_count == 0


def test_comments_and_case_are_normalised() -> None:
    drawing = parse_gcode("m42 p0 s0 ; lower\ng1 x2.5 y-1.25 ; draw\nM42 P0 S1 ; G1 X99\n")

    assert drawing.strokes == [[(0.0, 0.0), (2.5, -1.25)]]
    assert drawing.bounds.max_x == 2.5


def test_m42_without_s_value_is_ignored() -> None:
    drawing = parse_gcode("M42 P0\nG1 X1 Y1\nM42 P0 S7\nG1 X2 Y2\n")

    assert drawing.strokes == []
    assert drawing.movement_count == 2


def test_movement_without_coordinates_is_counted_but_inert() -> None:
    drawing = parse_gcode("G1 X4 Y2\nG1 F1200\n")

    assert drawing.movement_count == 2
    assert drawing.bounds.as_dict()["width"] == 0.0


def test_malformed_numbers_are_skipped_for_that_axis() -> None:
    drawing = parse_gcode("G1 X5 Y5\nG1 X-.5 Yabc\n")

    assert drawing.bounds.min_x == 5.0
    assert drawing.bounds.min_y == 5.0


def test_zero_padded_commands_are_movements() -> None:
    drawing = parse_gcode("G00 X1 Y2\nG01 X3 Y4\n")

    assert drawing.movement_count == 2
    assert drawing.bounds.max_x == 3.0


def test_pen_down_point_uses_position_before_the_line() -> None:
    drawing = parse_gcode("G0 X1 Y1\nM42 P0 S0\nG1 X2 Y2\n")

    assert drawing.strokes[0][0] == Point(1.0, 1.0)


def test_sample_fixture(sample_gcode_path: Path) -> None:
    drawing = parse_gcode(sample_gcode_path.read_text(encoding="utf-8"))

    assert len(drawing.strokes) == 2
    assert drawing.strokes[0][0] == (10.0, 10.0)
    assert drawing.strokes[0][-1] == (10.0, 10.0)
    assert drawing.strokes[1] == [(20.0, 20.0), (50.0, 30.0)]
    assert drawing.movement_count == 8
    assert drawing.line_count == 15
    assert (drawing.bounds.width, drawing.bounds.height) == (60.0, 40.0)
