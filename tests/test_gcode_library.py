from __future__ import annotations

import os
from pathlib import Path

import pytest

from gellyscope.config import configure
from gellyscope.gcode import GCodeLoadError, delete_gcode_file, list_gcode_files
from gellyscope.gcode.library import format_file_size


def _write(path: Path, size: int, mtime: float) -> Path:
    path.write_bytes(b"G1 X0\n".ljust(size, b" "))
    os.utime(path, (mtime, mtime))
    return path


def test_lists_gcode_files_newest_first(tmp_path: Path) -> None:
    _write(tmp_path / "old.gcode", 100, 1_000_000)
    _write(tmp_path / "new.GCODE", 2048, 2_000_000)
    _write(tmp_path / "mid.nc", 10, 1_500_000)
    _write(tmp_path / "drawing.svg", 10, 3_000_000)
    (tmp_path / "nested.gcode").mkdir()

    entries = list_gcode_files(tmp_path)

    assert [entry.name for entry in entries] == ["new.GCODE", "mid.nc", "old.gcode"]
    assert entries[0].size == 2048
    assert entries[0].size_text == "2.0 KB"


def test_defaults_to_configured_folder(tmp_path: Path) -> None:
    _write(tmp_path / "plot.gcode", 10, 1_000_000)
    configure(gcode_root=tmp_path)

    assert [entry.path for entry in list_gcode_files()] == [tmp_path.resolve() / "plot.gcode"]


def test_missing_folder_lists_nothing(tmp_path: Path) -> None:
    assert list_gcode_files(tmp_path / "absent") == []


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0.0 KB"), (1536, "1.5 KB"), (1024 * 1024, "1.0 MB"), (5 * 1024 * 1024 + 300_000, "5.3 MB")],
)
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected


def test_delete_gcode_file(tmp_path: Path) -> None:
    target = _write(tmp_path / "plot.gcode", 10, 1_000_000)

    delete_gcode_file(target)

    assert not target.exists()
    with pytest.raises(GCodeLoadError):
        delete_gcode_file(target)
