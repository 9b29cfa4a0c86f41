"""Pytest configuration helpers for gellyscope tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:  # pragma: no cover - dependency availability varies between environments
    from PySide6.QtWidgets import QApplication
except ImportError:  # pragma: no cover - used when Qt is unavailable
    QApplication = None  # type: ignore[assignment]

# Ensure the source directory is importable without requiring an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_app_config() -> None:
    """Ensure each test runs with the default application configuration."""

    from gellyscope.config import configure

    configure(gcode_root=None)
    yield
    configure(gcode_root=None)


@pytest.fixture()
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Route hardware settings to an INI file inside *tmp_path*."""

    from PySide6.QtCore import QSettings

    from gellyscope import hardware

    ini_path = tmp_path / "settings.ini"
    monkeypatch.setattr(
        hardware,
        "_settings_storage",
        lambda: QSettings(str(ini_path), QSettings.IniFormat),
    )
    return ini_path


@pytest.fixture()
def sample_gcode_path(tmp_path: Path) -> Path:
    target = tmp_path / "sample.gcode"
    target.write_text((FIXTURES_DIR / "sample_plot.gcode").read_text(encoding="utf-8"), encoding="utf-8")
    return target


@pytest.fixture(scope="session")
def qapp():
    """Provide a ``QApplication`` instance for UI-oriented tests."""

    if QApplication is None:
        pytest.skip("PySide6 is unavailable in this environment")

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
