"""Configuration helpers for the Gellyscope application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Final

__all__ = [
    "AppConfig",
    "DEFAULT_GCODE_ROOT",
    "GCODE_ROOT_ENV_VAR",
    "configure",
    "get_config",
]

GCODE_ROOT_ENV_VAR: Final[str] = "GELLYSCOPE_GCODE_ROOT"
"""Environment variable that overrides the default gellyroller folder."""

DEFAULT_GCODE_ROOT: Final[Path] = Path.home() / "gellyroller"
"""Default folder where generated G-code programs are stored."""


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Runtime configuration for the Gellyscope application."""

    gcode_root: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "gcode_root", _coerce_root(self.gcode_root))


_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    """Return the cached :class:`AppConfig` instance."""

    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _build_config()
    return _CONFIG


def configure(*, gcode_root: str | Path | None = None) -> AppConfig:
    """Rebuild the global configuration with optional overrides."""

    global _CONFIG
    _CONFIG = _build_config(gcode_root=gcode_root)
    return _CONFIG


def _coerce_root(value: str | Path | PathLike[str]) -> Path:
    if isinstance(value, Path):
        candidate = value
    else:
        text = str(value).strip()
        if not text:
            raise ValueError("G-code folder overrides cannot be empty")
        candidate = Path(text)
    return candidate.expanduser().resolve()


def _build_config(*, gcode_root: str | Path | None = None) -> AppConfig:
    if gcode_root is not None:
        return AppConfig(gcode_root=_coerce_root(gcode_root))

    env_value = os.environ.get(GCODE_ROOT_ENV_VAR)
    if env_value:
        return AppConfig(gcode_root=_coerce_root(env_value))

    return AppConfig(gcode_root=DEFAULT_GCODE_ROOT)
