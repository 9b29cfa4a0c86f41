"""Exceptions raised by the G-code render surface."""

from __future__ import annotations

__all__ = ["GCodeError", "GCodeLoadError"]


class GCodeError(RuntimeError):
    """Base class for G-code viewer failures."""


class GCodeLoadError(GCodeError):
    """Raised when a G-code program cannot be read or removed."""
