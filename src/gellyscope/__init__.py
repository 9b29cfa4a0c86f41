"""Top-level package for the Gellyscope plotter companion.

The package currently exposes the G-code render surface used to preview
plotter programs before they are sent to the gellyroller.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
