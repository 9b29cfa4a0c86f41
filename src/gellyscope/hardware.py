"""Plotter hardware settings: work area, paper sizes and output units."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from PySide6.QtCore import QSettings

from .gcode.render import DEFAULT_WORK_AREA_MM, WorkArea

__all__ = [
    "APPLICATION_NAME",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_PAGE_SIZES",
    "HardwareSettings",
    "ORGANIZATION_NAME",
    "OUTPUT_UNITS",
    "PageSizeCatalog",
    "load_hardware_settings",
    "save_hardware_settings",
]

logger = logging.getLogger(__name__)

ORGANIZATION_NAME: Final[str] = "Gellyscope"
"""Organization identifier used when storing Qt settings."""

APPLICATION_NAME: Final[str] = "gellyscope"
"""Application identifier used when storing Qt settings."""

PageDimensions = tuple[float, float]
"""Paper width and height in millimetres (portrait)."""

DEFAULT_PAGE_SIZES: Final[dict[str, PageDimensions]] = {
    "A0": (841.0, 1189.0),
    "A1": (594.0, 841.0),
    "A2": (420.0, 594.0),
    "A3": (297.0, 420.0),
    "A4": (210.0, 297.0),
    "A5": (148.0, 210.0),
    "A6": (105.0, 148.0),
    "A7": (74.0, 105.0),
}
"""ISO sizes that ship with the application and can never be removed."""

DEFAULT_PAGE_SIZE: Final[str] = "A4"

OUTPUT_UNITS: Final[tuple[str, ...]] = ("in", "mm", "cm")
"""Units accepted for G-code generation output."""


class PageSizeCatalog:
    """Editable collection of named paper sizes.

    Built-in sizes start locked and cannot be renamed or deleted. Locked
    sizes keep their dimensions until they are unlocked.
    """

    def __init__(
        self,
        sizes: Mapping[str, PageDimensions] | None = None,
        *,
        locked: set[str] | None = None,
        current: str = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._sizes: dict[str, PageDimensions] = dict(DEFAULT_PAGE_SIZES)
        for name, (width, height) in (sizes or {}).items():
            self._sizes[name] = (float(width), float(height))
        self._locked: set[str] = set(DEFAULT_PAGE_SIZES if locked is None else locked) & set(self._sizes)
        self._current = current if current in self._sizes else DEFAULT_PAGE_SIZE

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def __contains__(self, name: object) -> bool:
        return name in self._sizes

    def __len__(self) -> int:
        return len(self._sizes)

    def names(self) -> list[str]:
        return list(self._sizes)

    def as_dict(self) -> dict[str, PageDimensions]:
        return dict(self._sizes)

    @property
    def locked(self) -> frozenset[str]:
        return frozenset(self._locked)

    @property
    def current(self) -> str:
        return self._current

    def is_default(self, name: str) -> bool:
        return name in DEFAULT_PAGE_SIZES

    def is_locked(self, name: str) -> bool:
        return name in self._locked

    def dimensions(self, name: str, *, landscape: bool = False) -> PageDimensions:
        """Return the size of *name* in millimetres, rotated when *landscape*."""

        try:
            width, height = self._sizes[name]
        except KeyError:
            raise ValueError(f"Unknown paper size: {name}") from None
        return (height, width) if landscape else (width, height)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def select(self, name: str) -> None:
        if name not in self._sizes:
            raise ValueError(f"Unknown paper size: {name}")
        self._current = name

    def add_custom(self) -> str:
        """Add a new unlocked size with A4 dimensions and return its name."""

        name = "Custom"
        counter = 1
        while name in self._sizes:
            name = f"Custom{counter}"
            counter += 1
        self._sizes[name] = DEFAULT_PAGE_SIZES[DEFAULT_PAGE_SIZE]
        return name

    def rename(self, old: str, new: str) -> bool:
        """Rename a custom size; return ``False`` when the rename is not allowed."""

        new = new.strip()
        if old not in self._sizes or self.is_locked(old) or self.is_default(old):
            return False
        if not new or new == old:
            return False
        if new in self._sizes:
            raise ValueError(f"A paper size named {new!r} already exists")

        self._sizes = {(new if name == old else name): dims for name, dims in self._sizes.items()}
        if self._current == old:
            self._current = new
        return True

    def resize(self, name: str, *, width: float | None = None, height: float | None = None) -> bool:
        """Update the dimensions of an unlocked size."""

        if name not in self._sizes or self.is_locked(name):
            return False
        for value in (width, height):
            if value is not None and (math.isnan(value) or value <= 0):
                return False

        current_width, current_height = self._sizes[name]
        self._sizes[name] = (
            float(width) if width is not None else current_width,
            float(height) if height is not None else current_height,
        )
        return True

    def toggle_lock(self, name: str) -> bool:
        """Flip the lock on *name* and return the new state."""

        if name not in self._sizes:
            raise ValueError(f"Unknown paper size: {name}")
        if name in self._locked:
            self._locked.discard(name)
            return False
        self._locked.add(name)
        return True

    def delete(self, name: str) -> bool:
        if self.is_default(name) or name not in self._sizes:
            return False
        del self._sizes[name]
        self._locked.discard(name)
        if self._current == name:
            self._current = DEFAULT_PAGE_SIZE
        return True


@dataclass(slots=True)
class HardwareSettings:
    """Machine-specific preferences shared by the render and export views."""

    work_area: WorkArea = field(default_factory=WorkArea)
    output_unit: str = "in"
    page_sizes: PageSizeCatalog = field(default_factory=PageSizeCatalog)

    def set_work_area(self, width_mm: float | None = None, height_mm: float | None = None) -> bool:
        """Apply positive dimensions; non-positive inputs are ignored."""

        changed = False
        if width_mm is not None and width_mm > 0:
            self.work_area.width_mm = float(width_mm)
            changed = True
        if height_mm is not None and height_mm > 0:
            self.work_area.height_mm = float(height_mm)
            changed = True
        return changed

    def set_output_unit(self, unit: str) -> None:
        normalized = unit.strip().lower()
        if normalized not in OUTPUT_UNITS:
            raise ValueError(f"Unsupported output unit: {unit}")
        self.output_unit = normalized


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or number <= 0:
        return default
    return number


def _decode_page_sizes(value: object) -> dict[str, PageDimensions]:
    if not isinstance(value, str):
        return {}
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed stored paper sizes")
        return {}
    if not isinstance(parsed, dict):
        return {}

    result: dict[str, PageDimensions] = {}
    for name, dims in parsed.items():
        if not isinstance(name, str) or not isinstance(dims, list | tuple) or len(dims) != 2:
            continue
        width = _coerce_positive_float(dims[0], 0.0)
        height = _coerce_positive_float(dims[1], 0.0)
        if width and height:
            result[name] = (width, height)
    return result


def _decode_locked(value: object) -> set[str] | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None
    return {name for name in parsed if isinstance(name, str)}


def _settings_storage() -> QSettings:
    return QSettings(ORGANIZATION_NAME, APPLICATION_NAME)


def load_hardware_settings() -> HardwareSettings:
    """Return persisted hardware settings, falling back to defaults."""

    store = _settings_storage()

    default_width, default_height = DEFAULT_WORK_AREA_MM
    work_area = WorkArea(
        _coerce_positive_float(store.value("hardware/workspaceWidth"), default_width),
        _coerce_positive_float(store.value("hardware/workspaceHeight"), default_height),
    )

    unit_raw = store.value("hardware/outputUnit")
    unit = unit_raw.strip().lower() if isinstance(unit_raw, str) else "in"
    if unit not in OUTPUT_UNITS:
        unit = "in"

    current_raw = store.value("pages/current")
    catalog = PageSizeCatalog(
        _decode_page_sizes(store.value("pages/sizes")),
        locked=_decode_locked(store.value("pages/locked")),
        current=current_raw if isinstance(current_raw, str) else DEFAULT_PAGE_SIZE,
    )

    return HardwareSettings(work_area=work_area, output_unit=unit, page_sizes=catalog)


def save_hardware_settings(settings: HardwareSettings) -> None:
    """Persist *settings* using Qt's :class:`~PySide6.QtCore.QSettings`."""

    store = _settings_storage()

    store.beginGroup("hardware")
    store.setValue("workspaceWidth", float(settings.work_area.width_mm))
    store.setValue("workspaceHeight", float(settings.work_area.height_mm))
    store.setValue("outputUnit", settings.output_unit)
    store.endGroup()

    catalog = settings.page_sizes
    store.beginGroup("pages")
    store.setValue("current", catalog.current)
    store.setValue("sizes", json.dumps({name: list(dims) for name, dims in catalog.as_dict().items()}))
    store.setValue("locked", json.dumps(sorted(catalog.locked)))
    store.endGroup()

    store.sync()
