"""Discovery of G-code programs stored in the gellyroller folder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Final

from ..config import get_config
from .errors import GCodeLoadError

__all__ = [
    "GCODE_EXTENSIONS",
    "GCodeFileEntry",
    "delete_gcode_file",
    "format_file_size",
    "list_gcode_files",
]

logger = logging.getLogger(__name__)

GCODE_EXTENSIONS: Final[tuple[str, ...]] = (".gcode", ".gco", ".nc")
"""File suffixes treated as plotter programs."""


@dataclass(frozen=True, slots=True)
class GCodeFileEntry:
    """Describe a G-code file available for preview."""

    path: Path
    name: str
    size: int
    modified: datetime

    @property
    def size_text(self) -> str:
        return format_file_size(self.size)


def format_file_size(size: int) -> str:
    """Return *size* bytes as ``"x.y KB"`` or ``"x.y MB"``."""

    kilobytes = size / 1024
    if kilobytes < 1024:
        return f"{kilobytes:.1f} KB"
    return f"{kilobytes / 1024:.1f} MB"


def list_gcode_files(root: Path | None = None) -> list[GCodeFileEntry]:
    """Return the G-code files directly inside *root*, newest first.

    *root* defaults to the configured gellyroller folder. A missing folder
    yields an empty list.
    """

    folder = Path(root).expanduser() if root is not None else get_config().gcode_root
    if not folder.is_dir():
        logger.debug("G-code folder %s does not exist", folder)
        return []

    entries: list[GCodeFileEntry] = []
    for candidate in folder.iterdir():
        if not candidate.is_file() or candidate.suffix.lower() not in GCODE_EXTENSIONS:
            continue
        try:
            stat = candidate.stat()
        except OSError:
            logger.warning("Could not stat G-code file %s", candidate, exc_info=True)
            continue
        entries.append(
            GCodeFileEntry(
                path=candidate,
                name=candidate.name,
                size=stat.st_size,
                modified=datetime.fromtimestamp(stat.st_mtime),
            )
        )

    entries.sort(key=lambda entry: (entry.modified, entry.name), reverse=True)
    return entries


def delete_gcode_file(path: str | Path) -> None:
    """Remove the G-code file at *path*."""

    target = Path(path).expanduser()
    try:
        target.unlink()
    except OSError as exc:
        raise GCodeLoadError(f"Unable to delete {target!s}: {exc}") from exc
    logger.info("Deleted G-code file %s", target)
