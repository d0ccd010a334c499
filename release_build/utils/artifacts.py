"""Distribution directory helpers."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Tuple

_UNITS = ("K", "M", "G", "T", "P")


def copy_artifact(source: Path, destination: Path) -> Path:
    """Copy a build output into the distribution directory.

    An existing file at ``destination`` is overwritten. File mode is kept
    so the copied binary stays executable.
    """
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    return destination


def format_size(size: int) -> str:
    """Render a byte count the way ``ls -lh`` does (``512B``, ``1.5K``, ``12M``)."""
    if size < 1024:
        return f"{size}B"

    value = float(size)
    for unit in _UNITS:
        value /= 1024.0
        if value < 1024.0 or unit == _UNITS[-1]:
            if value < 10:
                return f"{value:.1f}{unit}"
            return f"{value:.0f}{unit}"
    return f"{size}B"


def list_artifacts(dist_dir: Path) -> List[Tuple[str, int]]:
    """Return ``(name, size)`` for every regular file in ``dist_dir``, sorted by name.

    Raises:
        OSError: if the directory cannot be read.
    """
    entries = []
    for item in Path(dist_dir).iterdir():
        if item.is_file():
            entries.append((item.name, item.stat().st_size))
    return sorted(entries)
