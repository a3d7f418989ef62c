"""Output directory sandbox guards."""

from __future__ import annotations

from pathlib import Path


def is_within_workspace(path: Path, root_dir: Path) -> bool:
    """Return True if path is inside (or equal to) the root directory."""
    try:
        path.resolve().relative_to(root_dir.resolve())
        return True
    except ValueError:
        return False


def is_direct_child(path: Path, directory: Path) -> bool:
    """Return True if path resolves to an entry directly inside directory."""
    return path.resolve().parent == directory.resolve()
