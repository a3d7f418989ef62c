"""Writes generated icons to a local directory, one PNG per app name."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from governance.action_sandbox import is_direct_child
from governance.permission_engine import PermissionEngine

logger = logging.getLogger("ig.storage")

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_MAX_STEM_LENGTH = 120
_RESERVED_STEMS = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{n}" for n in range(1, 10)}
    | {f"LPT{n}" for n in range(1, 10)}
)


class StoragePermissionError(PermissionError):
    """Raised before any write when the target directory may not be used."""


class InvalidIconNameError(ValueError):
    """Raised when an app name cannot be turned into a safe filename."""


def safe_icon_stem(app_name: str) -> str:
    """Turn a model-supplied app name into a filename stem without path tricks."""
    stem = _UNSAFE_CHARS.sub("_", app_name).strip(" .")
    stem = stem[:_MAX_STEM_LENGTH].rstrip(" .")
    if not stem or set(stem) == {"_"}:
        raise InvalidIconNameError(f"Cannot build a filename from app name {app_name!r}")
    base, dot, rest = stem.partition(".")
    if base.upper() in _RESERVED_STEMS:
        # Windows device names stay reserved with any extension.
        stem = f"{base}_{dot}{rest}"
    return stem


class IconStore:
    """Saves icon bytes unmodified as ``<name>.png`` inside one directory."""

    def __init__(self, directory: Path, permission_engine: PermissionEngine | None = None) -> None:
        self.directory = directory
        self.permission_engine = permission_engine or PermissionEngine()

    def plan_paths(self, app_names: list[str]) -> dict[str, Path]:
        """Assign a unique target path per app name, suffixing collisions."""
        planned: dict[str, Path] = {}
        taken: set[str] = set()
        for name in app_names:
            stem = safe_icon_stem(name)
            candidate = stem
            counter = 2
            while candidate.lower() in taken:
                candidate = f"{stem}-{counter}"
                counter += 1
            taken.add(candidate.lower())
            path = self.directory / f"{candidate}.png"
            if not is_direct_child(path, self.directory):
                raise InvalidIconNameError(f"App name {name!r} escapes the output directory")
            planned[name] = path
        return planned

    def save(self, icons: Mapping[str, bytes]) -> list[Path]:
        """Write every icon; returns written paths in mapping order."""
        decision = self.permission_engine.check_storage_write(self.directory)
        if not decision.allowed:
            raise StoragePermissionError(decision.reason)

        planned = self.plan_paths(list(icons))
        self.directory.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for name, data in icons.items():
            target = planned[name]
            target.write_bytes(data)
            written.append(target)
        logger.info("Saved %d icons to %s", len(written), self.directory)
        return written
