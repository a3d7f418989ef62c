"""Storage permission policy."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from governance.action_sandbox import is_within_workspace


@dataclass
class PermissionDecision:
    """Represents allow/block decision."""

    allowed: bool
    reason: str


class PermissionEngine:
    """Decides whether icons may be written to a directory."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        cfg = config or {}
        self.allow_storage_write = bool(cfg.get("allow_storage_write", True))
        self.allow_write_outside_output_root = bool(
            cfg.get("allow_write_outside_output_root", True)
        )
        root = cfg.get("output_root")
        self.output_root = Path(str(root)) if root else None

    @staticmethod
    def _nearest_existing(path: Path) -> Path:
        current = path.resolve()
        while not current.exists() and current != current.parent:
            current = current.parent
        return current

    def check_storage_write(self, target_dir: Path) -> PermissionDecision:
        """Evaluate policy and filesystem access before any icon is written."""
        if not self.allow_storage_write:
            return PermissionDecision(False, "Storage writes disabled by policy.")
        if (
            self.output_root is not None
            and not self.allow_write_outside_output_root
            and not is_within_workspace(target_dir, self.output_root)
        ):
            return PermissionDecision(False, "Write outside output root is blocked.")

        existing = self._nearest_existing(target_dir)
        if not existing.is_dir():
            return PermissionDecision(False, f"Not a directory: {existing}")
        if not os.access(existing, os.W_OK | os.X_OK):
            return PermissionDecision(False, f"No write access to {existing}")
        return PermissionDecision(True, "Allowed by policy.")
