"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Resolve output and log paths; only the log directory is created eagerly.

    The icon directory is created at save time, after the storage permission
    check has passed.
    """
    paths_cfg = config.get("paths", {})
    output_dir = (root / paths_cfg.get("output_dir", "GeneratedIcons")).resolve()
    request_log_path = (root / paths_cfg.get("request_log_path", "logs/requests.jsonl")).resolve()

    request_log_path.parent.mkdir(parents=True, exist_ok=True)

    return {
        "output_dir": output_dir,
        "request_log_path": request_log_path,
    }


def load_effective_config(root: Path, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """Load and merge all runtime configuration files."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    models_cfg = load_yaml(config_dir / "models.yaml")
    permissions_cfg = load_yaml(config_dir / "permissions.yaml")

    merged = merge_dicts(default_cfg, {"models": models_cfg})
    merged["permissions"] = merge_dicts(merged.get("permissions", {}), permissions_cfg)
    if overrides:
        merged = merge_dicts(merged, overrides)
    return merged
