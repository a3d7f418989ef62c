"""Config loading, runtime wiring and CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from core.orchestrator import Orchestrator
from core.policy_runtime import load_effective_config, load_yaml, merge_dicts
from imagegen.providers.mock_image_provider import MockImageProvider
from service.settings import ServiceSettings
from ui.cli.cli import app
from vision.vlm.mock_vlm_provider import MockVLMProvider


def _write_config(root: Path, service: dict, permissions: dict | None = None) -> None:
    config_dir = root / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "default.yaml").write_text(
        yaml.safe_dump({"paths": {"output_dir": "out", "request_log_path": "logs/req.jsonl"}}),
        encoding="utf-8",
    )
    (config_dir / "models.yaml").write_text(yaml.safe_dump({"service": service}), encoding="utf-8")
    if permissions is not None:
        (config_dir / "permissions.yaml").write_text(yaml.safe_dump(permissions), encoding="utf-8")


def test_load_yaml_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") == {}


def test_load_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(path)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}


def test_settings_defaults_match_service_contract() -> None:
    settings = ServiceSettings.from_config({})
    assert settings.min_request_interval_seconds == 12.0
    assert settings.max_rate_limit_retries is None
    assert (settings.resize_width, settings.resize_height) == (800, 800)
    assert settings.image_size == "1024x1024"


def test_effective_config_applies_overrides(tmp_path: Path) -> None:
    _write_config(tmp_path, {"active_provider": "openai", "vision_model": "gpt-4o"})
    config = load_effective_config(
        tmp_path, overrides={"models": {"service": {"active_provider": "mock"}}}
    )
    assert config["models"]["service"] == {"active_provider": "mock", "vision_model": "gpt-4o"}


def test_orchestrator_wires_mock_runtime(tmp_path: Path) -> None:
    _write_config(tmp_path, {"active_provider": "mock", "min_request_interval_seconds": 3})
    bundle = Orchestrator(root=tmp_path).build()

    assert isinstance(bundle.service.vision_provider, MockVLMProvider)
    assert isinstance(bundle.service.image_generator, MockImageProvider)
    assert bundle.service.clock.min_interval == 3.0
    assert bundle.paths["output_dir"] == (tmp_path / "out").resolve()
    assert (tmp_path / "logs").is_dir()
    assert not (tmp_path / "out").exists()


def test_cli_generate_with_names_saves_icons(tmp_path: Path) -> None:
    _write_config(tmp_path, {"active_provider": "mock", "min_request_interval_seconds": 0})
    runner = CliRunner()

    result = runner.invoke(
        app, ["generate", "--names", "Mail, Maps", "--theme", "flat", "--root", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    assert "Generated: 2/2" in result.output
    out_dir = tmp_path / "out"
    assert sorted(p.name for p in out_dir.iterdir()) == ["Mail.png", "Maps.png"]
    log_lines = (tmp_path / "logs" / "req.jsonl").read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["app_name"] for line in log_lines] == ["Mail", "Maps"]


def test_cli_extract_prints_names(tmp_path: Path, screenshot_bytes: bytes) -> None:
    _write_config(tmp_path, {"active_provider": "mock", "mock_app_names": "Camera, Clock"})
    shot = tmp_path / "home.png"
    shot.write_bytes(screenshot_bytes)

    result = CliRunner().invoke(app, ["extract", str(shot), "--root", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == ["Camera", "Clock"]


def test_cli_reports_storage_permission_denial(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        {"active_provider": "mock", "min_request_interval_seconds": 0},
        permissions={"allow_storage_write": False},
    )
    result = CliRunner().invoke(
        app, ["generate", "--names", "Mail", "--theme", "flat", "--root", str(tmp_path)]
    )
    assert result.exit_code == 3
    assert "Storage permission denied" in result.output


def test_cli_closes_service_clients_after_command(tmp_path: Path, monkeypatch) -> None:
    _write_config(tmp_path, {"active_provider": "mock", "min_request_interval_seconds": 0})
    closed: list[str] = []
    monkeypatch.setattr(MockVLMProvider, "close", lambda self: closed.append("vision"))
    monkeypatch.setattr(MockImageProvider, "close", lambda self: closed.append("image"))

    result = CliRunner().invoke(
        app, ["generate", "--names", "Mail", "--theme", "flat", "--root", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    assert closed == ["vision", "image"]
