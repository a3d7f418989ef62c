"""Icon persistence tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from governance.permission_engine import PermissionEngine
from storage.icon_store import (
    IconStore,
    InvalidIconNameError,
    StoragePermissionError,
    safe_icon_stem,
)


def test_saved_bytes_match_in_memory_buffer(tmp_path: Path) -> None:
    icons = {"Mail": b"\x89PNG\r\n\x1a\nmail", "Maps": bytes(range(256))}
    store = IconStore(tmp_path / "GeneratedIcons")

    written = store.save(icons)

    assert [p.name for p in written] == ["Mail.png", "Maps.png"]
    for name, data in icons.items():
        assert (tmp_path / "GeneratedIcons" / f"{name}.png").read_bytes() == data


def test_empty_mapping_creates_directory_only(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "GeneratedIcons"
    written = IconStore(target).save({})
    assert written == []
    assert target.is_dir()
    assert list(target.iterdir()) == []


def test_path_traversal_names_stay_inside_directory(tmp_path: Path) -> None:
    target = tmp_path / "icons"
    written = IconStore(target).save({"../../evil": b"x", "a/b\\c": b"y"})
    for path in written:
        assert path.parent == target
    assert not (tmp_path / "evil.png").exists()


def test_unsafe_characters_are_replaced() -> None:
    assert safe_icon_stem('Files: "Pro"?') == "Files_ _Pro__"
    assert safe_icon_stem("  App Store. ") == "App Store"


@pytest.mark.parametrize("name", ["", "   ", "..", "/", "..."])
def test_unusable_names_are_rejected(name: str) -> None:
    with pytest.raises(InvalidIconNameError):
        safe_icon_stem(name)


def test_colliding_names_get_suffixes(tmp_path: Path) -> None:
    written = IconStore(tmp_path).save({"a/b": b"1", "a:b": b"2", "A_B": b"3"})
    assert [p.name for p in written] == ["a_b.png", "a_b-2.png", "A_B-3.png"]


def test_policy_denial_happens_before_any_write(tmp_path: Path) -> None:
    target = tmp_path / "GeneratedIcons"
    store = IconStore(target, PermissionEngine({"allow_storage_write": False}))
    with pytest.raises(StoragePermissionError):
        store.save({"Mail": b"x"})
    assert not target.exists()


def test_write_outside_output_root_can_be_blocked(tmp_path: Path) -> None:
    engine = PermissionEngine(
        {"output_root": str(tmp_path / "allowed"), "allow_write_outside_output_root": False}
    )
    assert engine.check_storage_write(tmp_path / "allowed" / "icons").allowed
    decision = engine.check_storage_write(tmp_path / "elsewhere")
    assert not decision.allowed
    assert "outside" in decision.reason.lower()


def test_target_under_a_file_is_denied(tmp_path: Path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("x")
    with pytest.raises(StoragePermissionError):
        IconStore(blocker / "icons").save({})


@pytest.mark.parametrize(
    ("name", "stem"),
    [("CON", "CON_"), ("nul.txt", "nul_.txt"), ("COM1", "COM1_"), ("Lpt9", "Lpt9_"), ("Console", "Console")],
)
def test_windows_device_names_are_suffixed(name: str, stem: str) -> None:
    assert safe_icon_stem(name) == stem


def test_device_name_app_is_saved_under_suffixed_file(tmp_path: Path) -> None:
    written = IconStore(tmp_path).save({"AUX": b"x", "Mail": b"y"})
    assert [p.name for p in written] == ["AUX_.png", "Mail.png"]
