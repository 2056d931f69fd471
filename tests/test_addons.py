from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from gsharp_build import addons
from gsharp_build.addons import copy_native_addons
from gsharp_build.config import BuildConfig
from gsharp_build.platforms import DEFAULT_PLATFORMS, PlatformDescriptor


def test_copies_only_addon_files(config: BuildConfig, tmp_path: Path) -> None:
    dest = tmp_path / "out"
    dest.mkdir()
    copied = copy_native_addons(DEFAULT_PLATFORMS["linux-x64"], dest, config)
    assert [p.name for p in copied] == ["pty.node", "spawn-helper.node"]
    assert sorted(p.name for p in dest.iterdir()) == ["pty.node", "spawn-helper.node"]
    assert (dest / "pty.node").read_bytes() == b"pty"


def test_missing_addon_directory_warns(config: BuildConfig, tmp_path: Path, log_messages) -> None:
    dest = tmp_path / "out"
    dest.mkdir()
    assert copy_native_addons(DEFAULT_PLATFORMS["mac-arm64"], dest, config) == []
    assert list(dest.iterdir()) == []
    assert any(level == "WARNING" and "mac-arm64" in msg for level, msg in log_messages)


def test_platform_without_addon_package(config: BuildConfig, tmp_path: Path, log_messages) -> None:
    plain = PlatformDescriptor("linux-x64", "bun-linux-x64", "gsharp", None)
    assert copy_native_addons(plain, tmp_path, config) == []
    assert not any(level == "WARNING" for level, _ in log_messages)


def test_copy_failure_skips_file_and_continues(
    config: BuildConfig, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, log_messages
) -> None:
    real_copy = shutil.copyfile

    def flaky_copy(src, dst):
        if Path(src).name == "pty.node":
            raise PermissionError("denied")
        return real_copy(src, dst)

    monkeypatch.setattr(addons.shutil, "copyfile", flaky_copy)
    dest = tmp_path / "out"
    dest.mkdir()

    copied = copy_native_addons(DEFAULT_PLATFORMS["linux-x64"], dest, config)

    assert [p.name for p in copied] == ["spawn-helper.node"]
    assert any(level == "WARNING" and "pty.node" in msg for level, msg in log_messages)
