from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import pytest
from loguru import logger

from gsharp_build.config import BuildConfig

LINUX_ADDON = "@lydell/node-pty-linux-x64"


@dataclass
class FakeToolchain:
    """
    Stand-in for `subprocess.run` inside `gsharp_build.toolchain`.

    - `bun --version` reports a version.
    - `bun build ... --outfile X` writes X, unless its target is in `fail_targets`.
    - the bundle command writes the bundle entry when `bundle_produces` is set.
    """

    root: Path
    bun_version: str = "1.1.38"
    missing: set[str] = field(default_factory=set)
    fail_targets: set[str] = field(default_factory=set)
    bundle_fails: bool = False
    bundle_produces: bool = True
    calls: list[list[str]] = field(default_factory=list)

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append(list(cmd))
        if cmd[0] in self.missing:
            raise FileNotFoundError(cmd[0])
        if cmd[1:] == ["--version"]:
            return subprocess.CompletedProcess(cmd, 0, stdout=f"{self.bun_version}\n", stderr="")
        if cmd[1] == "build":
            target = cmd[cmd.index("--target") + 1]
            if target in self.fail_targets:
                return subprocess.CompletedProcess(cmd, 1)
            out = Path(cmd[cmd.index("--outfile") + 1])
            out.write_bytes(b"\x7fELF compiled")
            return subprocess.CompletedProcess(cmd, 0)
        if cmd == ["npm", "run", "bundle"]:
            if self.bundle_fails:
                return subprocess.CompletedProcess(cmd, 2)
            if self.bundle_produces:
                (self.root / "bundle").mkdir(exist_ok=True)
                (self.root / "bundle" / "gemini.js").write_text("console.log('gsharp');\n", encoding="utf-8")
            return subprocess.CompletedProcess(cmd, 0)
        raise AssertionError(f"unexpected command: {cmd}")

    def compile_targets(self) -> list[str]:
        return [c[c.index("--target") + 1] for c in self.calls if len(c) > 1 and c[1] == "build"]


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with a bundle and one platform's native addons."""
    bundle = tmp_path / "bundle"
    (bundle / "assets").mkdir(parents=True)
    (bundle / "gemini.js").write_text("console.log('gsharp');\n", encoding="utf-8")
    (bundle / "chunk-a1b2.js").write_text("export {};\n", encoding="utf-8")
    (bundle / "assets" / "theme.json").write_text("{}\n", encoding="utf-8")

    addon = tmp_path / "node_modules" / LINUX_ADDON
    addon.mkdir(parents=True)
    (addon / "pty.node").write_bytes(b"pty")
    (addon / "spawn-helper.node").write_bytes(b"helper")
    (addon / "package.json").write_text("{}\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(project: Path) -> BuildConfig:
    return BuildConfig.default(project)


@pytest.fixture
def toolchain(project: Path, monkeypatch: pytest.MonkeyPatch) -> FakeToolchain:
    fake = FakeToolchain(root=project)
    monkeypatch.setattr("gsharp_build.toolchain.subprocess.run", fake)
    return fake


@pytest.fixture
def log_messages() -> Iterator[list[tuple[str, str]]]:
    messages: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda m: messages.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
        format="{message}",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _drop_log_sinks() -> Iterator[None]:
    yield
    logger.remove()
