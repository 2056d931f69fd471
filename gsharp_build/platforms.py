"""
platforms.py

Responsibility: The static platform table and host platform detection.

Each logical platform key (e.g. `mac-arm64`) maps to an immutable
`PlatformDescriptor` holding the toolchain-specific parameters the builders
need. The table is ordered; `--all` builds walk it in insertion order.
"""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from gsharp_build import BuildError


class UnknownPlatformError(BuildError):
    def __init__(self, key: str, available: list[str]) -> None:
        super().__init__(f"Unknown platform: {key}")
        self.key = key
        self.available = available


@dataclass(frozen=True)
class PlatformDescriptor:
    """Toolchain parameters for one build target."""

    key: str
    compile_target: str
    output_name: str
    addon_package: str | None = None

    @property
    def is_windows(self) -> bool:
        return self.key.startswith("win")

    @property
    def launcher_ext(self) -> str:
        return ".cmd" if self.is_windows else ""


PlatformTable = Mapping[str, PlatformDescriptor]


def make_table(descriptors: list[PlatformDescriptor]) -> PlatformTable:
    """
    Build a read-only, ordered table keyed by platform key.
    """
    return MappingProxyType({d.key: d for d in descriptors})


DEFAULT_PLATFORMS: PlatformTable = make_table(
    [
        PlatformDescriptor("linux-x64", "bun-linux-x64", "gsharp", "@lydell/node-pty-linux-x64"),
        PlatformDescriptor("linux-arm64", "bun-linux-arm64", "gsharp", "@lydell/node-pty-linux-arm64"),
        PlatformDescriptor("mac-x64", "bun-darwin-x64", "gsharp", "@lydell/node-pty-darwin-x64"),
        PlatformDescriptor("mac-arm64", "bun-darwin-arm64", "gsharp", "@lydell/node-pty-darwin-arm64"),
        PlatformDescriptor("win-x64", "bun-windows-x64", "gsharp.exe", "@lydell/node-pty-win32-x64"),
    ]
)


def get_platform(table: PlatformTable, key: str) -> PlatformDescriptor:
    try:
        return table[key]
    except KeyError:
        raise UnknownPlatformError(key, list(table)) from None


def host_platform_key(os_name: str, arch: str) -> str:
    """
    Map an (OS, architecture) pair to a platform key.

    `os_name` uses `sys.platform` spelling (`win32`, `darwin`, `linux`, ...).
    Only arm64 is distinguished; every other architecture is treated as x64.
    """
    is_arm = arch.lower() in ("arm64", "aarch64")
    if os_name == "win32":
        return "win-x64"
    if os_name == "darwin":
        return "mac-arm64" if is_arm else "mac-x64"
    return "linux-arm64" if is_arm else "linux-x64"


def detect_host_platform() -> str:
    return host_platform_key(sys.platform, _platform.machine())
