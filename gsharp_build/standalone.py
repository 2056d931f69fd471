"""
standalone.py

Responsibility: Assemble per-platform packages that run the bundle with a
system `node` interpreter.

Output layout:

    <dist-standalone>/gsharp-<platform-key>/
        bundle/**            bundle files + native addons
        gsharp[.cmd]         launcher
        gemini-sharp[.cmd]   launcher
        README.txt

Unlike the single-file builder, a batch run stops at the first failing
platform.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from gsharp_build.addons import copy_native_addons
from gsharp_build.config import BuildConfig
from gsharp_build.platforms import PlatformDescriptor
from gsharp_build.renderer import write_launchers, write_readme


def copy_bundle(bundle_dir: Path, dest_dir: Path) -> int:
    """
    Copy every file under bundle_dir, preserving relative paths. Returns the file count.
    """
    count = 0
    for src in sorted((p for p in bundle_dir.rglob("*") if p.is_file()), key=lambda p: p.as_posix()):
        dst = dest_dir / src.relative_to(bundle_dir)
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
        count += 1
    return count


def package_dir_for(platform: PlatformDescriptor, config: BuildConfig) -> Path:
    return config.standalone_dist_dir / f"{config.package_prefix}{platform.key}"


def build_package(platform: PlatformDescriptor, config: BuildConfig) -> Path:
    platform_dir = package_dir_for(platform, config)
    bundle_dest_dir = platform_dir / "bundle"

    bundle_dest_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Building package for {}...", platform.key)

    count = copy_bundle(config.bundle_dir, bundle_dest_dir)
    logger.info("  Copied {} bundle files", count)

    copy_native_addons(platform, bundle_dest_dir, config)

    write_launchers(platform_dir, platform, config)
    logger.info("  Created launcher scripts")

    write_readme(platform_dir, platform, config)

    logger.info("Package ready: {}", platform_dir)
    return platform_dir


def build_all_packages(config: BuildConfig) -> list[Path]:
    """
    Build every platform in table order. The first failure propagates.
    """
    logger.info("Building packages for all platforms...")
    return [build_package(platform, config) for platform in config.platforms.values()]
