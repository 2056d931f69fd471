"""
addons.py

Responsibility: Copy platform-specific native addons (node-pty `.node` files)
next to the build output.

Native addons cannot be cross-compiled by bun, so the prebuilt binaries from
the dependency cache are copied as-is. Nothing here is fatal: a missing addon
directory or an unreadable file is logged as a warning and the build goes on.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from gsharp_build.config import BuildConfig
from gsharp_build.platforms import PlatformDescriptor


def copy_native_addons(platform: PlatformDescriptor, dest_dir: Path, config: BuildConfig) -> list[Path]:
    if not platform.addon_package:
        return []

    addon_dir = config.addon_cache_dir / platform.addon_package
    if not addon_dir.is_dir():
        logger.warning("  Native addon directory not found for {}: {}", platform.key, addon_dir)
        return []

    try:
        sources = sorted(p for p in addon_dir.iterdir() if p.name.endswith(config.addon_suffix))
    except OSError as e:
        logger.warning("  Could not read native addons for {}: {}", platform.key, e)
        return []

    copied: list[Path] = []
    for src in sources:
        dst = dest_dir / src.name
        try:
            shutil.copyfile(src, dst)
        except OSError as e:
            logger.warning("  Could not copy native addon {} for {}: {}", src.name, platform.key, e)
            continue
        copied.append(dst)
        logger.info("  Copied native addon: {}", src.name)
    return copied
