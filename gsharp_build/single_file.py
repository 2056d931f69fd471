"""
single_file.py

Responsibility: Build standalone single-file executables with `bun build --compile`.

Output layout:

    <dist-single>/<platform-key>/<output-name>   (+ native addon files)

In batch mode a failing platform is logged and skipped; the remaining
platforms are still built.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from gsharp_build import BuildError
from gsharp_build.addons import copy_native_addons
from gsharp_build.config import BuildConfig
from gsharp_build.platforms import PlatformDescriptor
from gsharp_build.toolchain import run


@dataclass
class BatchResult:
    built: dict[str, Path] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def clean_output(dist_dir: Path) -> None:
    """
    Delete and recreate the output root so every run starts from a clean slate.
    """
    if dist_dir.exists():
        shutil.rmtree(dist_dir)
    dist_dir.mkdir(parents=True, exist_ok=True)


def compile_command(platform: PlatformDescriptor, bundle_path: Path, output_path: Path, config: BuildConfig) -> list[str]:
    return [
        config.compiler,
        "build",
        str(bundle_path),
        "--compile",
        "--target",
        platform.compile_target,
        "--outfile",
        str(output_path),
        *config.compile_flags,
    ]


def build_single_file(platform: PlatformDescriptor, bundle_path: Path, config: BuildConfig) -> Path:
    platform_dir = config.single_file_dist_dir / platform.key
    output_path = platform_dir / platform.output_name

    platform_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Building single-file for {}...", platform.key)
    run(compile_command(platform, bundle_path, output_path, config), cwd=config.root_dir)

    copy_native_addons(platform, platform_dir, config)

    logger.info("  Built: {}", output_path)
    return output_path


def build_all_single_file(bundle_path: Path, config: BuildConfig) -> BatchResult:
    """
    Build every platform in table order, continuing past per-platform failures.
    """
    logger.info("Building for all platforms...")
    result = BatchResult()
    for key, platform in config.platforms.items():
        try:
            result.built[key] = build_single_file(platform, bundle_path, config)
        except (BuildError, OSError) as e:
            logger.error("Failed to build for {}: {}", key, e)
            result.failed[key] = str(e)
    return result
