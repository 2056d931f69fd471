"""
bundle.py

Responsibility: Make sure the prebuilt JavaScript bundle exists before packaging.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from gsharp_build import BuildError
from gsharp_build.config import BuildConfig
from gsharp_build.toolchain import run


class BundleError(BuildError):
    pass


def ensure_bundle(config: BuildConfig) -> Path:
    """
    Return the bundle entry path, running the bundle command once if it is missing.

    A failing bundle command propagates `CommandError`.
    """
    bundle_file = config.bundle_path
    if bundle_file.exists():
        return bundle_file

    logger.info("Bundle not found, building...")
    run(config.bundle_command, cwd=config.root_dir)

    if not bundle_file.exists():
        raise BundleError(f"Bundle command finished but {bundle_file} was not produced")
    return bundle_file
