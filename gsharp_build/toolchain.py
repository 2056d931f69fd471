"""
toolchain.py

Responsibility: Run external build tools (bun, npm) as blocking child processes.

Commands inherit the parent's stdio so compiler output streams straight to the
terminal. Every invocation is logged as `> cmd args` before it starts.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from loguru import logger

from gsharp_build import BuildError
from gsharp_build.config import BuildConfig

BUN_INSTALL_HINT = "Install with: curl -fsSL https://bun.sh/install | bash"


class CommandError(BuildError):
    def __init__(self, cmd: Sequence[str], returncode: int) -> None:
        super().__init__(f"Command failed: {' '.join(cmd)} (exit status {returncode})")
        self.cmd = list(cmd)
        self.returncode = returncode


class ToolchainNotFoundError(BuildError):
    pass


def run(cmd: Sequence[str], *, cwd: Path) -> None:
    """
    Run a command to completion, raising CommandError on a non-zero exit.
    """
    logger.info("> {}", " ".join(cmd))
    try:
        result = subprocess.run(list(cmd), cwd=str(cwd))
    except FileNotFoundError as e:
        raise ToolchainNotFoundError(f"Executable not found: {cmd[0]}") from e
    if result.returncode != 0:
        raise CommandError(cmd, result.returncode)


def check_compiler(config: BuildConfig) -> str:
    """
    Return the compiler's version string, or raise ToolchainNotFoundError.
    """
    cmd = [config.compiler, "--version"]
    try:
        result = subprocess.run(cmd, cwd=str(config.root_dir), stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except FileNotFoundError as e:
        raise ToolchainNotFoundError(f"Bun not found. {BUN_INSTALL_HINT}") from e
    if result.returncode != 0:
        raise ToolchainNotFoundError(f"Bun not found. {BUN_INSTALL_HINT}")
    return (result.stdout or "").strip()
