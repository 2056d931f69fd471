from __future__ import annotations

import pytest

from gsharp_build.config import BuildConfig
from gsharp_build.toolchain import CommandError, ToolchainNotFoundError, check_compiler, run


def test_check_compiler_returns_version(config: BuildConfig, toolchain) -> None:
    assert check_compiler(config) == "1.1.38"
    assert toolchain.calls == [["bun", "--version"]]


def test_check_compiler_missing_binary(config: BuildConfig, toolchain) -> None:
    toolchain.missing.add("bun")
    with pytest.raises(ToolchainNotFoundError, match="bun.sh/install"):
        check_compiler(config)


def test_run_logs_command(config: BuildConfig, toolchain, log_messages) -> None:
    run(["npm", "run", "bundle"], cwd=config.root_dir)
    assert ("INFO", "> npm run bundle") in log_messages


def test_run_raises_on_non_zero_exit(config: BuildConfig, toolchain) -> None:
    toolchain.bundle_fails = True
    with pytest.raises(CommandError) as exc:
        run(["npm", "run", "bundle"], cwd=config.root_dir)
    assert exc.value.returncode == 2
    assert exc.value.cmd == ["npm", "run", "bundle"]


def test_run_missing_executable(config: BuildConfig, toolchain) -> None:
    toolchain.missing.add("npm")
    with pytest.raises(ToolchainNotFoundError, match="npm"):
        run(["npm", "run", "bundle"], cwd=config.root_dir)
