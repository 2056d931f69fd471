"""
cli.py

Responsibility: CLI entrypoint for gsharp-build.

Two subcommands share the same platform selection rules:

    gsharp-build single-file [PLATFORM | --all]
    gsharp-build standalone  [PLATFORM | --all]

Selection order: `--all` builds every table entry; otherwise an explicit
platform key (validated before anything touches the filesystem); otherwise the
host platform.

Batch failure policy differs between the two:
- single-file: a failing platform is logged and the remaining ones are built.
- standalone: the first failing platform aborts the run.

This module orchestrates; the actual work lives in:
- Configuration: `config.py`
- External tools: `toolchain.py`
- Builders: `single_file.py`, `standalone.py`
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from gsharp_build import __version__
from gsharp_build.bundle import ensure_bundle
from gsharp_build.config import BuildConfig, load_config
from gsharp_build.platforms import PlatformDescriptor, UnknownPlatformError, detect_host_platform, get_platform
from gsharp_build.single_file import build_all_single_file, build_single_file, clean_output
from gsharp_build.standalone import build_all_packages, build_package
from gsharp_build.toolchain import ToolchainNotFoundError, check_compiler

def configure_logging(verbose: bool = False) -> None:
    """
    Route log output to stderr as plain messages, replacing existing sinks.
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format="{message}", colorize=False)


def _display(path: Path, root: Path) -> str:
    try:
        return f"{path.relative_to(root).as_posix()}/"
    except ValueError:
        return str(path)


def _select_platform(args: argparse.Namespace, config: BuildConfig) -> PlatformDescriptor | None:
    """
    Return the single platform to build, or None when `--all` was given.
    """
    if args.all:
        return None
    if args.platform:
        return get_platform(config.platforms, args.platform)
    return get_platform(config.platforms, detect_host_platform())


def single_file_cmd(args: argparse.Namespace, config: BuildConfig) -> int:
    selected = _select_platform(args, config)

    version = check_compiler(config)
    logger.info("Using Bun {}", version)

    clean_output(config.single_file_dist_dir)
    bundle_path = ensure_bundle(config)

    exit_code = 0
    if selected is None:
        result = build_all_single_file(bundle_path, config)
        if not result.ok:
            logger.error(
                "{} of {} platforms failed: {}",
                len(result.failed),
                len(config.platforms),
                ", ".join(result.failed),
            )
            exit_code = 1
    else:
        build_single_file(selected, bundle_path, config)

    logger.info("Done! Single-file executables are in {}", _display(config.single_file_dist_dir, config.root_dir))
    return exit_code


def standalone_cmd(args: argparse.Namespace, config: BuildConfig) -> int:
    selected = _select_platform(args, config)

    ensure_bundle(config)
    config.standalone_dist_dir.mkdir(parents=True, exist_ok=True)

    if selected is None:
        build_all_packages(config)
    else:
        build_package(selected, config)

    logger.info("Done! Packages are in {}", _display(config.standalone_dist_dir, config.root_dir))
    logger.info("Note: Users need Node.js {}+ installed to run these packages.", config.readme.node_version)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("platform", nargs="?", default=None, help="Platform key to build (default: host platform)")
    common.add_argument("--all", action="store_true", help="Build every platform in the table")
    common.add_argument("--root", default=".", help="Project root containing bundle/ and node_modules/ (default: .)")
    common.add_argument("--config", default=None, help="YAML config file (default: <root>/gsharp-build.yaml if present)")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    p = argparse.ArgumentParser(prog="gsharp-build", description="Build distributable artifacts for the gsharp CLI")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("single-file", parents=[common], help="Compile standalone executables with bun")
    s.set_defaults(func=single_file_cmd)

    t = sub.add_parser("standalone", parents=[common], help="Assemble packages that run the bundle with node")
    t.set_defaults(func=standalone_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config, args.root)
        return int(args.func(args, config))
    except UnknownPlatformError as e:
        logger.error(str(e))
        logger.info("Available: {}", ", ".join(e.available))
        return 1
    except ToolchainNotFoundError as e:
        logger.error(str(e))
        return 1
    except Exception as e:  # noqa: BLE001 - any failure ends the run with exit status 1
        logger.error("Build failed: {}", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
