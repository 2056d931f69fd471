"""
renderer.py

Responsibility: Deterministically render the launcher scripts and README that
ship inside a standalone package.

Rules:
- Templates live in the package's `templates/` directory and are rendered with
  Jinja2 using StrictUndefined, so a missing variable is an error.
- Output is always written with `\\n` newlines; rendering the same platform with
  the same config twice yields byte-identical files.
- POSIX launchers are made executable (0o755). Windows launchers are not.

This module does NOT know about bun, npm, or CLI parsing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from gsharp_build import BuildError
from gsharp_build.config import BuildConfig
from gsharp_build.platforms import PlatformDescriptor

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SHELL_LAUNCHER_TEMPLATE = "launcher.sh.j2"
BATCH_LAUNCHER_TEMPLATE = "launcher.cmd.j2"
README_TEMPLATE = "README.txt.j2"
README_NAME = "README.txt"


class RenderError(BuildError):
    pass


def _environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def _render(name: str, context: dict[str, Any]) -> str:
    try:
        return _environment().get_template(name).render(**context)
    except TemplateError as e:
        raise RenderError(f"Failed rendering template: {name}") from e


def _write(path: Path, text: str, *, executable: bool = False) -> Path:
    path.write_text(text, encoding="utf-8", newline="\n")
    if executable:
        path.chmod(0o755)
    return path


def render_launcher(platform: PlatformDescriptor, config: BuildConfig) -> str:
    template = BATCH_LAUNCHER_TEMPLATE if platform.is_windows else SHELL_LAUNCHER_TEMPLATE
    return _render(template, {"bundle_entry": config.bundle_entry})


def write_launchers(platform_dir: Path, platform: PlatformDescriptor, config: BuildConfig) -> list[Path]:
    """
    Write one launcher per configured launcher name (`gsharp`, `gemini-sharp`).
    """
    text = render_launcher(platform, config)
    return [
        _write(platform_dir / f"{name}{platform.launcher_ext}", text, executable=not platform.is_windows)
        for name in config.launcher_names
    ]


def render_readme(platform: PlatformDescriptor, config: BuildConfig) -> str:
    launcher = f"{config.launcher_names[0]}{platform.launcher_ext}"
    run_hint = f".\\{launcher}" if platform.is_windows else f"./{launcher}"
    return _render(README_TEMPLATE, {"readme": config.readme, "run_hint": run_hint})


def write_readme(platform_dir: Path, platform: PlatformDescriptor, config: BuildConfig) -> Path:
    return _write(platform_dir / README_NAME, render_readme(platform, config))
