"""
config.py

Responsibility: Build configuration defaults and optional YAML overrides.

The defaults reproduce the project layout the builders expect:

    <root>/bundle/gemini.js          prebuilt bundle (produced by `npm run bundle`)
    <root>/node_modules/<addon pkg>  native addon cache
    <root>/dist-single/              single-file executables
    <root>/dist-standalone/          standalone packages

A `gsharp-build.yaml` file at the project root (or passed via `--config`) may
override any of these. Unknown keys are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from gsharp_build import BuildError
from gsharp_build.platforms import DEFAULT_PLATFORMS, PlatformDescriptor, PlatformTable, make_table

DEFAULT_CONFIG_NAME = "gsharp-build.yaml"


class ConfigError(BuildError):
    pass


@dataclass(frozen=True)
class ReadmeInfo:
    """Text blocks substituted into the standalone package README."""

    title: str = "Gemini Sharp (gsharp)"
    tagline: str = "A privacy-focused, enhanced Gemini CLI."
    command: str = "gsharp"
    node_version: str = "20"
    homepage: str = "https://github.com/johnzfitch/gemini-xo"


@dataclass(frozen=True)
class BuildConfig:
    """Paths and toolchain settings shared by both builders."""

    root_dir: Path
    bundle_dir: Path
    addon_cache_dir: Path
    single_file_dist_dir: Path
    standalone_dist_dir: Path
    bundle_entry: str = "gemini.js"
    bundle_command: tuple[str, ...] = ("npm", "run", "bundle")
    compiler: str = "bun"
    compile_flags: tuple[str, ...] = ("--minify",)
    addon_suffix: str = ".node"
    package_prefix: str = "gsharp-"
    launcher_names: tuple[str, ...] = ("gsharp", "gemini-sharp")
    readme: ReadmeInfo = field(default_factory=ReadmeInfo)
    platforms: PlatformTable = field(default_factory=lambda: DEFAULT_PLATFORMS)

    @property
    def bundle_path(self) -> Path:
        return self.bundle_dir / self.bundle_entry

    @classmethod
    def default(cls, root_dir: str | Path) -> "BuildConfig":
        root = Path(root_dir).resolve()
        return cls(
            root_dir=root,
            bundle_dir=root / "bundle",
            addon_cache_dir=root / "node_modules",
            single_file_dist_dir=root / "dist-single",
            standalone_dist_dir=root / "dist-standalone",
        )


_PATH_KEYS = ("bundle_dir", "addon_cache_dir", "single_file_dist_dir", "standalone_dist_dir")
_STR_KEYS = ("bundle_entry", "compiler", "addon_suffix", "package_prefix")
_LIST_KEYS = ("bundle_command", "compile_flags", "launcher_names")


def _require_str(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"`{where}` must be a non-empty string.")
    return value.strip()


def _require_str_list(value: Any, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"`{where}` must be a list of strings.")
    return tuple(value)


def parse_platform_table(raw: Any) -> PlatformTable:
    """
    Build a platform table from a mapping of key -> descriptor fields.

    Example:

        linux-x64:
          compile_target: bun-linux-x64
          output_name: gsharp
          addon_package: "@lydell/node-pty-linux-x64"
    """
    if not isinstance(raw, dict) or not raw:
        raise ConfigError("`platforms` must be a non-empty mapping.")

    descriptors: list[PlatformDescriptor] = []
    for key, entry in raw.items():
        key = _require_str(key, "platforms key")
        if not isinstance(entry, dict):
            raise ConfigError(f"`platforms.{key}` must be a mapping.")
        addon = entry.get("addon_package")
        descriptors.append(
            PlatformDescriptor(
                key=key,
                compile_target=_require_str(entry.get("compile_target"), f"platforms.{key}.compile_target"),
                output_name=_require_str(entry.get("output_name"), f"platforms.{key}.output_name"),
                addon_package=_require_str(addon, f"platforms.{key}.addon_package") if addon is not None else None,
            )
        )
    return make_table(descriptors)


def _parse_readme(raw: Any, base: ReadmeInfo) -> ReadmeInfo:
    if not isinstance(raw, dict):
        raise ConfigError("`readme` must be a mapping.")
    unknown = set(raw) - set(ReadmeInfo.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"Unknown `readme` keys: {', '.join(sorted(unknown))}")
    # YAML reads `node_version: 20` as an int.
    values = {k: _require_str(str(v) if isinstance(v, (int, float)) else v, f"readme.{k}") for k, v in raw.items()}
    return replace(base, **values)


def _check_output_dirs(config: BuildConfig) -> None:
    """
    Reject output roots that would overlap the project inputs.

    The single-file root is deleted before every build, and the standalone
    root must not sit inside the bundle it copies from.
    """
    inputs = {"root_dir": config.root_dir, "bundle_dir": config.bundle_dir, "addon_cache_dir": config.addon_cache_dir}
    for key in ("single_file_dist_dir", "standalone_dist_dir"):
        dist = getattr(config, key)
        for name, path in inputs.items():
            if path.is_relative_to(dist):
                raise ConfigError(f"`{key}` must not contain `{name}`: {dist}")
            if name != "root_dir" and dist.is_relative_to(path):
                raise ConfigError(f"`{key}` must not be inside `{name}`: {dist}")


def apply_overrides(config: BuildConfig, data: dict[str, Any]) -> BuildConfig:
    """
    Return a copy of `config` with the recognised keys of `data` applied.
    """
    known = set(_PATH_KEYS) | set(_STR_KEYS) | set(_LIST_KEYS) | {"readme", "platforms"}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    for key in _PATH_KEYS:
        if key in data:
            # Relative paths are anchored at the project root.
            changes[key] = (config.root_dir / _require_str(data[key], key)).resolve()
    for key in _STR_KEYS:
        if key in data:
            changes[key] = _require_str(data[key], key)
    for key in _LIST_KEYS:
        if key in data:
            changes[key] = _require_str_list(data[key], key)
    if "readme" in data:
        changes["readme"] = _parse_readme(data["readme"], config.readme)
    if "platforms" in data:
        changes["platforms"] = parse_platform_table(data["platforms"])

    if "launcher_names" in changes and not changes["launcher_names"]:
        raise ConfigError("`launcher_names` must not be empty.")
    if "bundle_command" in changes and not changes["bundle_command"]:
        raise ConfigError("`bundle_command` must not be empty.")

    updated = replace(config, **changes)
    _check_output_dirs(updated)
    return updated


def load_config(path: str | Path | None, root_dir: str | Path) -> BuildConfig:
    """
    Load the build configuration for `root_dir`.

    - `path=None` looks for `gsharp-build.yaml` in the root and falls back to the
      defaults when it does not exist.
    - An explicit `path` must exist.
    """
    config = BuildConfig.default(root_dir)

    if path is None:
        cfg_path = config.root_dir / DEFAULT_CONFIG_NAME
        if not cfg_path.exists():
            return config
    else:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise ConfigError(f"Config file does not exist: {cfg_path}")

    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping at the top level.")
    return apply_overrides(config, data)
