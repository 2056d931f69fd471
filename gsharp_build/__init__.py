"""
gsharp_build package

This package builds distributable artifacts for the Gemini Sharp CLI (`gsharp`).

Key responsibilities are split across modules:
- `platforms.py`: static platform table and host platform detection
- `config.py`: build configuration defaults and YAML overrides
- `toolchain.py`: external process execution (bun, npm)
- `bundle.py`: locate (or produce) the JavaScript bundle
- `addons.py`: copy platform-specific native addons
- `renderer.py`: launcher script and README rendering
- `single_file.py` / `standalone.py`: the two per-platform builders
- `cli.py`: CLI entrypoint and batch orchestration
"""

from __future__ import annotations

__all__ = ["BuildError", "__version__"]

__version__ = "0.1.0"


class BuildError(RuntimeError):
    """Base class for every error the build tool reports to the user."""
