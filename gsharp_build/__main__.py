from __future__ import annotations

from gsharp_build.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
