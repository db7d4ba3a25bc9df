"""Command-line entry point for why-no-sound."""

from __future__ import annotations

from diagnostics.run import main

if __name__ == "__main__":
    raise SystemExit(main())
