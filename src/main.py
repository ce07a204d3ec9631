"""Script entry point.

Runs the CLI with `python -m main` from `src/` during development, next to
the `rrr` console script.
"""

from __future__ import annotations

import sys

# Bodies are written as UTF-8 text; Windows consoles default to cp1252.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
