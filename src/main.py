"""Run script.

Why it exists:
- Lets `python -m main` work from inside `src/` during development.
- Keeps a simple entry point next to the installed `bgcheck` script.
"""

from __future__ import annotations

import sys

# The verdict table prints emoji; Windows consoles default to cp1252.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
