"""Logging configuration.

Modules log through `logging.getLogger(__name__)`; only entry points call
`setup_logging`, so importing the Core never touches the root logger.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", *, console: Console | None = None) -> None:
    """Configure the root logger with a Rich handler.

    Existing root handlers are removed so repeated calls (tests, nested CLI
    invocations) do not duplicate output.
    """

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(name)s | %(message)s", datefmt="[%X]"))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO; keep it for DEBUG runs only.
    httpx_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_level)
