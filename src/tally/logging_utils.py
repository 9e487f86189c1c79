"""Logging configuration for the tally CLI.

Library modules only ever call ``logging.getLogger(__name__)``; the
CLI installs a single Rich handler on stderr so diagnostics never mix
with JSON written to stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"

LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")


def configure_logging(level: str = "warning") -> None:
    """Configure root logging with a Rich handler writing to stderr.

    Repeated calls replace the previously installed handler instead of
    stacking a new one.

    Args:
        level: Log level name (e.g. "info", "debug"). Unknown names
            fall back to WARNING.
    """
    lvl = logging.getLevelName(level.upper())
    if not isinstance(lvl, int):
        lvl = logging.WARNING

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(lvl)
