"""Logging setup for the command line.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are attached here, once, by the entry point.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Attach a stderr handler to the ``stockroom`` logger.

    Safe to call repeatedly: later calls point the handler at the
    current stderr and change the level.
    """
    global _handler

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger("stockroom")
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
    else:
        _handler.setStream(sys.stderr)
    root.setLevel(level)

