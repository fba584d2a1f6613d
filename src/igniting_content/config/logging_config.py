"""
config/logging_config.py

One-shot logging setup for CLI runs. Library modules only create
`logging.getLogger(__name__)`; handlers are attached here.
"""

from __future__ import annotations

import logging
import sys

from igniting_content.config.project_config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_initialized = False


def init_logging(level: str | int | None = None) -> None:
    """
    Configure the root logger once (console handler on stderr).

    Args:
        level: Optional override; defaults to LOG_LEVEL from the environment.
    """
    global _initialized
    if _initialized:
        return

    resolved = level if level is not None else LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(resolved)
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _initialized = True
