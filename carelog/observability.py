"""
Logging setup for entry points.

The library itself only creates module loggers; handlers are attached
here by the API server lifespan, never on import.
"""

from __future__ import annotations
from typing import Union
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger (idempotent)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger("carelog")
    root.setLevel(level)
    if not any(getattr(h, "_carelog", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._carelog = True
        root.addHandler(handler)
    return root
