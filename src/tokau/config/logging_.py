"""Logging setup for applications embedding tokau.

The library itself only creates module loggers under the `tokau`
namespace and never installs handlers. Call setup_logging() from a script
to see the DEBUG records emitted when spaces are defined or loaded.
"""

from __future__ import annotations
import logging
from typing import Optional, TextIO


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a console handler to the `tokau` logger."""
    logger = logging.getLogger("tokau")
    logger.setLevel(level.upper())

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    # Console
    handler = logging.StreamHandler(stream)
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    return logger
