"""Core logging implementation for design-model."""

import logging
import sys
from typing import Optional, Union

__all__ = ["LOG_FORMAT", "get_logger", "setup_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _coerce_level(level: Union[int, str]) -> int:
    """Accept numeric levels or names such as "debug"."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Logs go to stderr by default so STDIO transports keep stdout clean
    for protocol traffic.

    Args:
        level: Logging level, numeric or by name.
        stream: Output stream.
    """
    logging.basicConfig(
        level=_coerce_level(level),
        format=LOG_FORMAT,
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "design-model")
