"""Logging micro API for design-model."""

from .lib import LOG_FORMAT, get_logger, setup_logging

__all__ = ["LOG_FORMAT", "get_logger", "setup_logging"]
