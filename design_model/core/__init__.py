"""Core utilities shared across design-model subpackages."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
