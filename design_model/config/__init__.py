"""Centralized configuration management for design-model.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from design_model.config import EnvVar, get_environment
    >>>
    >>> port = get_environment(EnvVar.MCP_PORT)  # Returns int: 18090
    >>> model_dir = get_design_model_dir()  # Bundled data unless overridden

Environment Variable Categories:
    model: Location of tokens, contract and constraint rule files
    service: MCP server bind address, port and error masking
    logging: Log verbosity
"""

from .lib import (
    BUNDLED_MODEL_DIR,
    EnvConfig,
    EnvVar,
    get_design_model_dir,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)

__all__ = [
    "BUNDLED_MODEL_DIR",
    "EnvConfig",
    "EnvVar",
    "get_environment",
    "get_environment_info",
    "get_design_model_dir",
    "get_log_level",
    "list_environment_variables",
]
