"""MCP (Model Context Protocol) server for design-model.

Exposes the design model, validation and repair operations to agents.

Example:
    # Start server in STDIO mode
    >>> from design_model.mcp import run_server
    >>> run_server()

    # Start server in HTTP mode
    >>> from design_model.mcp import run_server, ServerConfig, TransportType
    >>> run_server(ServerConfig.from_env(transport=TransportType.HTTP, port=18090))

    # Create server for testing
    >>> from design_model.mcp import create_server
    >>> server = create_server()

Available Tools:
    - getDesignModel: Tokens, contract and enabled constraint flags
    - validate: Check a view spec against enabled constraints
    - suggestFixes: JSON patches repairing constraint violations
    - applyFixes: Apply patches to a view spec
"""

from .lib import (
    ServerConfig,
    TransportType,
    get_server_capabilities,
    get_server_version,
)
from .server import create_server, mcp, run_server
from .tools import InvalidParamsError

__all__ = [
    # Server instance
    "mcp",
    "create_server",
    "run_server",
    # Errors
    "InvalidParamsError",
    # Configuration
    "ServerConfig",
    "TransportType",
    # Utilities
    "get_server_version",
    "get_server_capabilities",
]
