"""Core MCP server logic for design-model.

Provides configuration and metadata for creating MCP server instances.
"""

from dataclasses import dataclass
from enum import Enum

from design_model.config import EnvVar, get_environment


class TransportType(str, Enum):
    """Supported MCP transport types."""

    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


@dataclass
class ServerConfig:
    """Configuration for MCP server.

    Attributes:
        transport: Transport type for communication.
        host: Bind address for HTTP/SSE transports.
        port: Port for HTTP/SSE transports.
        path: URL path for HTTP transport.
    """

    transport: TransportType = TransportType.STDIO
    host: str = "0.0.0.0"
    port: int = 18090
    path: str = "/mcp"

    @classmethod
    def from_env(
        cls,
        transport: TransportType | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "ServerConfig":
        """Create config from environment variables.

        Args:
            transport: Override transport type (default: STDIO).
            host: Override MCP_HOST.
            port: Override MCP_PORT.

        Returns:
            ServerConfig with values from environment.
        """
        return cls(
            transport=transport or TransportType.STDIO,
            host=get_environment(EnvVar.MCP_HOST) if host is None else host,
            port=get_environment(EnvVar.MCP_PORT) if port is None else port,
        )


def get_server_version() -> str:
    """Get server version string."""
    return "0.1.0"


def get_server_capabilities() -> dict:
    """Get server capabilities for MCP protocol.

    Returns:
        Dictionary of capability flags.
    """
    return {
        "tools": True,
        "resources": False,
        "prompts": False,
        "logging": True,
    }


__all__ = [
    "TransportType",
    "ServerConfig",
    "get_server_version",
    "get_server_capabilities",
]
