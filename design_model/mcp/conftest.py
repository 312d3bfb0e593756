"""Pytest fixtures for MCP server tests.

Provides server and client fixtures for in-process protocol testing.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
from fastmcp import Client, FastMCP


@pytest.fixture
def mcp_server() -> FastMCP:
    """Create MCP server instance for testing.

    Returns:
        Configured FastMCP server instance.
    """
    from .server import create_server

    return create_server()


@pytest.fixture
async def mcp_client(mcp_server: FastMCP) -> AsyncGenerator[Client, None]:
    """Create connected MCP client for testing.

    Args:
        mcp_server: The MCP server instance.

    Yields:
        Connected Client instance for testing.
    """
    async with Client(mcp_server) as client:
        yield client


@pytest.fixture
def two_primary_spec() -> dict:
    """View spec with two primary buttons, in wire form."""
    return {
        "viewId": "checkout",
        "components": [
            {
                "type": "Button",
                "props": {"label": "Pay", "variant": "primary", "size": "md", "disabled": False},
            },
            {
                "type": "Button",
                "props": {"label": "Save", "variant": "primary", "size": "md", "disabled": False},
            },
        ],
    }
