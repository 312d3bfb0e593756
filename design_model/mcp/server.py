"""FastMCP server instance for design-model.

Exposes the validation and repair pipeline to agents as four tools:

    1. getDesignModel: tokens, contract and enabled constraint flags
    2. validate: check a view spec against enabled constraints
    3. suggestFixes: JSON-patch repairs for constraint violations
    4. applyFixes: apply repairs to a view spec

Usage:
    # STDIO mode
    python -m design_model.mcp.server

    # HTTP mode
    python -m design_model.mcp.server --transport http --port 18090

    # Via CLI
    python . mcp run
    python . mcp serve --port 18090
"""

import argparse
import logging
import sys
from typing import Any

from fastmcp import FastMCP

from design_model.config import EnvVar, get_environment, get_log_level
from design_model.core.log import setup_logging
from design_model.model import get_base_model

from . import tools
from .lib import ServerConfig, TransportType, get_server_version

logger = logging.getLogger(__name__)


# =============================================================================
# Server Instructions (LLM Guidance)
# =============================================================================

SERVER_INSTRUCTIONS = """\
## Design Model Server

Validates Button view specs against a design model (tokens, contract and
constraints) and proposes deterministic repairs.

### Workflow
1. `getDesignModel()` → tokens, contract, default constraint flags
2. `validate(viewSpec, enabledConstraints)` → violations
3. `suggestFixes(viewSpec, enabledConstraints, violations)` → JSON patches
4. `applyFixes(viewSpec, fixes)` → patched view spec and per-patch outcomes
5. `validate(...)` again to confirm the repair

### View Spec Shape
```
{"viewId": "checkout",
 "components": [{"type": "Button",
                 "props": {"label": "Pay", "variant": "primary",
                           "size": "md", "disabled": false}}]}
```
"""

# =============================================================================
# Server Instance
# =============================================================================

mcp = FastMCP(
    name="design-model",
    instructions=SERVER_INSTRUCTIONS,
    mask_error_details=get_environment(EnvVar.MCP_MASK_ERRORS),
)


# =============================================================================
# Tools
# =============================================================================


@mcp.tool(name="getDesignModel")
def get_design_model() -> dict[str, Any]:
    """Get the design model metadata.

    Returns:
        Dictionary with:
        - tokens: Design token tree
        - contracts: Button contract (allowed props and values)
        - constraints.enabledConstraints: Constraint id -> enabled flag
    """
    return tools.get_design_model()


@mcp.tool(name="validate")
def validate(
    viewSpec: dict[str, Any],  # noqa: N803
    enabledConstraints: dict[str, bool],  # noqa: N803
) -> dict[str, Any]:
    """Validate a view spec against enabled constraints (read-only).

    Args:
        viewSpec: The view spec: {viewId, components}.
        enabledConstraints: Constraint id -> enabled flag. Numeric
            constraints take their canonical value when enabled.

    Returns:
        Dictionary with valid, violations and appliedConstraints.
    """
    return tools.validate_view(viewSpec, enabledConstraints)


@mcp.tool(name="suggestFixes")
def suggest_fixes(
    viewSpec: dict[str, Any],  # noqa: N803
    enabledConstraints: dict[str, bool],  # noqa: N803
    violations: list[dict[str, Any]],
) -> dict[str, Any]:
    """Suggest fixes for constraint violations as JSON patch operations.

    Args:
        viewSpec: The view spec the violations were computed for.
        enabledConstraints: Constraint id -> enabled flag.
        violations: Violations returned by validate().

    Returns:
        Dictionary with fixes: ordered list of patch operations.
    """
    return tools.suggest_view_fixes(viewSpec, enabledConstraints, violations)


@mcp.tool(name="applyFixes")
def apply_fixes(
    viewSpec: dict[str, Any],  # noqa: N803
    fixes: list[dict[str, Any]],
) -> dict[str, Any]:
    """Apply JSON patch operations to a view spec.

    The input spec is not modified. Operations that cannot apply are
    reported in `outcomes` with status "noop" and a reason.

    Args:
        viewSpec: The view spec to patch.
        fixes: Patch operations from suggestFixes().

    Returns:
        Dictionary with the updated viewSpec and per-patch outcomes.
    """
    return tools.apply_view_fixes(viewSpec, fixes)


# =============================================================================
# Server Factory
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the MCP server instance.

    Returns:
        Configured FastMCP server instance.
    """
    return mcp


def log_startup_status() -> None:
    """Load the design model once and log what was found."""
    model = get_base_model()
    flags = model.constraints.enabled_flags()
    active = sorted(rule_id for rule_id, enabled in flags.items() if enabled)
    logger.info(
        f"Design model loaded: component={model.contract.component}, "
        f"sizes={list(model.constraints.size_map)}, active constraints={active}"
    )


def run_server(config: ServerConfig | None = None) -> None:
    """Run the MCP server with the configured transport.

    Args:
        config: Transport, bind address and HTTP path
            (default: ServerConfig.from_env()).
    """
    config = config or ServerConfig.from_env()
    transport = config.transport

    logger.info(f"Starting design-model server v{get_server_version()}")
    logger.info(f"Transport: {transport.value}")

    log_startup_status()

    if transport == TransportType.STDIO:
        logger.info("Running in STDIO mode")
        mcp.run()
    elif transport == TransportType.HTTP:
        logger.info(f"Running in HTTP mode at http://{config.host}:{config.port}{config.path}")
        mcp.run(
            transport="http",
            host=config.host,
            port=config.port,
            path=config.path,
        )
    elif transport == TransportType.SSE:
        logger.info(f"Running in SSE mode at http://{config.host}:{config.port}")
        mcp.run(
            transport="sse",
            host=config.host,
            port=config.port,
        )
    else:
        raise ValueError(f"Unknown transport: {transport}")


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for MCP server.

    Args:
        argv: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog="design-model",
        description="MCP server for design model validation and repair",
    )
    parser.add_argument(
        "--transport",
        "-t",
        type=str,
        choices=[t.value for t in TransportType],
        default=TransportType.STDIO.value,
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address for HTTP/SSE (default: MCP_HOST or 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port for HTTP/SSE (default: MCP_PORT or 18090)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    # Logs go to stderr; stdout carries the STDIO protocol
    setup_logging(logging.DEBUG if args.verbose else get_log_level(), stream=sys.stderr)

    run_server(
        ServerConfig.from_env(
            transport=TransportType(args.transport),
            host=args.host,
            port=args.port,
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
