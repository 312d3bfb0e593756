"""CLI entry point for design-model.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the appropriate submodules or runs specific tasks.
"""

import argparse
import json
import subprocess
import sys

from dotenv import load_dotenv

from design_model.config import get_design_model_dir, get_log_level, list_environment_variables
from design_model.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Resolve Command
# =============================================================================


def _parse_enable(values: list[str]) -> dict[str, bool]:
    """Turn repeated `--enable id[=true|false]` options into a flag map."""
    enabled: dict[str, bool] = {}
    for value in values:
        constraint_id, _, flag = value.partition("=")
        flag = flag.strip().lower() or "true"
        if flag not in ("true", "false"):
            raise ValueError(f"Invalid flag for {constraint_id}: {flag}")
        enabled[constraint_id.strip()] = flag == "true"
    return enabled


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the resolve command."""
    from design_model.fixes import STRATEGIES
    from design_model.model import DesignModelError, get_base_model, load_base_model
    from design_model.pipeline import run, run_with_auto_fix
    from design_model.schema import to_wire

    try:
        enabled = _parse_enable(args.enable)
        model = load_base_model(args.model_dir) if args.model_dir else get_base_model()
    except (ValueError, DesignModelError) as e:
        logger.error(str(e))
        return 1

    if args.auto_fix:
        result = run_with_auto_fix(
            args.prompt,
            args.view_id,
            enabled,
            model=model,
            strategy=STRATEGIES[args.strategy],
        )
        print(json.dumps(result.to_dict(), indent=2))
        return 0 if result.valid else 1

    resolved = run(args.prompt, args.view_id, enabled, model=model)
    print(json.dumps(to_wire(resolved), indent=2))
    return 1 if resolved.is_blocked else 0


def handle_resolve_command(argv: list[str]) -> int:
    """Handle resolve commands.

    Usage:
        python . resolve "Create two primary buttons"
        python . resolve "Create two primary buttons" --enable onlyOnePrimaryPerView
        python . resolve "Create two primary buttons" --enable onlyOnePrimaryPerView --auto-fix
    """
    from design_model.fixes import STRATEGIES

    parser = argparse.ArgumentParser(
        prog="python . resolve",
        description="Resolve a prompt into styled Button nodes",
    )
    parser.add_argument("prompt", help="Free-form request, e.g. 'Create a ghost button'")
    parser.add_argument(
        "--view-id",
        default="demo",
        help="View identifier (default: demo)",
    )
    parser.add_argument(
        "--enable",
        "-e",
        action="append",
        default=[],
        metavar="ID[=true|false]",
        help="Enable or disable a constraint (repeatable)",
    )
    parser.add_argument(
        "--auto-fix",
        action="store_true",
        help="Validate, repair and re-validate before resolving",
    )
    parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        default="second",
        help="Which primaries are downgraded during repair (default: second)",
    )
    parser.add_argument(
        "--model-dir",
        default=None,
        help="Directory holding tokens, contract and rules files",
    )

    args = parser.parse_args(argv)
    return cmd_resolve(args)


# =============================================================================
# Model Command
# =============================================================================


def cmd_model_show(_args: argparse.Namespace) -> int:
    """Print the loaded design model as JSON."""
    from design_model.model import DesignModelError, get_base_model

    try:
        model = get_base_model()
    except DesignModelError as e:
        logger.error(str(e))
        return 1

    payload = {
        "directory": str(get_design_model_dir()),
        "tokens": model.tokens.to_dict(),
        "contract": model.contract.model_dump(mode="json", exclude_none=True),
        "constraints": model.constraints.to_raw(),
    }
    print(json.dumps(payload, indent=2))
    return 0


def cmd_model_templates(_args: argparse.Namespace) -> int:
    """List the authorable constraint templates."""
    from design_model.model import CONSTRAINT_TEMPLATES

    print("Constraint Templates")
    print("=" * 40)
    for template in CONSTRAINT_TEMPLATES:
        default = "" if template.default_value is None else f" (default: {template.default_value})"
        print(f"  {template.id} [{template.kind}]{default}")
        print(f"      {template.label}")
    return 0


def cmd_model_env(_args: argparse.Namespace) -> int:
    """List the environment variables design-model reads."""
    for var in list_environment_variables():
        config = var.value
        print(f"  {config.name:<20} [{config.category}] default={config.default!r}")
        print(f"      {config.description}")
    return 0


def handle_model_command(argv: list[str]) -> int:
    """Handle design model commands.

    Usage:
        python . model show        # Dump tokens, contract and rules
        python . model templates   # List constraint templates
        python . model env         # List environment variables
    """
    parser = argparse.ArgumentParser(
        prog="python . model",
        description="Inspect the design model",
    )
    subparsers = parser.add_subparsers(dest="subcommand", help="Model commands")

    show_parser = subparsers.add_parser("show", help="Dump the loaded design model")
    show_parser.set_defaults(func=cmd_model_show)

    templates_parser = subparsers.add_parser("templates", help="List constraint templates")
    templates_parser.set_defaults(func=cmd_model_templates)

    env_parser = subparsers.add_parser("env", help="List environment variables")
    env_parser.set_defaults(func=cmd_model_env)

    args = parser.parse_args(argv)
    if not args.subcommand:
        parser.print_help()
        return 1
    return args.func(args)


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --mcp          # Run MCP protocol tests
        python . test --integration  # Run end-to-end tests
        python . test -k "resolve"   # Run tests matching pattern

    Test Tiers:
        unit        - Fast tests with no I/O beyond the bundled model
        mcp         - In-process MCP client round trips
        integration - Prompt-to-view scenarios and the CLI
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--mcp": ["-m", "mcp"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# MCP Command
# =============================================================================


def handle_mcp_command(argv: list[str]) -> int:
    """Handle MCP server commands.

    Usage:
        python . mcp run              # Start in STDIO mode
        python . mcp serve            # Start in HTTP mode
        python . mcp serve --port 8080
        python . mcp info             # Show server info
    """
    if not argv:
        print("MCP Server Commands")
        print("\nUsage: python . mcp {command} [options]")
        print("\nCommands:")
        print("  run                 Start server in STDIO mode")
        print("  serve               Start server in HTTP mode")
        print("  info                Show server information")
        print("\nOptions for 'serve':")
        print("  --host HOST         Bind address (default: MCP_HOST or 0.0.0.0)")
        print("  --port PORT         Port number (default: MCP_PORT or 18090)")
        print("  --transport TYPE    Transport: http or sse (default: http)")
        print("\nExamples:")
        print("  python . mcp run                    # STDIO for desktop agents")
        print("  python . mcp serve                  # HTTP on port 18090")
        print("  python . mcp serve --port 8080      # HTTP on custom port")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    if subcommand == "run":
        from design_model.mcp import ServerConfig, TransportType, run_server

        logger.info("Starting MCP server in STDIO mode...")
        run_server(ServerConfig.from_env(transport=TransportType.STDIO))
        return 0

    elif subcommand == "serve":
        from design_model.mcp import ServerConfig, TransportType, run_server

        parser = argparse.ArgumentParser(prog="python . mcp serve")
        parser.add_argument("--host")
        parser.add_argument("--port", type=int)
        parser.add_argument(
            "--transport",
            choices=[TransportType.HTTP.value, TransportType.SSE.value],
            default=TransportType.HTTP.value,
        )
        args = parser.parse_args(subargs)
        config = ServerConfig.from_env(
            transport=TransportType(args.transport), host=args.host, port=args.port
        )

        logger.info(f"Starting MCP server in {config.transport.value} mode...")
        logger.info(f"Listening on {config.host}:{config.port}")
        run_server(config)
        return 0

    elif subcommand == "info":
        from design_model.mcp import get_server_capabilities, get_server_version

        print("Design Model MCP Server")
        print("=" * 40)
        print(f"Version: {get_server_version()}")
        print("\nCapabilities:")
        for cap, enabled in get_server_capabilities().items():
            status = "enabled" if enabled else "disabled"
            print(f"  {cap}: {status}")
        print("\nAvailable Tools:")
        print("  - getDesignModel: Tokens, contract and constraint flags")
        print("  - validate: Check a view spec against enabled constraints")
        print("  - suggestFixes: JSON-patch repairs for violations")
        print("  - applyFixes: Apply repairs to a view spec")
        return 0

    else:
        logger.error(f"Unknown mcp command: {subcommand}")
        return handle_mcp_command([])


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Design Model ===")
    print("  resolve    Resolve a prompt into styled Button nodes")
    print("  model      Inspect tokens, contract, rules and templates")
    print("\n=== MCP Server ===")
    print("  mcp        Run MCP server (STDIO or HTTP mode)")
    print("\n=== Development ===")
    print("  test       Run the test suite")
    print("\nExamples:")
    print('  python . resolve "Create a ghost button \\"Cancel\\""')
    print('  python . resolve "Create two primary buttons" -e onlyOnePrimaryPerView --auto-fix')
    print("  python . model show")
    print("  python . model templates")
    print("  python . mcp run                    # Start STDIO server")
    print("  python . mcp serve                  # Start HTTP server on port 18090")
    print("  python . test --unit                # Run unit tests")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    command = argv[0]
    rest_args = argv[1:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "resolve": lambda: handle_resolve_command(rest_args),
        "model": lambda: handle_model_command(rest_args),
        "mcp": lambda: handle_mcp_command(rest_args),
        "test": lambda: cmd_test(rest_args),
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
