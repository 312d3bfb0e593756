"""Unit tests for the MCP server module.

Tests cover:
- Server configuration
- Tool implementations (argument validation and results)
- MCP protocol round trips through an in-process client
"""

import json

import pytest
from fastmcp.exceptions import ToolError

from design_model.model import get_base_model

from .lib import (
    ServerConfig,
    TransportType,
    get_server_capabilities,
    get_server_version,
)
from .server import create_server, main, mcp, run_server
from .tools import (
    InvalidParamsError,
    apply_view_fixes,
    get_design_model,
    suggest_view_fixes,
    validate_view,
)

TOOL_NAMES = {"getDesignModel", "validate", "suggestFixes", "applyFixes"}


def _payload(result) -> dict:
    """Decode the JSON text content of a tool result."""
    return json.loads(result.content[0].text)


# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        """Default config has expected values."""
        config = ServerConfig()

        assert config.transport == TransportType.STDIO
        assert config.host == "0.0.0.0"
        assert config.port == 18090
        assert config.path == "/mcp"

    @pytest.mark.unit
    def test_from_env(self, monkeypatch):
        """from_env reads host and port."""
        monkeypatch.setenv("MCP_HOST", "127.0.0.1")
        monkeypatch.setenv("MCP_PORT", "9100")

        config = ServerConfig.from_env(transport=TransportType.HTTP)

        assert config.transport == TransportType.HTTP
        assert config.host == "127.0.0.1"
        assert config.port == 9100

    @pytest.mark.unit
    def test_from_env_overrides(self, monkeypatch):
        """Explicit host and port win over the environment."""
        monkeypatch.setenv("MCP_HOST", "127.0.0.1")
        monkeypatch.setenv("MCP_PORT", "9100")

        config = ServerConfig.from_env(host="localhost", port=8080)

        assert config.host == "localhost"
        assert config.port == 8080

    @pytest.mark.unit
    def test_transport_from_string(self):
        """Transport can be created from string."""
        assert TransportType("stdio") == TransportType.STDIO
        assert TransportType("http") == TransportType.HTTP
        assert TransportType("sse") == TransportType.SSE


class TestRunServer:
    """Tests for run_server() and main() transport wiring."""

    @pytest.fixture
    def run_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(mcp, "run", lambda **kwargs: calls.append(kwargs))
        return calls

    @pytest.mark.unit
    def test_http_uses_config_path(self, run_calls):
        """HTTP transport binds the configured host, port and path."""
        config = ServerConfig(
            transport=TransportType.HTTP, host="127.0.0.1", port=9100, path="/design"
        )
        run_server(config)
        assert run_calls == [
            {"transport": "http", "host": "127.0.0.1", "port": 9100, "path": "/design"}
        ]

    @pytest.mark.unit
    def test_stdio_default(self, run_calls):
        """Without a config the server runs over STDIO."""
        run_server()
        assert run_calls == [{}]

    @pytest.mark.unit
    def test_main_builds_config(self, run_calls, monkeypatch):
        """main() combines CLI flags with environment defaults."""
        monkeypatch.setenv("MCP_HOST", "127.0.0.1")
        assert main(["--transport", "sse", "--port", "9200"]) == 0
        assert run_calls == [{"transport": "sse", "host": "127.0.0.1", "port": 9200}]


class TestServerUtilities:
    """Tests for server utility functions."""

    @pytest.mark.unit
    def test_get_server_version(self):
        """Server version is a valid semver string."""
        assert len(get_server_version().split(".")) >= 2

    @pytest.mark.unit
    def test_get_server_capabilities(self):
        """Only tools are advertised."""
        caps = get_server_capabilities()
        assert caps["tools"] is True
        assert caps["resources"] is False

    @pytest.mark.unit
    def test_create_server_returns_mcp(self):
        """create_server returns the module instance."""
        assert create_server() is mcp
        assert mcp.name == "design-model"

    @pytest.mark.unit
    def test_main_rejects_unknown_transport(self):
        """argparse rejects transports outside the enum."""
        with pytest.raises(SystemExit):
            main(["--transport", "websocket"])


# =============================================================================
# Tool Implementation Tests (no MCP protocol)
# =============================================================================


class TestGetDesignModel:
    """Tests for getDesignModel."""

    @pytest.mark.unit
    def test_shape(self):
        """Returns tokens, contract and enabled flags."""
        result = get_design_model()
        assert result["tokens"]["color"]["primary"] == "#0284c7"
        assert result["contracts"]["component"] == "Button"
        assert result["contracts"]["props"]["size"]["enum"] == ["sm", "md"]

    @pytest.mark.unit
    def test_enabled_flags_follow_active(self):
        """Numeric rules are enabled when a value is set."""
        flags = get_design_model()["constraints"]["enabledConstraints"]
        assert flags == {
            "onlyOnePrimaryPerView": False,
            "ghostHasNoBackground": True,
            "secondaryUsesSurface": True,
            "disabledOpacity": True,
        }


class TestValidateTool:
    """Tests for validate."""

    @pytest.mark.unit
    def test_violation_reported(self, two_primary_spec):
        """Two primaries violate the enabled constraint."""
        result = validate_view(two_primary_spec, {"onlyOnePrimaryPerView": True})
        assert result["valid"] is False
        assert result["violations"][0]["constraintId"] == "onlyOnePrimaryPerView"
        assert result["violations"][0]["nodeIds"] == ["button-0", "button-1"]

    @pytest.mark.unit
    def test_valid_spec(self, two_primary_spec):
        """Without the constraint the spec is valid."""
        result = validate_view(two_primary_spec, {})
        assert result == {"valid": True, "violations": [], "appliedConstraints": []}

    @pytest.mark.unit
    def test_input_not_mutated(self, two_primary_spec):
        """The caller's payload is untouched."""
        snapshot = json.dumps(two_primary_spec, sort_keys=True)
        validate_view(two_primary_spec, {"onlyOnePrimaryPerView": True})
        assert json.dumps(two_primary_spec, sort_keys=True) == snapshot

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("view_spec", "enabled", "match"),
        [
            (None, {}, "viewSpec is required"),
            ({"viewId": "v"}, None, "enabledConstraints is required"),
            ([], {}, "viewSpec must be an object"),
            ({"components": []}, {}, "viewSpec is malformed"),
            ({"viewId": "v", "components": "x"}, {}, "viewSpec is malformed"),
            ({"viewId": "v"}, {"onlyOnePrimaryPerView": "yes"}, "must be a boolean"),
        ],
    )
    def test_invalid_params(self, view_spec, enabled, match):
        """Malformed calls raise InvalidParamsError."""
        with pytest.raises(InvalidParamsError, match=match) as excinfo:
            validate_view(view_spec, enabled)
        assert str(excinfo.value).startswith("Invalid params:")
        assert isinstance(excinfo.value, ToolError)


class TestSuggestFixesTool:
    """Tests for suggestFixes."""

    @pytest.mark.unit
    def test_flattened_patches(self, two_primary_spec):
        """Violations turn into one replace patch."""
        enabled = {"onlyOnePrimaryPerView": True}
        violations = validate_view(two_primary_spec, enabled)["violations"]
        result = suggest_view_fixes(two_primary_spec, enabled, violations)
        assert result == {
            "fixes": [
                {"op": "replace", "path": "/components/1/props/variant", "value": "secondary"}
            ]
        }

    @pytest.mark.unit
    def test_zero_primary_limit(self, two_primary_spec):
        """A stored maximum of zero targets every primary."""
        strict = get_base_model().with_overrides(
            constraints={"maxPrimaryButtonsPerView": 0}
        )
        violations = validate_view(two_primary_spec, {}, model=strict)["violations"]
        assert violations[0]["constraintId"] == "maxPrimaryButtonsPerView"

        result = suggest_view_fixes(two_primary_spec, {}, violations, model=strict)
        assert [fix["path"] for fix in result["fixes"]] == [
            "/components/0/props/variant",
            "/components/1/props/variant",
        ]

    @pytest.mark.unit
    def test_no_violations_no_fixes(self, two_primary_spec):
        """Empty violations give empty fixes."""
        assert suggest_view_fixes(two_primary_spec, {}, []) == {"fixes": []}

    @pytest.mark.unit
    def test_missing_violations(self, two_primary_spec):
        """violations is required."""
        with pytest.raises(InvalidParamsError, match="violations is required"):
            suggest_view_fixes(two_primary_spec, {}, None)

    @pytest.mark.unit
    def test_malformed_violation(self, two_primary_spec):
        """Violation items must carry code and message."""
        with pytest.raises(InvalidParamsError, match=r"violations\[0\]"):
            suggest_view_fixes(two_primary_spec, {}, [{"constraintId": "x"}])


class TestApplyFixesTool:
    """Tests for applyFixes."""

    @pytest.mark.unit
    def test_applies_patch(self, two_primary_spec):
        """The returned spec carries the change; outcomes report it."""
        fixes = [{"op": "replace", "path": "/components/1/props/variant", "value": "secondary"}]
        result = apply_view_fixes(two_primary_spec, fixes)
        assert result["viewSpec"]["components"][1]["props"]["variant"] == "secondary"
        assert result["viewSpec"]["viewId"] == "checkout"
        assert result["outcomes"][0]["status"] == "applied"
        assert two_primary_spec["components"][1]["props"]["variant"] == "primary"

    @pytest.mark.unit
    def test_noop_reported(self, two_primary_spec):
        """Out-of-range patches are reported, not raised."""
        fixes = [{"op": "replace", "path": "/components/7/props/variant", "value": "ghost"}]
        result = apply_view_fixes(two_primary_spec, fixes)
        assert result["outcomes"][0]["status"] == "noop"
        assert result["viewSpec"]["components"][1]["props"]["variant"] == "primary"

    @pytest.mark.unit
    def test_non_ascii_index_is_noop(self, two_primary_spec):
        """Unicode digits in the index are not component positions."""
        fixes = [{"op": "replace", "path": "/components/²/props/variant", "value": "ghost"}]
        result = apply_view_fixes(two_primary_spec, fixes)
        assert result["outcomes"][0]["status"] == "noop"
        assert "invalid component index" in result["outcomes"][0]["reason"]

    @pytest.mark.unit
    def test_unknown_op_invalid(self, two_primary_spec):
        """Ops outside the patch vocabulary are malformed params."""
        with pytest.raises(InvalidParamsError, match=r"fixes\[0\]"):
            apply_view_fixes(two_primary_spec, [{"op": "merge", "path": "/x"}])


# =============================================================================
# MCP Protocol Integration Tests
# =============================================================================


@pytest.mark.mcp
class TestMCPProtocol:
    """Round trips through an in-process MCP client."""

    @pytest.mark.asyncio
    async def test_lists_exactly_four_tools(self, mcp_client):
        """Only the four design-model tools are exposed."""
        tools = await mcp_client.list_tools()
        assert {t.name for t in tools} == TOOL_NAMES

    @pytest.mark.asyncio
    async def test_validate_requires_arguments(self, mcp_client):
        """validate declares its required arguments."""
        tools = {t.name: t for t in await mcp_client.list_tools()}
        required = set(tools["validate"].inputSchema.get("required", []))
        assert required == {"viewSpec", "enabledConstraints"}

    @pytest.mark.asyncio
    async def test_get_design_model(self, mcp_client):
        """getDesignModel returns the base model."""
        payload = _payload(await mcp_client.call_tool("getDesignModel", {}))
        assert payload["contracts"]["component"] == "Button"

    @pytest.mark.asyncio
    async def test_repair_round_trip(self, mcp_client, two_primary_spec):
        """validate -> suggestFixes -> applyFixes -> validate clears the violation."""
        enabled = {"onlyOnePrimaryPerView": True}
        first = _payload(
            await mcp_client.call_tool(
                "validate", {"viewSpec": two_primary_spec, "enabledConstraints": enabled}
            )
        )
        assert first["valid"] is False

        fixes = _payload(
            await mcp_client.call_tool(
                "suggestFixes",
                {
                    "viewSpec": two_primary_spec,
                    "enabledConstraints": enabled,
                    "violations": first["violations"],
                },
            )
        )["fixes"]
        patched = _payload(
            await mcp_client.call_tool(
                "applyFixes", {"viewSpec": two_primary_spec, "fixes": fixes}
            )
        )["viewSpec"]

        second = _payload(
            await mcp_client.call_tool(
                "validate", {"viewSpec": patched, "enabledConstraints": enabled}
            )
        )
        assert second["valid"] is True

    @pytest.mark.asyncio
    async def test_missing_argument_rejected(self, mcp_client, two_primary_spec):
        """A call without a required argument fails."""
        with pytest.raises(ToolError):
            await mcp_client.call_tool("validate", {"viewSpec": two_primary_spec})

    @pytest.mark.asyncio
    async def test_invalid_params_message(self, mcp_client):
        """Structural problems surface as invalid params."""
        with pytest.raises(ToolError, match="Invalid params"):
            await mcp_client.call_tool(
                "validate", {"viewSpec": {"components": []}, "enabledConstraints": {}}
            )
