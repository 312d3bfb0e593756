"""Tests for the design-model CLI commands."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def _cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        timeout=60,
    )


@pytest.mark.integration
def test_help_lists_commands():
    """--help should list every top-level command."""
    result = _cli("--help")
    assert result.returncode == 0
    for command in ("resolve", "model", "mcp", "test"):
        assert command in result.stdout


@pytest.mark.integration
def test_unknown_command_fails():
    """Unknown commands exit non-zero."""
    assert _cli("render").returncode == 1


@pytest.mark.integration
def test_resolve_prints_view():
    """resolve should print the resolved view as JSON."""
    result = _cli("resolve", 'Create a ghost button "Cancel"', "--view-id", "dialog")
    assert result.returncode == 0

    view = json.loads(result.stdout)
    assert view["viewId"] == "dialog"
    assert view["nodes"][0]["props"]["label"] == "Cancel"
    assert view["nodes"][0]["styles"]["backgroundColor"] == "transparent"


@pytest.mark.integration
def test_resolve_blocked_exit_code():
    """A blocked view exits 1 and reports the violation."""
    result = _cli("resolve", "Create two primary buttons", "--enable", "onlyOnePrimaryPerView")
    assert result.returncode == 1

    view = json.loads(result.stdout)
    assert view["nodes"] == []
    assert view["violations"][0]["constraintId"] == "onlyOnePrimaryPerView"


@pytest.mark.integration
def test_resolve_auto_fix():
    """--auto-fix repairs the view and reports the applied patch."""
    result = _cli(
        "resolve",
        "Create two primary buttons",
        "-e",
        "onlyOnePrimaryPerView",
        "--auto-fix",
        "--strategy",
        "first",
    )
    assert result.returncode == 0

    payload = json.loads(result.stdout)
    assert payload["suggestedFixes"][0]["path"] == "/components/0/props/variant"
    assert payload["finalViolations"] == []


@pytest.mark.integration
def test_resolve_rejects_bad_flag():
    """Flags other than true/false are rejected."""
    result = _cli("resolve", "Create a button", "--enable", "disabledOpacity=maybe")
    assert result.returncode == 1
    assert "Invalid flag" in result.stderr


@pytest.mark.integration
def test_resolve_missing_model_dir(tmp_path):
    """A model directory without store files is reported, not raised."""
    result = _cli("resolve", "Create a button", "--model-dir", str(tmp_path))
    assert result.returncode == 1
    assert "Design model file not found" in result.stderr


@pytest.mark.integration
def test_model_show():
    """model show dumps tokens, contract and raw constraint rules."""
    result = _cli("model", "show")
    assert result.returncode == 0

    payload = json.loads(result.stdout)
    assert payload["contract"]["component"] == "Button"
    assert payload["constraints"]["disabledOpacity"] == 0.4


@pytest.mark.integration
def test_model_templates():
    """model templates lists every authorable constraint."""
    result = _cli("model", "templates")
    assert result.returncode == 0
    assert "onlyOnePrimaryPerView [toggle]" in result.stdout
    assert "disabledOpacity [numeric]" in result.stdout


@pytest.mark.integration
def test_mcp_info():
    """mcp info shows the four tools."""
    result = _cli("mcp", "info")
    assert result.returncode == 0
    for tool in ("getDesignModel", "validate", "suggestFixes", "applyFixes"):
        assert tool in result.stdout
