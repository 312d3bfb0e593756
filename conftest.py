"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Design model fixtures shared by unit and integration tests
- Global test configuration
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from dotenv import load_dotenv

from design_model.config import BUNDLED_MODEL_DIR
from design_model.model import DesignModel, load_base_model

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Mark MCP protocol tests as integration-tier as well.

    `python . test --integration` then covers every test that crosses a
    process-level boundary (client/server, CLI).
    """
    for item in items:
        if "mcp" in item.keywords:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def bundled_model_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against the bundled design model.

    A developer .env may point DESIGN_MODEL_DIR elsewhere; tests that need
    a custom directory set it explicitly.
    """
    monkeypatch.delenv("DESIGN_MODEL_DIR", raising=False)


# =============================================================================
# Design Model Fixtures
# =============================================================================


@pytest.fixture
def base_model() -> DesignModel:
    """Design model freshly loaded from the bundled stores."""
    return load_base_model(BUNDLED_MODEL_DIR)


@pytest.fixture
def model_dir(tmp_path: Path) -> Path:
    """Writable copy of the bundled store directory."""
    target = tmp_path / "model"
    shutil.copytree(BUNDLED_MODEL_DIR, target)
    return target
