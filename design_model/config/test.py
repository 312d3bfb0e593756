"""Tests for configuration management."""

from pathlib import Path

import pytest

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

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MCP_PORT", raising=False)
        assert get_environment(EnvVar.MCP_PORT) == 18090

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("MCP_PORT", "9999")
        assert get_environment(EnvVar.MCP_PORT, override=5000) == 5000

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("MCP_PORT", "8080")
        result = get_environment(EnvVar.MCP_PORT)
        assert result == 8080
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("MCP_PORT", "not-a-number")
        assert get_environment(EnvVar.MCP_PORT) == 18090

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean conversion accepts the usual spellings."""
        for value in ("false", "0", "no", "FALSE"):
            monkeypatch.setenv("MCP_MASK_ERRORS", value)
            assert get_environment(EnvVar.MCP_MASK_ERRORS) is False
        for value in ("true", "1", "Yes"):
            monkeypatch.setenv("MCP_MASK_ERRORS", value)
            assert get_environment(EnvVar.MCP_MASK_ERRORS) is True

    @pytest.mark.unit
    def test_unparseable_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean spellings fall back to the default."""
        monkeypatch.setenv("MCP_MASK_ERRORS", "maybe")
        assert get_environment(EnvVar.MCP_MASK_ERRORS) is True

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch, tmp_path):
        """Path variables convert to Path objects."""
        monkeypatch.setenv("DESIGN_MODEL_DIR", str(tmp_path))
        result = get_environment(EnvVar.DESIGN_MODEL_DIR)
        assert isinstance(result, Path)
        assert result == tmp_path


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.MCP_PORT)
        assert isinstance(info, EnvConfig)
        assert info.name == "MCP_PORT"
        assert info.var_type is int
        assert info.category == "service"

    @pytest.mark.unit
    def test_every_variable_is_described(self):
        """All variables carry a description."""
        for var in EnvVar:
            assert get_environment_info(var).description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_list_all(self):
        """Returns every variable without a filter."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Category filter narrows the list."""
        service = list_environment_variables("service")
        assert EnvVar.MCP_PORT in service
        assert EnvVar.DESIGN_MODEL_DIR not in service


class TestConvenienceFunctions:
    """Tests for path and level helpers."""

    @pytest.mark.unit
    def test_design_model_dir_defaults_to_bundled(self, monkeypatch):
        """Bundled data is used when nothing is configured."""
        monkeypatch.delenv("DESIGN_MODEL_DIR", raising=False)
        assert get_design_model_dir() == BUNDLED_MODEL_DIR
        assert (BUNDLED_MODEL_DIR / "tokens.json").exists()

    @pytest.mark.unit
    def test_design_model_dir_from_env(self, monkeypatch, tmp_path):
        """Environment variable redirects the store directory."""
        monkeypatch.setenv("DESIGN_MODEL_DIR", str(tmp_path))
        assert get_design_model_dir() == tmp_path

    @pytest.mark.unit
    def test_design_model_dir_override(self, tmp_path):
        """Explicit override wins."""
        assert get_design_model_dir(str(tmp_path)) == tmp_path

    @pytest.mark.unit
    def test_log_level_uppercased(self, monkeypatch):
        """Log level is normalized to upper case."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"
