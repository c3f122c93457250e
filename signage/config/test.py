"""Tests for configuration management."""


import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    get_canvas_bounds,
    get_environment,
    get_environment_info,
    get_proxy_url,
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
        monkeypatch.delenv("SIGNAGE_CANVAS_WIDTH", raising=False)
        assert get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH) == 1920

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("SIGNAGE_CANVAS_WIDTH", "9999")
        assert get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH, override=640) == 640

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("SIGNAGE_CANVAS_HEIGHT", "720")
        result = get_environment(EnvVar.SIGNAGE_CANVAS_HEIGHT)
        assert result == 720
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float variables parse from strings."""
        monkeypatch.setenv("SIGNAGE_TEMPERATURE", "0.25")
        assert get_environment(EnvVar.SIGNAGE_TEMPERATURE) == pytest.approx(0.25)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable ints return the default."""
        monkeypatch.setenv("SIGNAGE_MAX_TOKENS", "lots")
        assert get_environment(EnvVar.SIGNAGE_MAX_TOKENS) == 2048

    @pytest.mark.unit
    def test_invalid_float_falls_back_to_default(self, monkeypatch):
        """Unparseable and non-finite floats return the default."""
        monkeypatch.setenv("SIGNAGE_PROXY_TIMEOUT", "nan")
        assert get_environment(EnvVar.SIGNAGE_PROXY_TIMEOUT) == 60.0
        monkeypatch.setenv("SIGNAGE_PROXY_TIMEOUT", "soon")
        assert get_environment(EnvVar.SIGNAGE_PROXY_TIMEOUT) == 60.0

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("SIGNAGE_PROXY_URL", "https://proxy.example/api/generate")
        assert (
            get_environment(EnvVar.SIGNAGE_PROXY_URL)
            == "https://proxy.example/api/generate"
        )


class TestConvertValue:
    """Tests for the type conversion helper."""

    @pytest.mark.unit
    def test_bool_values(self):
        """Boolean strings convert, unknown strings fall back."""
        assert _convert_value("yes", bool, None) is True
        assert _convert_value("0", bool, None) is False
        assert _convert_value("maybe", bool, True) is True

    @pytest.mark.unit
    def test_none_returns_default(self):
        """Missing values use the default."""
        assert _convert_value(None, int, 7) == 7

    @pytest.mark.unit
    def test_unknown_type_returned_as_is(self):
        """Types without a converter pass the raw string through."""
        assert _convert_value("/tmp/x", bytes, None) == "/tmp/x"


class TestConvenienceFunctions:
    """Tests for helper functions built on get_environment."""

    @pytest.mark.unit
    def test_proxy_url_override(self, monkeypatch):
        """Explicit override wins over the environment."""
        monkeypatch.setenv("SIGNAGE_PROXY_URL", "https://env.example")
        assert get_proxy_url("https://arg.example") == "https://arg.example"

    @pytest.mark.unit
    def test_proxy_url_missing_raises(self, monkeypatch):
        """A missing proxy URL is a configuration error."""
        monkeypatch.delenv("SIGNAGE_PROXY_URL", raising=False)
        with pytest.raises(ValueError, match="SIGNAGE_PROXY_URL"):
            get_proxy_url()

    @pytest.mark.unit
    def test_canvas_bounds(self, monkeypatch):
        """Canvas bounds combine width and height settings."""
        monkeypatch.delenv("SIGNAGE_CANVAS_WIDTH", raising=False)
        monkeypatch.setenv("SIGNAGE_CANVAS_HEIGHT", "600")
        assert get_canvas_bounds() == (1920, 600)
        assert get_canvas_bounds(800, None) == (800, 600)


class TestIntrospection:
    """Tests for variable listing and metadata."""

    @pytest.mark.unit
    def test_info_is_env_config(self):
        """Every member carries an EnvConfig with a matching name."""
        for var in EnvVar:
            info = get_environment_info(var)
            assert isinstance(info, EnvConfig)
            assert info.name == var.name
            assert info.description

    @pytest.mark.unit
    def test_list_by_category(self):
        """Category filtering returns only matching variables."""
        canvas = list_environment_variables("canvas")
        assert EnvVar.SIGNAGE_CANVAS_WIDTH in canvas
        assert EnvVar.SIGNAGE_PROXY_URL not in canvas
        assert len(list_environment_variables()) == len(EnvVar)
