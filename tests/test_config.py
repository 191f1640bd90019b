"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from py_voronoi.config import Settings, get_settings


class TestSettings:
    """Test settings defaults and overrides."""

    def test_defaults(self):
        """Test the built-in defaults."""
        settings = Settings()
        assert settings.default_width == 800
        assert settings.default_height == 800
        assert settings.default_site_count == 50
        assert settings.default_seed == 42
        assert settings.output_prefix == "output_voronoi_"
        assert settings.output_format == "png"
        assert settings.workers is None
        assert settings.log_format == "plain"

    def test_environment_override(self, monkeypatch):
        """Test that VORONOI_* variables override defaults."""
        monkeypatch.setenv("VORONOI_DEFAULT_WIDTH", "320")
        monkeypatch.setenv("VORONOI_WORKERS", "3")
        monkeypatch.setenv("VORONOI_LOG_LEVEL", "debug")

        settings = get_settings()
        assert settings.default_width == 320
        assert settings.workers == 3
        assert settings.log_level == "DEBUG"

    def test_env_file(self, tmp_path):
        """Test that a .env file in the working directory is read."""
        (tmp_path / ".env").write_text("VORONOI_OUTPUT_FORMAT=bmp\nUNRELATED=1\n")
        assert get_settings().output_format == "bmp"

    @pytest.mark.parametrize("key,value", [
        ("VORONOI_DEFAULT_WIDTH", "0"),
        ("VORONOI_DEFAULT_SITE_COUNT", "-1"),
        ("VORONOI_WORKERS", "0"),
        ("VORONOI_LOG_FORMAT", "xml"),
    ])
    def test_invalid_values(self, monkeypatch, key, value):
        """Test that invalid values are rejected."""
        monkeypatch.setenv(key, value)
        with pytest.raises(ValidationError):
            get_settings()

    def test_import_does_not_read_environment(self, monkeypatch):
        """Test that a bad environment only fails when settings are loaded."""
        import importlib

        import py_voronoi.config as config_package
        import py_voronoi.config.config as config_module

        monkeypatch.setenv("VORONOI_DEFAULT_WIDTH", "0")
        importlib.reload(config_module)

        assert not hasattr(config_package, "settings")
        assert not hasattr(config_module, "settings")
        with pytest.raises(ValidationError):
            config_module.get_settings()
