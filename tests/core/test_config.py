"""
Tests for environment-driven settings.
"""

import dataclasses
import pytest


class TestEvolutionSettings:
    """Tests for EvolutionSettings."""

    def test_defaults(self):
        """Test values with no environment overrides."""
        from schema_evolution.core import get_settings

        settings = get_settings()

        assert settings.default_compatibility == "BACKWARD"
        assert settings.default_draft == "draft-07"
        assert settings.allow_breaking_changes is False
        assert settings.strict_mode is False
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"

    def test_environment_overrides(self, monkeypatch):
        """Test reading every variable from the environment."""
        from schema_evolution.core import EvolutionSettings

        monkeypatch.setenv("SCHEMA_EVOLUTION_COMPATIBILITY", "full_transitive")
        monkeypatch.setenv("SCHEMA_EVOLUTION_DRAFT", "draft-2020-12")
        monkeypatch.setenv("SCHEMA_EVOLUTION_ALLOW_BREAKING", "yes")
        monkeypatch.setenv("SCHEMA_EVOLUTION_STRICT", "1")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "Console")

        settings = EvolutionSettings.from_env()

        assert settings.default_compatibility == "FULL_TRANSITIVE"
        assert settings.default_draft == "draft-2020-12"
        assert settings.allow_breaking_changes is True
        assert settings.strict_mode is True
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "console"

    @pytest.mark.parametrize("raw, expected", [
        ("true", True),
        ("ON", True),
        ("false", False),
        ("0", False),
        ("", False),
    ])
    def test_flag_parsing(self, monkeypatch, raw, expected):
        """Test boolean flag values."""
        from schema_evolution.core import get_settings

        monkeypatch.setenv("SCHEMA_EVOLUTION_ALLOW_BREAKING", raw)

        assert get_settings().allow_breaking_changes is expected

    def test_settings_are_frozen(self):
        """Test that settings cannot be mutated."""
        from schema_evolution.core import EvolutionSettings

        settings = EvolutionSettings()

        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.strict_mode = True

    def test_to_dict(self):
        """Test dictionary rendering."""
        from schema_evolution.core import EvolutionSettings

        data = EvolutionSettings(strict_mode=True).to_dict()

        assert data["strict_mode"] is True
        assert data["default_compatibility"] == "BACKWARD"
        assert set(data) == {
            "default_compatibility",
            "default_draft",
            "allow_breaking_changes",
            "strict_mode",
            "log_level",
            "log_format",
        }
