"""
Configuration Tests
===================

Tests for YAML configuration loading and environment overrides.
"""

import pytest
from pydantic import ValidationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove HAPTIC_* variables so tests see file values only."""
    for name in (
        "HAPTIC_WIRE_MAPPING",
        "HAPTIC_OUTPUT_FORMAT",
        "HAPTIC_LOG_LEVEL",
        "HAPTIC_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path):
        from haptic_wavemem.config import load_config
        from haptic_wavemem.models.levels import ATTENUATION_MAPPING

        settings = load_config(str(tmp_path / "missing.yaml"))

        assert settings.compiler.wire_mapping == "attenuation"
        assert settings.compiler.mapping is ATTENUATION_MAPPING
        assert settings.compiler.output_format == "bin"
        assert settings.logging.level == "WARNING"

    def test_yaml_values(self, tmp_path):
        from haptic_wavemem.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text(
            "compiler:\n"
            "  wire_mapping: ordinal\n"
            "  output_format: hex\n"
            "logging:\n"
            "  level: DEBUG\n"
            "  format: json\n"
        )

        settings = load_config(str(path))

        assert settings.compiler.wire_mapping == "ordinal"
        assert settings.compiler.output_format == "hex"
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "json"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Environment variables take precedence over the file."""
        from haptic_wavemem.config import load_config
        from haptic_wavemem.models.levels import ORDINAL_MAPPING

        path = tmp_path / "config.yaml"
        path.write_text("compiler:\n  wire_mapping: attenuation\n")
        monkeypatch.setenv("HAPTIC_WIRE_MAPPING", "ordinal")
        monkeypatch.setenv("HAPTIC_LOG_LEVEL", "INFO")

        settings = load_config(str(path))

        assert settings.compiler.mapping is ORDINAL_MAPPING
        assert settings.logging.level == "INFO"

    def test_unknown_mapping_rejected(self, tmp_path, monkeypatch):
        from haptic_wavemem.config import load_config

        monkeypatch.setenv("HAPTIC_WIRE_MAPPING", "reversed")

        with pytest.raises(ValidationError, match="wire_mapping"):
            load_config(str(tmp_path / "missing.yaml"))

    def test_unknown_output_format_rejected(self, tmp_path, monkeypatch):
        from haptic_wavemem.config import load_config

        monkeypatch.setenv("HAPTIC_OUTPUT_FORMAT", "srec")

        with pytest.raises(ValidationError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        from haptic_wavemem.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(str(path)).compiler.wire_mapping == "attenuation"
