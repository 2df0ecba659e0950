"""
haptic-wavemem Configuration
============================

This module handles configuration loading for the waveform memory compiler.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    HAPTIC_WIRE_MAPPING   -> compiler.wire_mapping
    HAPTIC_OUTPUT_FORMAT  -> compiler.output_format
    HAPTIC_LOG_LEVEL      -> logging.level
    HAPTIC_LOG_FORMAT     -> logging.format

Example:
    from haptic_wavemem.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.compiler.wire_mapping)
"""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from haptic_wavemem.models.levels import WIRE_MAPPINGS, WireMapping, get_wire_mapping


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class CompilerConfig(BaseModel):
    """Waveform compiler configuration."""

    wire_mapping: str = Field(
        default="attenuation",
        description="Gain/timebase wire value profile: 'attenuation' or 'ordinal'",
    )
    output_format: Literal["bin", "hex"] = Field(
        default="bin",
        description="Output format when writing compiled memory to a file",
    )

    @field_validator("wire_mapping")
    @classmethod
    def validate_wire_mapping(cls, v: str) -> str:
        """Ensure the profile exists."""
        if v not in WIRE_MAPPINGS:
            raise ValueError(
                f"wire_mapping must be one of: {', '.join(sorted(WIRE_MAPPINGS))}"
            )
        return v

    @property
    def mapping(self) -> WireMapping:
        return get_wire_mapping(self.wire_mapping)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for haptic-wavemem.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Compiler settings
    if env_mapping := os.environ.get("HAPTIC_WIRE_MAPPING"):
        config_data.setdefault("compiler", {})["wire_mapping"] = env_mapping
    if env_format := os.environ.get("HAPTIC_OUTPUT_FORMAT"):
        config_data.setdefault("compiler", {})["output_format"] = env_format

    # Logging settings
    if env_log := os.environ.get("HAPTIC_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_log_format := os.environ.get("HAPTIC_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_log_format


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.WARNING)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
