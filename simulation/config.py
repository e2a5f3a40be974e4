"""
Configuration module for the ATC simulation.

This module defines dataclasses for session options, providing defaults,
YAML loading and validation.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import (
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAP,
    DEFAULT_MAPS_DIR,
    DEFAULT_MAX_TURN_STEP,
    MAX_TURN_STEP_LIMIT,
)
from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = DEFAULT_LOG_LEVEL
    # The terminal is owned by the renderer, so logs go to a file
    file: Optional[str] = DEFAULT_LOG_FILE


@dataclass
class GameConfig:
    """Main configuration for a game session."""

    # Map selection
    map_name: str = DEFAULT_MAP
    maps_dir: str = DEFAULT_MAPS_DIR

    # Randomness
    seed: Optional[int] = None

    # Pacing overrides (None keeps the map's values)
    tick_rate: Optional[float] = None
    spawn_rate: Optional[int] = None

    # Turn-rate policy
    max_turn_step: int = DEFAULT_MAX_TURN_STEP

    # Optional JSONL recording of every tick
    record_path: Optional[str] = None

    logging_config: LoggingConfig = field(default_factory=LoggingConfig)

    # Unrecognised overrides
    custom_config: Dict[str, Any] = field(default_factory=dict)


def create_default_config(**overrides) -> GameConfig:
    """
    Create a default configuration with optional overrides.

    Args:
        **overrides: Configuration values to override

    Returns:
        GameConfig: Configured session settings

    Example:
        >>> config = create_default_config(
        ...     map_name="small",
        ...     seed=42,
        ...     level="DEBUG"
        ... )
    """
    config = GameConfig()

    for key, value in overrides.items():
        if hasattr(config, key):
            setattr(config, key, value)
        elif hasattr(config.logging_config, key):
            setattr(config.logging_config, key, value)
        else:
            config.custom_config[key] = value

    return config


def validate_config(config: GameConfig) -> bool:
    """
    Validate configuration for consistency and correctness.

    Args:
        config: Configuration to validate

    Returns:
        bool: True if configuration is valid

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if not config.map_name:
        raise ConfigurationError("map_name must not be empty")

    if config.tick_rate is not None and config.tick_rate <= 0:
        raise ConfigurationError("tick_rate must be positive")

    if config.spawn_rate is not None and config.spawn_rate <= 0:
        raise ConfigurationError("spawn_rate must be positive")

    if not 1 <= config.max_turn_step <= MAX_TURN_STEP_LIMIT:
        raise ConfigurationError(f"max_turn_step must be between 1 and {MAX_TURN_STEP_LIMIT}")

    if config.logging_config.level.upper() not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level: {config.logging_config.level}")

    return True


def load_config(config_path: str) -> GameConfig:
    """
    Load session configuration from a YAML file.

    The file has a ``game`` section with ``GameConfig`` fields and a
    ``logging`` section with ``level`` and ``file``.

    Args:
        config_path: Path to config YAML file

    Returns:
        GameConfig: Loaded configuration (not yet validated)

    Raises:
        ConfigurationError: If the file is missing or is not valid YAML
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {config_path} is not valid YAML: {e}") from e

    overrides = dict(config_dict.get('game') or {})
    overrides.update(config_dict.get('logging') or {})

    logger.info(f"Game config loaded from: {config_path}")

    return create_default_config(**overrides)
