"""
Configuration loader for the Rectification module.

Loads and validates configuration from config.yaml file.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from src.rectification.types import (
    OrderingConfig,
    OrderingMethod,
    RectificationConfig,
    WarpConfig,
)
from src.utils.constants import INTERPOLATION_FLAGS

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> RectificationConfig:
    """
    Load rectification configuration from YAML file.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Validated RectificationConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid or missing required fields.

    Example:
        >>> config = load_config()
        >>> print(config.ordering.method)
        OrderingMethod.CENTROID_SPLIT
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading rectification config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f)

    try:
        config = _parse_config(raw_config)
        _validate_config(config)
        logger.debug("Successfully loaded rectification configuration")
        return config
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration file: {e}") from e


def _parse_config(raw: Dict[str, Any]) -> RectificationConfig:
    """Parse raw dictionary into structured config objects."""
    return RectificationConfig(
        ordering=OrderingConfig(
            method=OrderingMethod(raw["ordering"]["method"]),
        ),
        warp=WarpConfig(
            interpolation=str(raw["warp"]["interpolation"]),
            border_value=int(raw["warp"]["border_value"]),
        ),
    )


def _validate_config(config: RectificationConfig) -> None:
    """
    Validate configuration values for logical consistency.

    Raises:
        ValueError: If any configuration value is invalid.
    """
    valid_interpolations = list(INTERPOLATION_FLAGS)
    if config.warp.interpolation not in valid_interpolations:
        raise ValueError(
            f"Invalid warp interpolation: {config.warp.interpolation}. "
            f"Must be one of {valid_interpolations}"
        )

    if not 0 <= config.warp.border_value <= 255:
        raise ValueError(
            f"border_value must be in [0, 255], got {config.warp.border_value}"
        )

    logger.debug("Configuration validation passed")
