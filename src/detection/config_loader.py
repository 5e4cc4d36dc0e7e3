"""
Configuration loader with Pydantic validation for the Detection module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values. Every tunable constant of
the rectangle search lives here rather than as a literal in the detector.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

Interpolation = Literal["linear", "cubic", "nearest", "area", "lanczos"]


class PreprocessingConfig(BaseModel):
    """Downscale and denoise settings.

    Attributes:
        target_max_dimension: Longest side of the working image in pixels.
        resize_interpolation: Resampling filter used for the downscale.
        median_blur_kernel: Median blur aperture (odd, greater than 1).
    """

    target_max_dimension: int = Field(default=600, gt=0)
    resize_interpolation: Interpolation = "linear"
    median_blur_kernel: int = Field(default=9, gt=1)

    @field_validator("median_blur_kernel")
    @classmethod
    def validate_odd_kernel(cls, v: int) -> int:
        """Median blur only accepts odd apertures."""
        if v % 2 == 0:
            raise ValueError(f"median_blur_kernel must be odd, got {v}")
        return v


class EdgeConfig(BaseModel):
    """Canny settings for threshold level 0.

    Attributes:
        canny_low: Lower hysteresis threshold.
        canny_high: Upper hysteresis threshold.
        dilation_kernel_size: Side of the square kernel that bridges edge gaps.
    """

    canny_low: float = Field(default=0.0, ge=0.0)
    canny_high: float = Field(default=50.0, gt=0.0)
    dilation_kernel_size: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def validate_thresholds(self) -> "EdgeConfig":
        if self.canny_low > self.canny_high:
            raise ValueError(
                f"canny_low ({self.canny_low}) must not exceed "
                f"canny_high ({self.canny_high})"
            )
        return self


class SearchConfig(BaseModel):
    """Multi-channel, multi-threshold search settings.

    Attributes:
        threshold_levels: Number of levels N per channel (level 0 is Canny).
        approx_epsilon_ratio: Polygon approximation epsilon as a ratio of the
            contour perimeter.
        max_workers: Passes run on a thread pool when greater than 1.
    """

    threshold_levels: int = Field(default=5, ge=1)
    approx_epsilon_ratio: float = Field(default=0.02, gt=0.0, lt=1.0)
    max_workers: int = Field(default=1, ge=1)


class ClassificationConfig(BaseModel):
    """Rectangle candidate gates.

    Attributes:
        max_cosine: Candidates whose largest corner |cos| reaches this are rejected.
        cosine_epsilon: Added under the square root of the cosine denominator.
        area_lower_ratio: Minimum candidate area as a ratio of the image area.
        area_upper_ratio: Maximum candidate area as a ratio of the image area.
    """

    max_cosine: float = Field(default=0.3, gt=0.0, le=1.0)
    cosine_epsilon: float = Field(default=1e-10, ge=0.0)
    area_lower_ratio: float = Field(default=0.2, ge=0.0, le=1.0)
    area_upper_ratio: float = Field(default=0.98, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_area_bounds(self) -> "ClassificationConfig":
        if self.area_lower_ratio > self.area_upper_ratio:
            raise ValueError(
                f"area_lower_ratio ({self.area_lower_ratio}) must not exceed "
                f"area_upper_ratio ({self.area_upper_ratio})"
            )
        return self


class DetectionConfig(BaseModel):
    """Complete rectangle detection configuration.

    Attributes:
        preprocessing: Downscale and denoise settings.
        edges: Canny and dilation settings.
        search: Threshold sweep and polygon approximation settings.
        classification: Candidate acceptance gates.
    """

    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    edges: EdgeConfig = Field(default_factory=EdgeConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    classification: ClassificationConfig = Field(
        default_factory=ClassificationConfig
    )


def load_config(config_path: Path) -> DetectionConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        Validated DetectionConfig object with all settings.

    Raises:
        FileNotFoundError: If config file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        pydantic.ValidationError: If configuration validation fails.

    Example:
        >>> config = load_config(Path("src/detection/config.yaml"))
        >>> print(config.classification.max_cosine)
        0.3
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading detection config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    return DetectionConfig(**config_dict)


def get_default_config() -> DetectionConfig:
    """Get default configuration from the bundled config.yaml file.

    Falls back to the model defaults if the bundled file is missing.
    """
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    else:
        logger.warning(
            f"Bundled config not found at {DEFAULT_CONFIG_PATH}, using defaults"
        )
        return DetectionConfig()
