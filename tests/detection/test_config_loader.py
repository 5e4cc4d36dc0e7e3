"""
Unit tests for the detection config_loader module.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.detection.config_loader import (
    DetectionConfig,
    get_default_config,
    load_config,
)


class TestLoadConfig:
    """Tests for load_config and get_default_config."""

    def test_load_default_config(self):
        config = get_default_config()

        assert isinstance(config, DetectionConfig)
        assert config.preprocessing.target_max_dimension == 600
        assert config.preprocessing.median_blur_kernel == 9
        assert config.edges.canny_low == 0
        assert config.edges.canny_high == 50
        assert config.edges.dilation_kernel_size == 3
        assert config.search.threshold_levels == 5
        assert config.search.approx_epsilon_ratio == pytest.approx(0.02)
        assert config.classification.max_cosine == pytest.approx(0.3)
        assert config.classification.area_lower_ratio == pytest.approx(0.2)
        assert config.classification.area_upper_ratio == pytest.approx(0.98)

    def test_bundled_file_matches_model_defaults(self):
        assert get_default_config() == DetectionConfig()

    def test_load_partial_config_fills_defaults(self, tmp_path):
        config_path = tmp_path / "detection.yaml"
        config_path.write_text(
            yaml.dump({"search": {"threshold_levels": 11}}), encoding="utf-8"
        )

        config = load_config(config_path)

        assert config.search.threshold_levels == 11
        assert config.preprocessing.median_blur_kernel == 9

    def test_empty_file_gives_defaults(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("", encoding="utf-8")

        assert load_config(config_path) == DetectionConfig()

    def test_missing_file_raises_error(self):
        with pytest.raises(FileNotFoundError):
            load_config(Path("nonexistent_config.yaml"))


class TestValidation:
    """Tests for pydantic field validation."""

    def test_even_median_kernel_rejected(self):
        with pytest.raises(ValidationError, match="odd"):
            DetectionConfig(preprocessing={"median_blur_kernel": 8})

    def test_inverted_area_bounds_rejected(self):
        with pytest.raises(ValidationError, match="area_lower_ratio"):
            DetectionConfig(
                classification={"area_lower_ratio": 0.9, "area_upper_ratio": 0.5}
            )

    def test_inverted_canny_thresholds_rejected(self):
        with pytest.raises(ValidationError, match="canny_low"):
            DetectionConfig(edges={"canny_low": 100, "canny_high": 50})

    def test_unknown_interpolation_rejected(self):
        with pytest.raises(ValidationError):
            DetectionConfig(preprocessing={"resize_interpolation": "bogus"})

    def test_zero_threshold_levels_rejected(self):
        with pytest.raises(ValidationError):
            DetectionConfig(search={"threshold_levels": 0})
