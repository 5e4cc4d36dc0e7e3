"""
Integration tests for the perspective rectifier.
"""

import numpy as np
import pytest

from src.common.types import InvalidInputError
from src.rectification.image_rectification import get_outline
from src.rectification.processor import PerspectiveRectifier, rectify
from src.rectification.types import (
    OrderingConfig,
    OrderingMethod,
    RectificationConfig,
    WarpConfig,
)

DIAMOND = np.array([[400, 100], [700, 300], [400, 500], [100, 300]], dtype=np.float32)


class TestPerspectiveRectifier:
    """Tests for PerspectiveRectifier."""

    def test_initialization_default_config(self):
        rectifier = PerspectiveRectifier()

        assert rectifier.config.ordering.method == OrderingMethod.CENTROID_SPLIT
        assert rectifier.config.warp.interpolation == "linear"
        assert rectifier.config.warp.border_value == 0

    def test_output_has_source_dimensions(self, document_image):
        image, corners, _ = document_image
        rectified = PerspectiveRectifier().rectify(image, corners)

        assert rectified.shape == image.shape
        assert rectified.dtype == np.uint8

    def test_document_fills_canvas(self, document_image):
        image, corners, _ = document_image
        rectified = PerspectiveRectifier().rectify(image, corners)

        height, width = rectified.shape[:2]
        center = rectified[height // 4: 3 * height // 4, width // 4: 3 * width // 4]
        assert np.all(np.abs(center.astype(int) - 128) <= 1)

    def test_already_rectangular_input_is_unchanged(self, noise_image):
        height, width = noise_image.shape[:2]
        rectified = PerspectiveRectifier().rectify(noise_image, get_outline(width, height))

        np.testing.assert_allclose(rectified.astype(int), noise_image.astype(int), atol=1)

    def test_deterministic(self, document_image):
        image, corners, _ = document_image
        rectifier = PerspectiveRectifier()

        np.testing.assert_array_equal(
            rectifier.rectify(image, corners), rectifier.rectify(image, corners)
        )

    def test_source_is_read_only(self, document_image):
        image, corners, _ = document_image
        original = image.copy()

        PerspectiveRectifier().rectify(image, corners)

        np.testing.assert_array_equal(image, original)

    def test_diamond_rejected_with_centroid_split(self, document_image):
        image, _, _ = document_image

        with pytest.raises(InvalidInputError):
            PerspectiveRectifier().rectify(image, DIAMOND)

    def test_diamond_accepted_with_angular_ordering(self, document_image):
        image, _, _ = document_image
        config = RectificationConfig(
            ordering=OrderingConfig(method=OrderingMethod.ANGULAR)
        )

        rectified = PerspectiveRectifier(config=config).rectify(image, DIAMOND)

        assert rectified.shape == image.shape

    def test_border_value_from_config(self):
        image = np.full((100, 100, 3), 255, dtype=np.uint8)
        larger = np.array([[-50, -50], [150, -50], [150, 150], [-50, 150]])
        config = RectificationConfig(warp=WarpConfig(border_value=30))

        rectified = PerspectiveRectifier(config=config).rectify(image, larger)

        np.testing.assert_array_equal(rectified[0, 0], [30, 30, 30])

    def test_invalid_image_raises(self, sample_quadrilateral_points):
        with pytest.raises(InvalidInputError, match="Invalid input image"):
            PerspectiveRectifier().rectify(None, sample_quadrilateral_points)

    def test_empty_image_raises(self, sample_quadrilateral_points):
        with pytest.raises(InvalidInputError):
            PerspectiveRectifier().rectify(
                np.array([], dtype=np.uint8), sample_quadrilateral_points
            )

    def test_wrong_point_count_raises(self, document_image):
        image, _, _ = document_image
        with pytest.raises(InvalidInputError, match="Expected exactly 4 points"):
            PerspectiveRectifier().rectify(image, [[0, 0], [10, 0], [10, 10]])


class TestRectifyFunction:
    """Tests for the module-level convenience function."""

    def test_one_shot(self, document_image):
        image, corners, _ = document_image
        assert rectify(image, corners).shape == image.shape
