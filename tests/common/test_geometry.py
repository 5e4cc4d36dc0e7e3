"""
Unit tests for shared geometry helpers.
"""

import numpy as np
import pytest

from src.common.geometry import (
    angle_cosine,
    as_quadrilateral,
    centroid,
    is_convex_ordered,
    max_corner_cosine,
    polygon_area,
    scale_points,
    to_float_contour,
    to_int_contour,
)
from src.common.types import InvalidInputError


class TestContourConversion:
    """Tests for contour dtype and layout conversion."""

    def test_float_contour_layout(self):
        contour = np.array([[[1, 2]], [[3, 4]], [[5, 6]]], dtype=np.int32)
        result = to_float_contour(contour)

        assert result.dtype == np.float32
        assert result.shape == (3, 1, 2)

    def test_int_contour_rounds(self):
        result = to_int_contour(np.array([[1.4, 2.6], [3.5, 4.49]]))

        assert result.dtype == np.int32
        np.testing.assert_array_equal(result.reshape(-1, 2), [[1, 3], [4, 4]])


class TestAsQuadrilateral:
    """Tests for as_quadrilateral coercion."""

    def test_accepts_opencv_layout(self):
        contour = np.zeros((4, 1, 2), dtype=np.int32)
        assert as_quadrilateral(contour).shape == (4, 2)

    def test_accepts_list(self):
        quad = as_quadrilateral([[0, 0], [1, 0], [1, 1], [0, 1]])
        assert quad.dtype == np.float32

    def test_rejects_three_points(self):
        with pytest.raises(InvalidInputError, match="Expected exactly 4 points"):
            as_quadrilateral([[0, 0], [1, 0], [1, 1]])

    def test_rejects_none(self):
        with pytest.raises(InvalidInputError):
            as_quadrilateral(None)


class TestAngleCosine:
    """Tests for corner cosine computation."""

    def test_right_angle(self):
        cosine = angle_cosine(np.array([10, 0]), np.array([0, 10]), np.array([0, 0]))
        assert cosine == pytest.approx(0.0, abs=1e-9)

    def test_straight_angle(self):
        cosine = angle_cosine(np.array([10, 0]), np.array([-10, 0]), np.array([0, 0]))
        assert cosine == pytest.approx(-1.0, abs=1e-9)

    def test_zero_length_edge_does_not_divide_by_zero(self):
        cosine = angle_cosine(np.array([0, 0]), np.array([5, 5]), np.array([0, 0]))
        assert np.isfinite(cosine)
        assert cosine == 0.0

    def test_max_corner_cosine_rectangle(self):
        rect = np.array([[0, 0], [100, 0], [100, 50], [0, 50]])
        assert max_corner_cosine(rect) == pytest.approx(0.0, abs=1e-9)

    def test_max_corner_cosine_right_trapezoid(self):
        # Corners 0 and 3 are skewed, corners 1 and 2 are right angles
        quad = np.array([[0, 0], [100, 0], [100, 100], [40, 100]])
        expected = abs(angle_cosine(quad[1], quad[3], quad[0]))
        assert max_corner_cosine(quad) == pytest.approx(expected)
        assert max_corner_cosine(quad) > 0.3


class TestAreaAndCentroid:
    """Tests for polygon_area and centroid."""

    def test_area_is_absolute(self):
        clockwise = np.array([[0, 0], [10, 0], [10, 10], [0, 10]])
        counter_clockwise = clockwise[::-1]

        assert polygon_area(clockwise) == pytest.approx(100.0)
        assert polygon_area(counter_clockwise) == pytest.approx(100.0)

    def test_centroid(self):
        pts = np.array([[0, 0], [4, 0], [4, 2], [0, 2]])
        np.testing.assert_allclose(centroid(pts), [2.0, 1.0])

    def test_scale_points(self):
        pts = np.array([[10, 20], [30, 40]])
        np.testing.assert_allclose(scale_points(pts, 0.5), [[5, 10], [15, 20]])


class TestIsConvexOrdered:
    """Tests for ordered convexity validation."""

    def test_rectangle_is_convex(self):
        assert is_convex_ordered(np.array([[0, 0], [10, 0], [10, 10], [0, 10]]))

    def test_reverse_winding_is_convex(self):
        assert is_convex_ordered(np.array([[0, 10], [10, 10], [10, 0], [0, 0]]))

    def test_concave_rejected(self):
        assert not is_convex_ordered(
            np.array([[100, 100], [300, 100], [200, 120], [100, 150]])
        )

    def test_self_intersecting_rejected(self):
        assert not is_convex_ordered(np.array([[0, 0], [10, 10], [10, 0], [0, 10]]))

    def test_collinear_rejected(self):
        assert not is_convex_ordered(np.array([[0, 0], [5, 0], [10, 0], [0, 10]]))
