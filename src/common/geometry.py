"""
Geometry helpers shared by detection and rectification.

Contours coming out of OpenCV have shape (N, 1, 2); quadrilaterals handed
between modules are plain (4, 2) float32 arrays.
"""

import logging
from typing import Union

import cv2
import numpy as np

from src.common.types import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_COSINE_EPSILON = 1e-10


def to_float_contour(contour: np.ndarray) -> np.ndarray:
    """Convert an integer contour to float32, keeping the (N, 1, 2) layout."""
    return np.asarray(contour, dtype=np.float32).reshape(-1, 1, 2)


def to_int_contour(contour: np.ndarray) -> np.ndarray:
    """Convert a float contour to int32 for drawing and convexity checks."""
    return np.round(np.asarray(contour, dtype=np.float64)).astype(np.int32).reshape(
        -1, 1, 2
    )


def as_quadrilateral(points: Union[np.ndarray, list]) -> np.ndarray:
    """
    Coerce 4 points into a (4, 2) float32 array.

    Accepts lists, (4, 2) arrays and OpenCV-style (4, 1, 2) contours.

    Raises:
        InvalidInputError: If the input does not hold exactly 4 points.
    """
    if points is None:
        raise InvalidInputError("Quadrilateral is None")

    pts = np.asarray(points, dtype=np.float32)
    if pts.size != 8 or pts.shape[-1] != 2:
        raise InvalidInputError(
            f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
        )
    return pts.reshape(4, 2)


def angle_cosine(
    p1: np.ndarray,
    p2: np.ndarray,
    p0: np.ndarray,
    epsilon: float = DEFAULT_COSINE_EPSILON,
) -> float:
    """
    Cosine of the angle at p0 between edges p0->p1 and p0->p2.

    The epsilon keeps zero-length edges from dividing by zero.

    Example:
        >>> angle_cosine(np.array([1, 0]), np.array([0, 1]), np.array([0, 0]))
        0.0
    """
    dx1 = float(p1[0] - p0[0])
    dy1 = float(p1[1] - p0[1])
    dx2 = float(p2[0] - p0[0])
    dy2 = float(p2[1] - p0[1])
    return (dx1 * dx2 + dy1 * dy2) / np.sqrt(
        (dx1 * dx1 + dy1 * dy1) * (dx2 * dx2 + dy2 * dy2) + epsilon
    )


def max_corner_cosine(
    polygon: np.ndarray, epsilon: float = DEFAULT_COSINE_EPSILON
) -> float:
    """
    Largest absolute interior-angle cosine over every vertex of a polygon.

    0.0 means all corners are right angles; values near 1.0 mean at least
    one corner is almost flat or almost folded back.
    """
    pts = np.asarray(polygon, dtype=np.float64).reshape(-1, 2)
    n = len(pts)
    max_cosine = 0.0
    for i in range(n):
        cosine = abs(angle_cosine(pts[(i + 1) % n], pts[i - 1], pts[i], epsilon))
        max_cosine = max(max_cosine, cosine)
    return max_cosine


def polygon_area(polygon: np.ndarray) -> float:
    """Absolute polygon area (shoelace formula via cv2.contourArea)."""
    return abs(float(cv2.contourArea(to_float_contour(polygon))))


def centroid(points: np.ndarray) -> np.ndarray:
    """Arithmetic mean of the vertex coordinates, shape (2,)."""
    return np.asarray(points, dtype=np.float64).reshape(-1, 2).mean(axis=0)


def is_convex_ordered(quad: np.ndarray, tolerance: float = 1e-6) -> bool:
    """
    Check if 4 ordered points form a non-degenerate convex quadrilateral.

    For each consecutive edge pair (P1->P2, P2->P3) the 2D cross product
    must have the same strict sign. Mixed signs mean the quadrilateral is
    concave or self-intersecting; a near-zero product means three corners
    are collinear.
    """
    pts = np.asarray(quad, dtype=np.float64).reshape(4, 2)
    cross_products = []

    for i in range(4):
        v1 = pts[(i + 1) % 4] - pts[i]
        v2 = pts[(i + 2) % 4] - pts[(i + 1) % 4]
        cross_products.append(v1[0] * v2[1] - v1[1] * v2[0])

    is_convex = all(cp > tolerance for cp in cross_products) or all(
        cp < -tolerance for cp in cross_products
    )

    if not is_convex:
        logger.debug(f"Non-convex quadrilateral. Cross products: {cross_products}")

    return is_convex


def scale_points(points: np.ndarray, factor: float) -> np.ndarray:
    """Multiply every coordinate by factor, returning (N, 2) float32."""
    return (np.asarray(points, dtype=np.float64).reshape(-1, 2) * factor).astype(
        np.float32
    )
