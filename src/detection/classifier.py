"""
Rectangle candidate classification.

Decides whether an approximated contour polygon is a plausible document
outline. Rejections are silent: a polygon that fails any gate is simply not
a candidate.
"""

import cv2
import numpy as np

from src.common.geometry import (
    DEFAULT_COSINE_EPSILON,
    max_corner_cosine,
    polygon_area,
    to_float_contour,
)


def is_rectangle(
    polygon: np.ndarray,
    total_area: float,
    area_lower_ratio: float,
    area_upper_ratio: float,
    max_cosine: float = 0.3,
    epsilon: float = DEFAULT_COSINE_EPSILON,
) -> bool:
    """
    Check whether a polygon qualifies as a rectangle candidate.

    Gates, in order:
    1. Exactly 4 vertices.
    2. Absolute area within [total_area * lower, total_area * upper].
    3. Convex.
    4. Largest absolute corner cosine below max_cosine (0.3 means every
       corner lies between roughly 72.5 and 107.5 degrees).

    Args:
        polygon: Approximated contour, (4, 1, 2) or (4, 2).
        total_area: Area of the image the polygon was found in.
        area_lower_ratio: Minimum area as a ratio of total_area.
        area_upper_ratio: Maximum area as a ratio of total_area.
        max_cosine: Rejection bound on the corner cosine.
        epsilon: Guard added to the cosine denominator.

    Returns:
        True if the polygon passes all four gates.

    Example:
        >>> square = np.array([[10, 10], [90, 10], [90, 90], [10, 90]])
        >>> is_rectangle(square, 10000, 0.2, 0.98)
        True
    """
    contour = to_float_contour(polygon)

    if len(contour) != 4:
        return False

    area = polygon_area(contour)
    if not (total_area * area_lower_ratio <= area <= total_area * area_upper_ratio):
        return False

    if not cv2.isContourConvex(contour):
        return False

    return bool(max_corner_cosine(contour, epsilon) < max_cosine)
