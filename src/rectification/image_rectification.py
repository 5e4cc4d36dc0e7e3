"""
Image Rectification Utilities

Provides corner ordering, homography estimation and the perspective warp
that flattens a document quadrilateral onto the full output canvas.
"""

import logging
from typing import Union

import cv2
import numpy as np

from src.common.geometry import as_quadrilateral, centroid, is_convex_ordered
from src.common.types import InvalidInputError
from src.rectification.types import OrderingMethod
from src.utils.constants import INTERPOLATION_FLAGS

logger = logging.getLogger(__name__)


def order_corners(
    pts: Union[np.ndarray, list],
    method: Union[OrderingMethod, str] = OrderingMethod.CENTROID_SPLIT,
) -> np.ndarray:
    """
    Order 4 points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    Two strategies are available:
    - CENTROID_SPLIT: points above the centroid form the top pair, the rest
      the bottom pair; within each pair the smaller x is the left corner.
      Requires a 2+2 split, which holds while the quadrilateral is rotated
      less than about 45 degrees.
    - ANGULAR: points are sorted by angle around the centroid (clockwise on
      screen) and rotated so the minimum x + y point comes first. Works for
      any rotation but can label a different corner as top-left near 45
      degrees.

    Args:
        pts: 4 points, shape (4, 2) or (4, 1, 2), in any order.
        method: Ordering strategy.

    Returns:
        Ordered numpy array of shape (4, 2), dtype float32.

    Raises:
        InvalidInputError: If the input does not hold 4 points, the centroid
            split is not 2+2, or the ordered corners are not a convex
            quadrilateral.

    Example:
        >>> pts = np.array([[300, 150], [100, 200], [320, 400], [80, 380]])
        >>> order_corners(pts)[0]  # Top-Left
        array([100., 200.], dtype=float32)
    """
    pts = as_quadrilateral(pts)
    method = OrderingMethod(method)

    if method == OrderingMethod.ANGULAR:
        rect = _order_by_angle(pts)
    else:
        rect = _order_by_centroid_split(pts)

    logger.debug(
        f"Ordered corners: TL={rect[0]}, TR={rect[1]}, BR={rect[2]}, BL={rect[3]}"
    )

    if not is_convex_ordered(rect):
        raise InvalidInputError(
            "Ordered corners do not form a convex quadrilateral. "
            "The outline may be self-intersecting, concave or degenerate."
        )

    return rect


def _order_by_centroid_split(pts: np.ndarray) -> np.ndarray:
    center = centroid(pts)

    top = [p for p in pts if p[1] < center[1]]
    bottom = [p for p in pts if p[1] >= center[1]]

    if len(top) != 2 or len(bottom) != 2:
        raise InvalidInputError(
            f"Cannot split corners into top and bottom pairs "
            f"({len(top)} above, {len(bottom)} below the centroid). "
            "The quadrilateral is probably rotated by about 45 degrees or more."
        )

    # Stable sort: on equal x the earlier point becomes the left corner
    top_left, top_right = sorted(top, key=lambda p: p[0])
    bottom_left, bottom_right = sorted(bottom, key=lambda p: p[0])

    return np.array([top_left, top_right, bottom_right, bottom_left], dtype=np.float32)


def _order_by_angle(pts: np.ndarray) -> np.ndarray:
    center = centroid(pts)

    # y grows downwards, so increasing atan2 runs clockwise on screen
    angles = np.arctan2(pts[:, 1] - center[1], pts[:, 0] - center[0])
    clockwise = pts[np.argsort(angles, kind="stable")]

    start = int(np.argmin(clockwise.sum(axis=1)))
    return np.roll(clockwise, -start, axis=0).astype(np.float32)


def get_outline(width: int, height: int) -> np.ndarray:
    """
    Corners of a width x height canvas in TL, TR, BR, BL order.

    Matches the ordered source corners so the document fills the canvas.
    """
    return np.array(
        [
            [0, 0],  # Top-Left
            [width, 0],  # Top-Right
            [width, height],  # Bottom-Right
            [0, height],  # Bottom-Left
        ],
        dtype=np.float32,
    )


def compute_homography(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """
    Projective transform mapping 4 source corners onto 4 destination corners.

    Args:
        src: Ordered source corners, shape (4, 2).
        dst: Destination corners in the same order, shape (4, 2).

    Returns:
        3x3 homography matrix (float64).
    """
    return cv2.getPerspectiveTransform(
        np.asarray(src, dtype=np.float32).reshape(4, 2),
        np.asarray(dst, dtype=np.float32).reshape(4, 2),
    )


def warp_to_outline(
    image: np.ndarray,
    ordered_corners: np.ndarray,
    interpolation: str = "linear",
    border_value: int = 0,
) -> np.ndarray:
    """
    Warp the ordered quadrilateral onto a canvas the size of the source image.

    Args:
        image: Source image (H, W) or (H, W, C). Not modified.
        ordered_corners: Corners in TL, TR, BR, BL order, shape (4, 2).
        interpolation: Name of the interpolation method.
        border_value: Fill for output pixels that map outside the source.

    Returns:
        Newly allocated image with the same shape and dtype as the source.
    """
    height, width = image.shape[:2]
    outline = get_outline(width, height)

    M = compute_homography(ordered_corners, outline)

    rectified = cv2.warpPerspective(
        image,
        M,
        (width, height),
        flags=INTERPOLATION_FLAGS[interpolation],
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=(border_value,) * 4,
    )

    # warpPerspective drops a trailing singleton channel axis
    return rectified.reshape(image.shape)
