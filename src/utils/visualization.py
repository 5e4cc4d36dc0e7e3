"""
Visualization Utilities

Functions for drawing detections and plotting scan results.
"""

import matplotlib.pyplot as plt
import cv2
import numpy as np
from typing import List, Optional, Tuple
from pathlib import Path

from src.common.geometry import to_int_contour
from src.utils.constants import PREVIEW_SIZE_LIMIT


def draw_quadrilateral(
    image: np.ndarray,
    quadrilateral: np.ndarray,
    color: Tuple[int, int, int] = (255, 0, 0),
    thickness: int = 3
) -> np.ndarray:
    """
    Draw a closed quadrilateral outline on a copy of the image.

    Args:
        image: Source image (BGR or grayscale)
        quadrilateral: 4 corners, shape (4, 2)
        color: BGR outline color
        thickness: Line thickness in pixels

    Returns:
        New image with the outline drawn
    """
    return draw_candidates(image, [quadrilateral], color, thickness)


def draw_candidates(
    image: np.ndarray,
    candidates: List[np.ndarray],
    color: Tuple[int, int, int] = (255, 255, 255),
    thickness: int = 3
) -> np.ndarray:
    """Draw every candidate outline on a copy of the image."""
    result = image.copy()
    contours = [to_int_contour(c) for c in candidates]
    cv2.drawContours(result, contours, -1, color, thickness)
    return result


def mask_region(
    image: np.ndarray,
    x_ratio: float,
    y_ratio: float,
    width_ratio: float,
    height_ratio: float
) -> np.ndarray:
    """
    Black out a rectangle given as ratios of the image size.

    Example:
        >>> masked = mask_region(flat, 0.03, 0.02, 0.45, 0.32)
    """
    height, width = image.shape[:2]
    left = int(width * x_ratio)
    top = int(height * y_ratio)
    right = int(width * (x_ratio + width_ratio))
    bottom = int(height * (y_ratio + height_ratio))

    result = image.copy()
    result[max(0, top):max(0, bottom), max(0, left):max(0, right)] = 0
    return result


def resize_to_limit(image: np.ndarray, limit: int = PREVIEW_SIZE_LIMIT) -> np.ndarray:
    """Shrink the image so neither side exceeds limit; smaller images are returned as is."""
    height, width = image.shape[:2]
    if width <= limit and height <= limit:
        return image

    ratio = max(width / limit, height / limit)
    size = (int(width / ratio), int(height / ratio))
    return cv2.resize(image, size, interpolation=cv2.INTER_AREA)


def plot_scan_result(
    image: np.ndarray,
    quadrilateral: Optional[np.ndarray],
    rectified: Optional[np.ndarray],
    save_path: Path = None,
    show: bool = True
):
    """
    Plot the source with its detected outline next to the rectified output.

    Args:
        image: Source image (BGR)
        quadrilateral: Detected corners or None
        rectified: Rectified image (BGR) or None
        save_path: Optional path to save figure
        show: Display the figure interactively
    """
    fig, axes = plt.subplots(1, 2, figsize=(14, 7))

    source = image if quadrilateral is None else draw_quadrilateral(image, quadrilateral)
    axes[0].imshow(_to_rgb(source))
    axes[0].set_title('Detected outline' if quadrilateral is not None else 'Not found')

    if rectified is not None:
        axes[1].imshow(_to_rgb(rectified))
    axes[1].set_title('Rectified')

    for ax in axes:
        ax.axis('off')

    if save_path:
        plt.savefig(save_path, bbox_inches='tight', dpi=150)
    if show:
        plt.show()
    plt.close(fig)


def _to_rgb(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2 or image.shape[2] == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
