"""
Main processor for the Rectification module.

Orders the corners of a detected quadrilateral and projects it front-on so
that the document fills an output canvas of the source image's size.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from src.common.geometry import as_quadrilateral
from src.common.types import ImageBuffer, as_image_buffer
from src.rectification.config_loader import load_config
from src.rectification.image_rectification import order_corners, warp_to_outline
from src.rectification.types import RectificationConfig

logger = logging.getLogger(__name__)


class PerspectiveRectifier:
    """
    Flattens a document quadrilateral into an axis-aligned image.

    Example:
        >>> rectifier = PerspectiveRectifier()
        >>> image = cv2.imread("document.jpg")
        >>> corners = np.array([[120, 80], [900, 60], [950, 700], [90, 720]])
        >>> flat = rectifier.rectify(image, corners)
        >>> flat.shape == image.shape
        True
    """

    def __init__(
        self,
        config: Optional[RectificationConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the rectifier.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses default location.
        """
        if config is not None:
            self.config = config
        else:
            self.config = load_config(config_path) if config_path else load_config()

    def order_corners(self, quadrilateral: Union[np.ndarray, list]) -> np.ndarray:
        """Order corners TL, TR, BR, BL using the configured method."""
        return order_corners(quadrilateral, self.config.ordering.method)

    def rectify(
        self,
        image: Union[np.ndarray, ImageBuffer],
        quadrilateral: Union[np.ndarray, list],
    ) -> np.ndarray:
        """
        Produce the front-on projection of the quadrilateral.

        Args:
            image: Source image. Read only.
            quadrilateral: 4 corners in any order, image coordinates.

        Returns:
            New image with the same height, width and channels as the source.

        Raises:
            InvalidInputError: If the image is empty or the corners cannot be
                ordered into a convex quadrilateral.
        """
        buffer = as_image_buffer(image)
        ordered = self.order_corners(as_quadrilateral(quadrilateral))

        rectified = warp_to_outline(
            buffer.to_numpy(),
            ordered,
            interpolation=self.config.warp.interpolation,
            border_value=self.config.warp.border_value,
        )

        logger.info(
            f"Rectified quadrilateral onto {buffer.width}x{buffer.height} canvas"
        )
        return rectified


def rectify(
    image: Union[np.ndarray, ImageBuffer],
    quadrilateral: Union[np.ndarray, list],
    config: Optional[RectificationConfig] = None,
) -> np.ndarray:
    """
    Convenience function for one-shot rectification.

    Example:
        >>> result = find_rectangle(image)
        >>> if result.is_found():
        ...     flat = rectify(image, result.quadrilateral)
    """
    rectifier = PerspectiveRectifier(config=config)
    return rectifier.rectify(image, quadrilateral)
