"""
Perspective Rectification

Transforms a detected document quadrilateral into a flattened, front-on
image that fills the full output canvas.

Pipeline stages:
1. Corner ordering (top-left, top-right, bottom-right, bottom-left)
2. Homography from the ordered corners to the canvas outline
3. Perspective warp with constant border fill
"""

from src.rectification.config_loader import load_config
from src.rectification.image_rectification import (
    compute_homography,
    get_outline,
    order_corners,
    warp_to_outline,
)
from src.rectification.processor import PerspectiveRectifier, rectify
from src.rectification.types import (
    OrderingConfig,
    OrderingMethod,
    RectificationConfig,
    WarpConfig,
)

__all__ = [
    "PerspectiveRectifier",
    "rectify",
    "load_config",
    "order_corners",
    "get_outline",
    "compute_homography",
    "warp_to_outline",
    "OrderingConfig",
    "OrderingMethod",
    "RectificationConfig",
    "WarpConfig",
]
