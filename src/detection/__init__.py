"""
Rectangle Detection

Finds the largest document-like quadrilateral in a photographed scene using
a multi-channel, multi-threshold contour search.

Example:
    >>> from src.detection import RectangleDetector
    >>> import cv2
    >>> detector = RectangleDetector()
    >>> image = cv2.imread("document.jpg")
    >>> result = detector.find_rectangle(image, 0.2, 0.98)
    >>> if result.is_found():
    ...     print(f"Document outline: {result.quadrilateral.tolist()}")
"""

from src.detection.classifier import is_rectangle
from src.detection.config_loader import (
    DetectionConfig,
    get_default_config,
    load_config,
)
from src.detection.processor import RectangleDetector, find_rectangle
from src.detection.types import DetectionResult, DetectionStatus

__all__ = [
    "RectangleDetector",
    "find_rectangle",
    "is_rectangle",
    "DetectionConfig",
    "DetectionResult",
    "DetectionStatus",
    "get_default_config",
    "load_config",
]
