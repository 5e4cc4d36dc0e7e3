"""
Shared Constants for the Document Rectification Pipeline

This module contains constants used across multiple modules to ensure
consistency and avoid duplication.
"""

import cv2

# ============================================================================
# Interpolation
# ============================================================================
# Names accepted in config files, mapped to OpenCV flags
INTERPOLATION_FLAGS = {
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "nearest": cv2.INTER_NEAREST,
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
}

# ============================================================================
# Area Bounds
# ============================================================================
# Candidate area as a ratio of the whole image area
DEFAULT_AREA_LOWER_RATIO = 0.2  # Smaller contours are noise
DEFAULT_AREA_UPPER_RATIO = 0.98  # Larger contours are the frame itself

# ============================================================================
# Corner Layout
# ============================================================================
CORNER_NAMES = ("top-left", "top-right", "bottom-right", "bottom-left")

# ============================================================================
# Preview
# ============================================================================
PREVIEW_SIZE_LIMIT = 2048  # Longest side shown in previews
