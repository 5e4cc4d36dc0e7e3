"""
Common types and utilities shared across all modules.

Provides the image and point value types plus the geometry helpers used by
both rectangle detection and perspective rectification.
"""

from src.common.types import ImageBuffer, InvalidInputError, Point, as_image_buffer

__all__ = ["ImageBuffer", "InvalidInputError", "Point", "as_image_buffer"]
