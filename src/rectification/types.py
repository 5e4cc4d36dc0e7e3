"""
Data types and structures for the Rectification module.

Provides type-safe containers for configuration.
"""

from dataclasses import dataclass, field
from enum import Enum


class OrderingMethod(Enum):
    """Strategies for labelling the corners of an unordered quadrilateral."""

    CENTROID_SPLIT = "centroid_split"  # Top/bottom halves around the centroid
    ANGULAR = "angular"  # Angle around the centroid, rotation invariant


@dataclass
class OrderingConfig:
    """Configuration for corner ordering."""

    method: OrderingMethod = OrderingMethod.CENTROID_SPLIT


@dataclass
class WarpConfig:
    """Configuration for the perspective warp."""

    interpolation: str = "linear"
    border_value: int = 0  # 0-255, applied to every channel


@dataclass
class RectificationConfig:
    """Complete rectification module configuration."""

    ordering: OrderingConfig = field(default_factory=OrderingConfig)
    warp: WarpConfig = field(default_factory=WarpConfig)
