"""
Data types and structures for the Detection module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from src.common.types import Point


class DetectionStatus(Enum):
    """Outcome of a rectangle search."""

    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class DetectionResult:
    """
    Output from the rectangle detector.

    Attributes:
        status: FOUND or NOT_FOUND.
        quadrilateral: The best candidate as a (4, 2) float32 array in
            original image coordinates, unordered (None if not found).
        area: Area of the quadrilateral in original image pixels.
        candidate_count: Number of candidates that passed classification.
        scale_ratio: Working image size divided by original image size.
    """

    status: DetectionStatus
    quadrilateral: Optional[np.ndarray]
    area: float
    candidate_count: int
    scale_ratio: float

    def is_found(self) -> bool:
        """Check if a quadrilateral was found."""
        return self.status == DetectionStatus.FOUND

    def to_points(self) -> List[Point]:
        """Quadrilateral vertices as Point objects (empty if not found)."""
        if self.quadrilateral is None:
            return []
        return [Point.from_numpy(p) for p in self.quadrilateral]

    def get_message(self) -> str:
        """Get human-readable summary."""
        if not self.is_found():
            return "No rectangles were found"
        return (
            f"Found rectangle with area {self.area:.0f}px "
            f"({self.candidate_count} candidates)"
        )
