"""
Common type definitions for the document rectification pipeline.

This module provides Pydantic-based type definitions for the core values
passed between detection and rectification: images and points.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Integration with numpy arrays and OpenCV
"""

from typing import Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, ValidationError, field_validator


class InvalidInputError(ValueError):
    """
    Raised when an image or quadrilateral violates a precondition.

    Examples are a zero-size image or a quadrilateral whose corners cannot
    be ordered. "No document found" is never reported with this error.
    """


class ImageBuffer(BaseModel):
    """
    Type-safe wrapper for image arrays (numpy.ndarray).

    Ensures images are non-empty uint8 arrays with a layout OpenCV accepts.

    Attributes:
        data: The underlying numpy array containing image data.
            Shape: (H, W, C) for color images, (H, W) for grayscale.
            Dtype: uint8 (0-255).

    Example:
        >>> import cv2
        >>> image = cv2.imread("receipt.jpg")
        >>> img_buffer = ImageBuffer(data=image)
        >>> print(img_buffer.height, img_buffer.width, img_buffer.channels)
        3024 4032 3
    """

    data: np.ndarray = Field(..., description="Image data as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a valid image.

        Raises:
            ValueError: If array is not a valid image format.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if len(v.shape) not in (2, 3):
            raise ValueError(
                f"Expected 2D (grayscale) or 3D (color) image, got shape {v.shape}"
            )

        if len(v.shape) == 3 and v.shape[2] not in (1, 3, 4):
            raise ValueError(
                f"Expected 1, 3, or 4 channels for color image, got {v.shape[2]}"
            )

        if v.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 dtype for image, got {v.dtype}. "
                "Images should be in range [0, 255]"
            )

        return v

    @property
    def shape(self) -> Tuple[int, ...]:
        """Get image shape (H, W) or (H, W, C)."""
        return self.data.shape

    @property
    def height(self) -> int:
        """Get image height in pixels."""
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        """Get image width in pixels."""
        return int(self.data.shape[1])

    @property
    def channels(self) -> int:
        """Get number of channels (1 for grayscale, 3 for BGR, 4 for BGRA)."""
        if len(self.data.shape) == 2:
            return 1
        return int(self.data.shape[2])

    @property
    def area(self) -> int:
        """Get total pixel count (width * height)."""
        return self.width * self.height

    def to_numpy(self) -> np.ndarray:
        """Get underlying numpy array."""
        return self.data

    def __repr__(self) -> str:
        """String representation of ImageBuffer."""
        return f"ImageBuffer(shape={self.shape}, dtype={self.data.dtype})"


def as_image_buffer(image: Union[np.ndarray, ImageBuffer]) -> ImageBuffer:
    """
    Wrap a raw array in an ImageBuffer, failing fast on invalid input.

    Args:
        image: Raw numpy image or an existing ImageBuffer.

    Returns:
        Validated ImageBuffer.

    Raises:
        InvalidInputError: If the image is None, empty or malformed.
    """
    if isinstance(image, ImageBuffer):
        return image

    if image is None:
        raise InvalidInputError("Invalid input image: image is None")

    try:
        return ImageBuffer(data=image)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid input image: {e.errors()[0]['msg']}") from e


class Point(BaseModel):
    """
    Floating point 2D image coordinate (x, y).

    Attributes:
        x: X-coordinate (horizontal, 0 to image width).
        y: Y-coordinate (vertical, 0 to image height).

    Example:
        >>> point = Point(x=100.5, y=200.25)
        >>> arr = point.to_numpy()  # array([100.5, 200.25])
        >>> point2 = Point.from_numpy(np.array([150, 250]))
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point":
        """
        Create Point from numpy array.

        Args:
            arr: Numpy array of shape (2,) with [x, y] coordinates.

        Raises:
            ValueError: If array shape is not (2,).
        """
        arr = np.asarray(arr)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def to_numpy(self, dtype: type = np.float32) -> np.ndarray:
        """Convert Point to numpy array of shape (2,)."""
        return np.array([self.x, self.y], dtype=dtype)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return float(np.sqrt(dx * dx + dy * dy))

    def __repr__(self) -> str:
        return f"Point(x={self.x:.2f}, y={self.y:.2f})"
