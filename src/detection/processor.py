"""
Main processor for the Detection module.

Finds the largest document-like quadrilateral in a photograph. The search
runs on a downscaled, median-blurred copy of the image: every color channel
is binarized at several levels (Canny for level 0, fixed thresholds above),
contours are simplified to polygons, and the largest polygon that passes
rectangle classification is mapped back to original image coordinates.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple, Union

import cv2
import numpy as np

from src.common.geometry import polygon_area, scale_points, to_float_contour
from src.common.types import ImageBuffer, InvalidInputError, as_image_buffer
from src.detection.classifier import is_rectangle
from src.detection.config_loader import (
    DetectionConfig,
    get_default_config,
    load_config,
)
from src.detection.types import DetectionResult, DetectionStatus
from src.utils.constants import (
    DEFAULT_AREA_LOWER_RATIO,
    DEFAULT_AREA_UPPER_RATIO,
    INTERPOLATION_FLAGS,
)

logger = logging.getLogger(__name__)


class RectangleDetector:
    """
    Locates the best-scoring 4-point document outline in an image.

    Instances hold configuration only; every call works on its own buffers,
    so one detector can be shared between threads.

    Example:
        >>> detector = RectangleDetector()
        >>> image = cv2.imread("document.jpg")
        >>> result = detector.find_rectangle(image, 0.2, 0.98)
        >>> if result.is_found():
        ...     print(result.quadrilateral)
    """

    def __init__(
        self,
        config: Optional[DetectionConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the detector.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses the bundled config.
        """
        if config is not None:
            self.config = config
        elif config_path is not None:
            self.config = load_config(config_path)
        else:
            self.config = get_default_config()

    def find_rectangle(
        self,
        image: Union[np.ndarray, ImageBuffer],
        area_lower_ratio: Optional[float] = None,
        area_upper_ratio: Optional[float] = None,
    ) -> DetectionResult:
        """
        Find the largest rectangle candidate in the image.

        Args:
            image: BGR (or grayscale) uint8 image.
            area_lower_ratio: Minimum candidate area as a ratio of the image
                area. Defaults to the configured value.
            area_upper_ratio: Maximum candidate area as a ratio of the image
                area. Defaults to the configured value.

        Returns:
            DetectionResult. A NOT_FOUND status means no polygon passed
            classification; it is not an error.

        Raises:
            InvalidInputError: If the image is empty or malformed, or the
                area bounds are inconsistent.
        """
        buffer = as_image_buffer(image)
        candidates, ratio = self._collect_candidates(
            buffer, area_lower_ratio, area_upper_ratio
        )

        if not candidates:
            logger.warning("No rectangles were found")
            return DetectionResult(
                status=DetectionStatus.NOT_FOUND,
                quadrilateral=None,
                area=0.0,
                candidate_count=0,
                scale_ratio=ratio,
            )

        # max() keeps the first of equal areas, i.e. discovery order
        largest = max(candidates, key=polygon_area)
        quadrilateral = scale_points(largest, 1.0 / ratio)
        area = polygon_area(quadrilateral)

        logger.info(
            f"Selected largest of {len(candidates)} candidates "
            f"(area {area:.0f}px in {buffer.width}x{buffer.height} image)"
        )

        return DetectionResult(
            status=DetectionStatus.FOUND,
            quadrilateral=quadrilateral,
            area=area,
            candidate_count=len(candidates),
            scale_ratio=ratio,
        )

    def find_rectangles(
        self,
        image: Union[np.ndarray, ImageBuffer],
        area_lower_ratio: Optional[float] = None,
        area_upper_ratio: Optional[float] = None,
    ) -> List[np.ndarray]:
        """
        Return every accepted candidate in original image coordinates.

        Candidates keep their discovery order (channel, then threshold level)
        and duplicates across passes are not removed.
        """
        buffer = as_image_buffer(image)
        candidates, ratio = self._collect_candidates(
            buffer, area_lower_ratio, area_upper_ratio
        )
        return [scale_points(c, 1.0 / ratio) for c in candidates]

    def _collect_candidates(
        self,
        buffer: ImageBuffer,
        area_lower_ratio: Optional[float],
        area_upper_ratio: Optional[float],
    ) -> Tuple[List[np.ndarray], float]:
        """Run the full search, returning candidates in working coordinates."""
        lower, upper = self._resolve_area_bounds(area_lower_ratio, area_upper_ratio)

        working, ratio = self._downscale(buffer.to_numpy())
        blurred = cv2.medianBlur(working, self.config.preprocessing.median_blur_kernel)

        if blurred.ndim == 2:
            channels = [blurred]
        else:
            channels = list(cv2.split(blurred))

        total_area = float(blurred.shape[0] * blurred.shape[1])
        passes = [
            (channel, level)
            for channel in channels
            for level in range(self.config.search.threshold_levels)
        ]

        def run_pass(job: Tuple[np.ndarray, int]) -> List[np.ndarray]:
            channel, level = job
            return self._search_pass(channel, level, total_area, lower, upper)

        max_workers = self.config.search.max_workers
        if max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(run_pass, passes))
        else:
            results = [run_pass(job) for job in passes]

        candidates = [candidate for found in results for candidate in found]
        logger.debug(
            f"{len(candidates)} candidates from {len(passes)} passes "
            f"over {len(channels)} channel(s)"
        )
        return candidates, ratio

    def _resolve_area_bounds(
        self, lower: Optional[float], upper: Optional[float]
    ) -> Tuple[float, float]:
        """Fill in configured defaults and check the bounds are consistent."""
        if lower is None:
            lower = self.config.classification.area_lower_ratio
        if upper is None:
            upper = self.config.classification.area_upper_ratio

        if not (0.0 <= lower <= upper):
            raise InvalidInputError(
                f"Invalid area bounds: lower={lower}, upper={upper}. "
                "Expected 0 <= lower <= upper"
            )
        return lower, upper

    def _downscale(self, image: np.ndarray) -> Tuple[np.ndarray, float]:
        """
        Resize so the longest side equals the target dimension.

        Returns:
            Tuple of (working image, ratio) where ratio maps original
            coordinates to working coordinates.
        """
        height, width = image.shape[:2]
        ratio = self.config.preprocessing.target_max_dimension / max(width, height)

        size = (max(1, int(width * ratio)), max(1, int(height * ratio)))
        interpolation = INTERPOLATION_FLAGS[
            self.config.preprocessing.resize_interpolation
        ]
        working = cv2.resize(image, size, interpolation=interpolation)

        logger.debug(
            f"Downscaled {width}x{height} -> {size[0]}x{size[1]} (ratio {ratio:.4f})"
        )
        return working, ratio

    def _binarize(self, channel: np.ndarray, level: int) -> np.ndarray:
        """Binary image for one threshold level of one channel."""
        if level == 0:
            # Canny catches edges under gradient shading that a zero
            # threshold misses
            edges = cv2.Canny(
                channel, self.config.edges.canny_low, self.config.edges.canny_high
            )
            size = self.config.edges.dilation_kernel_size
            kernel = np.ones((size, size), np.uint8)
            return cv2.dilate(edges, kernel)

        thresh = (level + 1) * 255 // self.config.search.threshold_levels
        _, binary = cv2.threshold(channel, thresh, 255, cv2.THRESH_BINARY)
        return binary

    def _search_pass(
        self,
        channel: np.ndarray,
        level: int,
        total_area: float,
        area_lower_ratio: float,
        area_upper_ratio: float,
    ) -> List[np.ndarray]:
        """Contour extraction and classification for a single pass."""
        binary = self._binarize(channel, level)
        contours, _ = cv2.findContours(binary, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

        found = []
        for contour in contours:
            contour_float = to_float_contour(contour)
            epsilon = (
                cv2.arcLength(contour_float, True)
                * self.config.search.approx_epsilon_ratio
            )
            approx = cv2.approxPolyDP(contour_float, epsilon, True)

            if is_rectangle(
                approx,
                total_area,
                area_lower_ratio,
                area_upper_ratio,
                max_cosine=self.config.classification.max_cosine,
                epsilon=self.config.classification.cosine_epsilon,
            ):
                found.append(approx.reshape(4, 2))

        logger.debug(
            f"Level {level}: {len(contours)} contours, {len(found)} rectangles"
        )
        return found


def find_rectangle(
    image: Union[np.ndarray, ImageBuffer],
    area_lower_ratio: float = DEFAULT_AREA_LOWER_RATIO,
    area_upper_ratio: float = DEFAULT_AREA_UPPER_RATIO,
    config: Optional[DetectionConfig] = None,
) -> DetectionResult:
    """
    Convenience function for one-shot rectangle detection.

    Example:
        >>> image = cv2.imread("document.jpg")
        >>> result = find_rectangle(image, 0.2, 0.98)
        >>> print(result.get_message())
    """
    detector = RectangleDetector(config=config)
    return detector.find_rectangle(image, area_lower_ratio, area_upper_ratio)
