"""
Full End-to-End Pipeline

Chains rectangle detection and perspective rectification: the image is
searched for the largest document outline and, if one is found, the same
image and outline are handed to the rectifier.
"""

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

from src.common.types import ImageBuffer, as_image_buffer
from src.detection.config_loader import DetectionConfig
from src.detection.config_loader import load_config as load_detection_config
from src.detection.processor import RectangleDetector
from src.detection.types import DetectionResult
from src.rectification.config_loader import load_config as load_rectification_config
from src.rectification.processor import PerspectiveRectifier
from src.rectification.types import RectificationConfig
from src.utils.constants import (
    CORNER_NAMES,
    DEFAULT_AREA_LOWER_RATIO,
    DEFAULT_AREA_UPPER_RATIO,
)
from src.utils.io import load_image, save_image, save_json
from src.utils.visualization import draw_quadrilateral, mask_region

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}


@dataclass
class ScanResult:
    """
    Output from one document scan.

    Attributes:
        detection: Result of the rectangle search.
        rectified_image: Flattened document, None when nothing was found.
    """

    detection: DetectionResult
    rectified_image: Optional[np.ndarray]

    def is_success(self) -> bool:
        return self.rectified_image is not None


class DocumentScanner:
    """
    End-to-end document scan: detect the outline, then rectify it.

    Example:
        >>> scanner = DocumentScanner()
        >>> result = scanner.scan(cv2.imread("document.jpg"))
        >>> if result.is_success():
        ...     cv2.imwrite("flat.jpg", result.rectified_image)
    """

    def __init__(
        self,
        detection_config: Optional[DetectionConfig] = None,
        rectification_config: Optional[RectificationConfig] = None,
        area_lower_ratio: float = DEFAULT_AREA_LOWER_RATIO,
        area_upper_ratio: float = DEFAULT_AREA_UPPER_RATIO,
    ):
        self.detector = RectangleDetector(config=detection_config)
        self.rectifier = PerspectiveRectifier(config=rectification_config)
        self.area_lower_ratio = area_lower_ratio
        self.area_upper_ratio = area_upper_ratio

    def scan(self, image: Union[np.ndarray, ImageBuffer]) -> ScanResult:
        """
        Detect and rectify the document in an image.

        Raises:
            InvalidInputError: If the image is invalid or the detected outline
                cannot be ordered.
        """
        buffer = as_image_buffer(image)

        detection = self.detector.find_rectangle(
            buffer, self.area_lower_ratio, self.area_upper_ratio
        )
        if not detection.is_found():
            return ScanResult(detection=detection, rectified_image=None)

        rectified = self.rectifier.rectify(buffer, detection.quadrilateral)
        return ScanResult(detection=detection, rectified_image=rectified)

    def scan_file(
        self,
        input_path: Path,
        output_path: Path,
        overlay_path: Optional[Path] = None,
        corners_path: Optional[Path] = None,
        mask: Optional[Sequence[float]] = None,
    ) -> ScanResult:
        """
        Scan an image file and write the rectified document.

        Args:
            input_path: Source image.
            output_path: Destination for the rectified image (written only
                when a document was found).
            overlay_path: Optional destination for the source image with the
                detected outline drawn on it.
            corners_path: Optional JSON file receiving the ordered corners.
            mask: Optional (x, y, width, height) ratios of the rectified image
                to black out.

        Returns:
            ScanResult for the file.

        Raises:
            FileNotFoundError: If the input image cannot be read.
            InvalidInputError: If the image or detected outline is invalid.
        """
        image = load_image(input_path)
        result = self.scan(image)

        if corners_path is not None:
            save_json(self._corners_record(input_path, result), corners_path)

        if not result.is_success():
            logger.warning(f"{input_path}: {result.detection.get_message()}")
            return result

        if overlay_path is not None:
            save_image(
                draw_quadrilateral(image, result.detection.quadrilateral), overlay_path
            )

        rectified = result.rectified_image
        if mask is not None:
            rectified = mask_region(rectified, *mask)

        save_image(rectified, output_path)
        logger.info(f"{input_path} -> {output_path}")
        return result

    def _corners_record(self, input_path: Path, result: ScanResult) -> dict:
        record = {
            "source": str(input_path),
            "status": result.detection.status.value,
            "area": result.detection.area,
            "corners": None,
        }
        if result.detection.is_found():
            ordered = self.rectifier.order_corners(result.detection.quadrilateral)
            record["corners"] = {
                name: [float(x), float(y)] for name, (x, y) in zip(CORNER_NAMES, ordered)
            }
        return record


def _collect_inputs(input_path: Path, batch: bool) -> List[Path]:
    if not batch:
        return [input_path]
    if not input_path.is_dir():
        raise NotADirectoryError(f"Batch input is not a directory: {input_path}")
    return sorted(
        p for p in input_path.iterdir() if p.suffix.lower() in IMAGE_EXTENSIONS
    )


def _target_path(base: Optional[Path], source: Path, batch: bool, suffix: str):
    if base is None:
        return None
    if batch:
        return base / f"{source.stem}{suffix}"
    return base


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command line entry point. Returns the process exit status."""
    parser = argparse.ArgumentParser(
        description="Detect the largest document in a photo and rectify it",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument('--input', type=str, required=True, help='Input image or directory')
    parser.add_argument('--output', type=str, required=True, help='Output image or directory')
    parser.add_argument('--batch', action='store_true', help='Process directory in batch mode')
    parser.add_argument('--area-lower', type=float, default=DEFAULT_AREA_LOWER_RATIO,
                        help='Minimum document area as a ratio of the image area')
    parser.add_argument('--area-upper', type=float, default=DEFAULT_AREA_UPPER_RATIO,
                        help='Maximum document area as a ratio of the image area')
    parser.add_argument('--overlay', type=str, default=None,
                        help='Write the source with the detected outline (file or directory)')
    parser.add_argument('--corners-json', type=str, default=None,
                        help='Write the ordered corners as JSON (file or directory)')
    parser.add_argument('--mask', type=float, nargs=4, default=None,
                        metavar=('X', 'Y', 'W', 'H'),
                        help='Black out a region of the output, as ratios of its size')
    parser.add_argument('--detection-config', type=str, default=None,
                        help='Detection YAML config (defaults to the bundled one)')
    parser.add_argument('--rectification-config', type=str, default=None,
                        help='Rectification YAML config (defaults to the bundled one)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    detection_config = (
        load_detection_config(Path(args.detection_config))
        if args.detection_config else None
    )
    rectification_config = (
        load_rectification_config(Path(args.rectification_config))
        if args.rectification_config else None
    )
    scanner = DocumentScanner(
        detection_config=detection_config,
        rectification_config=rectification_config,
        area_lower_ratio=args.area_lower,
        area_upper_ratio=args.area_upper,
    )

    output = Path(args.output)
    overlay = Path(args.overlay) if args.overlay else None
    corners = Path(args.corners_json) if args.corners_json else None

    inputs = _collect_inputs(Path(args.input), args.batch)
    if not inputs:
        logger.error(f"No images found in {args.input}")
        return 1

    failures = 0
    for source in inputs:
        try:
            result = scanner.scan_file(
                source,
                _target_path(output, source, args.batch, source.suffix),
                overlay_path=_target_path(overlay, source, args.batch, "_overlay.png"),
                corners_path=_target_path(corners, source, args.batch, ".json"),
                mask=args.mask,
            )
        except (OSError, ValueError) as e:
            logger.error(f"{source}: {e}")
            failures += 1
            continue

        if not result.is_success():
            failures += 1

    logger.info(f"Rectified {len(inputs) - failures}/{len(inputs)} image(s)")
    return 0 if failures == 0 else 1


if __name__ == '__main__':
    raise SystemExit(main())
