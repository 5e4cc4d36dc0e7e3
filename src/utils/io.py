"""
I/O Utilities

File input/output operations.
"""

import json
from pathlib import Path
from typing import Dict, Any

import cv2
import numpy as np


def load_image(file_path: Path) -> np.ndarray:
    """
    Load an image as a BGR uint8 array.

    Raises:
        FileNotFoundError: If the file is missing or cannot be decoded.
    """
    image = cv2.imread(str(file_path), cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Could not read image: {file_path}")
    return image


def save_image(image: np.ndarray, file_path: Path):
    """Save image, creating parent directories as needed."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(file_path), image):
        raise IOError(f"Could not write image: {file_path}")


def save_json(data: Dict[str, Any], file_path: Path, indent: int = 2):
    """Save data to JSON file."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w') as f:
        json.dump(data, f, indent=indent)

