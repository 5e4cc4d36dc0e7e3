"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import pytest

# Gray document on a white 600x800 canvas covering ~40% of the area
DOCUMENT_CORNERS = [[160, 100], [640, 110], [650, 500], [150, 490]]
DOCUMENT_AREA = 191100.0
DOCUMENT_GRAY = 128


@pytest.fixture
def sample_quadrilateral_points():
    """Fixture providing 4 unordered corners of an upright-ish quadrilateral."""
    import numpy as np

    return np.array(
        [
            [300, 150],  # Top-right area
            [100, 200],  # Top-left area
            [320, 400],  # Bottom-right area
            [80, 380],  # Bottom-left area
        ],
        dtype=np.float32,
    )


@pytest.fixture
def document_image():
    """
    Fixture providing a white canvas with a black-bordered gray quadrilateral.

    Returns:
        Tuple of (image, corners, true_area).
    """
    import cv2
    import numpy as np

    image = np.full((600, 800, 3), 255, dtype=np.uint8)
    pts = np.array(DOCUMENT_CORNERS, dtype=np.int32)

    cv2.fillPoly(image, [pts], (DOCUMENT_GRAY,) * 3)
    cv2.polylines(image, [pts], True, (0, 0, 0), 4)

    return image, pts.astype(np.float32), DOCUMENT_AREA


@pytest.fixture
def blank_image():
    """Fixture providing an all-white canvas with nothing drawn on it."""
    import numpy as np

    return np.full((600, 800, 3), 255, dtype=np.uint8)


@pytest.fixture
def noise_image():
    """Fixture providing a reproducible random color image."""
    import numpy as np

    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
