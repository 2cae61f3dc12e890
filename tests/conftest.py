"""Shared helpers for building synthetic contours and images."""

import numpy as np
import pytest


def square_contour(x, y, size):
    """Closed square outline whose last point sits next to its first."""
    return np.array(
        [(x, y), (x + size, y), (x + size, y + size), (x, y + size), (x, y + 1)],
        dtype=np.int32,
    )


@pytest.fixture
def glyph_image():
    """Light 200x120 crop with one dark 20x30 glyph."""
    image = np.full((120, 200, 3), 220, dtype=np.uint8)
    image[45:75, 90:110] = 40
    return image
