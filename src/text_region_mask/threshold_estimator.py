"""Per-region foreground/background intensity estimation."""

from dataclasses import dataclass

import numpy as np

from .edge_map import DEFAULT_MARGIN

LUMA_WEIGHTS = (0.3, 0.59, 0.11)

FOREGROUND_BRIGHT = 255
FOREGROUND_DARK = 0


@dataclass(frozen=True)
class ThresholdPair:
    """Foreground/background estimates and the colors painted for them."""

    foreground: float
    background: float
    fg_color: int
    bg_color: int


def luma(pixel):
    """Perceptual brightness of one RGB pixel (or a gray value), truncated to 8 bits."""
    if np.ndim(pixel) == 0:
        return int(pixel)
    r, g, b = (float(c) for c in pixel[:3])
    return int(LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b)


def luma_image(image):
    """Luma of every pixel as a uint8 array of the image's height and width."""
    if image.ndim == 2:
        return image.astype(np.uint8, copy=True)
    rgb = image[:, :, :3].astype(np.float64)
    weighted = (
        LUMA_WEIGHTS[0] * rgb[:, :, 0]
        + LUMA_WEIGHTS[1] * rgb[:, :, 1]
        + LUMA_WEIGHTS[2] * rgb[:, :, 2]
    )
    return weighted.astype(np.uint8)


def sample_luma(luma_img, x, y):
    """Luma at (x, y); points outside the image read as 0."""
    h, w = luma_img.shape[:2]
    if x < 0 or x >= w or y < 0 or y >= h:
        return 0
    return int(luma_img[y, x])


def background_sample_points(box):
    """Twelve points hugging the four corners of a box, just outside it.

    Args:
        box: (x, y, w, h)

    Returns:
        List of (x, y), three per corner: top-left, top-right, bottom-left, bottom-right
    """
    x, y, w, h = box
    right = x + w
    bottom = y + h
    return [
        (x - 1, y - 1), (x - 1, y), (x, y - 1),
        (right + 1, y - 1), (right + 1, y), (right, y - 1),
        (x - 1, bottom + 1), (x - 1, bottom), (x, bottom + 1),
        (right + 1, bottom + 1), (right, bottom + 1), (right + 1, bottom),
    ]


def median_of_samples(samples):
    """Median by partial selection; even counts average the two middle values."""
    values = np.asarray(samples, dtype=np.float64)
    n = len(values)
    if n == 0:
        raise ValueError("Cannot take the median of no samples")

    mid = n // 2
    if n % 2:
        return float(np.partition(values, mid)[mid])
    part = np.partition(values, [mid - 1, mid])
    return float((part[mid - 1] + part[mid]) / 2)


def polarity(foreground, background):
    """(fg_color, bg_color): bright foreground unless it is darker than its background."""
    if foreground >= background:
        return FOREGROUND_BRIGHT, FOREGROUND_DARK
    return FOREGROUND_DARK, FOREGROUND_BRIGHT


class ThresholdEstimator:
    """Estimates a ThresholdPair for each selected region from the unpadded source."""

    def __init__(self, margin=DEFAULT_MARGIN, verbose=False):
        """Initialize the estimator.

        Args:
            margin: Padding offset between contour coordinates and source coordinates
            verbose: Enable verbose logging
        """
        self.margin = margin
        self.verbose = verbose

    def foreground_estimate(self, source_luma, contour):
        """Mean luma over every contour point, read from the source."""
        points = np.asarray(contour).reshape(-1, 2)
        if len(points) == 0:
            raise ValueError("Contour has no points")
        m = self.margin
        total = sum(sample_luma(source_luma, int(px) - m, int(py) - m) for px, py in points)
        return total / len(points)

    def background_estimate(self, source_luma, box):
        """Median luma of the twelve corner samples around the box, in source space."""
        m = self.margin
        samples = [
            sample_luma(source_luma, px - m, py - m)
            for px, py in background_sample_points(box)
        ]
        return median_of_samples(samples)

    def estimate(self, source_luma, region):
        """ThresholdPair for one region.

        Args:
            source_luma: Luma image of the unpadded source
            region: Region in padded coordinates

        Returns:
            ThresholdPair with both estimates and the polarity colors
        """
        foreground = self.foreground_estimate(source_luma, region.contour)
        background = self.background_estimate(source_luma, region.box)
        fg_color, bg_color = polarity(foreground, background)

        if self.verbose:
            print(
                f"Region {region.index}: fg={foreground:.1f}, bg={background:.1f}, "
                f"{'bright' if fg_color == FOREGROUND_BRIGHT else 'dark'} text"
            )

        return ThresholdPair(
            foreground=foreground,
            background=background,
            fg_color=fg_color,
            bg_color=bg_color,
        )
