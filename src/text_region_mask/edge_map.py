"""Edge map construction: pad the source and OR per-channel Canny edges."""

from dataclasses import dataclass

import cv2
import numpy as np

DEFAULT_MARGIN = 50
DEFAULT_CANNY_LOW = 200
DEFAULT_CANNY_HIGH = 250


@dataclass(frozen=True)
class EdgeMap:
    """Padded source image and the binary edge image computed from it."""

    padded: np.ndarray
    edges: np.ndarray
    margin: int

    @property
    def size(self):
        """(width, height) of the padded image."""
        return self.edges.shape[1], self.edges.shape[0]


class EdgeMapBuilder:
    """Builds a single binary edge image from a color or grayscale image."""

    def __init__(
        self,
        margin=DEFAULT_MARGIN,
        canny_low=DEFAULT_CANNY_LOW,
        canny_high=DEFAULT_CANNY_HIGH,
        border_value=0,
        verbose=False,
    ):
        """Initialize the builder.

        Args:
            margin: Constant border added on every side before edge detection
            canny_low: Lower hysteresis threshold for Canny
            canny_high: Upper hysteresis threshold for Canny
            border_value: Fill value of the added border
            verbose: Enable verbose logging
        """
        if margin < 0:
            raise ValueError(f"Margin must be non-negative, got {margin}")
        if canny_low > canny_high:
            raise ValueError(
                f"Canny low threshold {canny_low} exceeds high threshold {canny_high}"
            )
        self.margin = margin
        self.canny_low = canny_low
        self.canny_high = canny_high
        self.border_value = border_value
        self.verbose = verbose

    def pad(self, image):
        """Return a copy of the image with the constant margin on every side."""
        m = self.margin
        return cv2.copyMakeBorder(
            image, m, m, m, m, cv2.BORDER_CONSTANT, value=self.border_value
        )

    def build(self, image):
        """Pad the image and compute the union of its per-channel edge maps.

        Args:
            image: Source image, H x W x 3 or H x W, uint8

        Returns:
            EdgeMap holding the padded image and the binary edge image
        """
        validate_image(image)
        padded = self.pad(image)

        channels = cv2.split(padded) if padded.ndim == 3 else [padded]
        edges = np.zeros(padded.shape[:2], dtype=np.uint8)
        for channel in channels:
            edges = cv2.bitwise_or(
                edges, cv2.Canny(channel, self.canny_low, self.canny_high)
            )

        if self.verbose:
            print(
                f"Edge map {edges.shape[1]}x{edges.shape[0]} "
                f"({len(channels)} channel(s)), "
                f"{np.count_nonzero(edges)} edge pixels"
            )

        return EdgeMap(padded=padded, edges=edges, margin=self.margin)


def validate_image(image):
    """Raise ValueError unless the image is a non-empty 2-D or 3-channel array."""
    if image is None or not isinstance(image, np.ndarray) or image.size == 0:
        raise ValueError("Image is empty")
    if image.ndim == 3 and image.shape[2] == 3:
        return
    if image.ndim == 2:
        return
    raise ValueError(f"Unsupported image shape {image.shape}")
