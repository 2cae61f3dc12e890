"""Coarse plate bounding box via Otsu threshold, erosion and a rotated rectangle."""

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

DEFAULT_KERNEL_SIZE = (5, 3)
DEFAULT_LINE_VALUE = 255


@dataclass(frozen=True)
class PlateBounds:
    """Rotated rectangle around the surviving foreground and the annotated image."""

    box: Optional[Tuple[Tuple[float, float], Tuple[float, float], float]]
    corners: Optional[np.ndarray]
    image: np.ndarray


class PlateBoundsEstimator:
    """Finds the minimum-area rectangle around thresholded, eroded foreground."""

    def __init__(
        self,
        kernel_size=DEFAULT_KERNEL_SIZE,
        line_value=DEFAULT_LINE_VALUE,
        verbose=False,
    ):
        """Initialize the estimator.

        Args:
            kernel_size: (width, height) of the rectangular erosion element
            line_value: Intensity the rectangle edges are drawn with
            verbose: Enable verbose logging
        """
        self.kernel_size = tuple(kernel_size)
        self.line_value = line_value
        self.verbose = verbose

    def threshold(self, image):
        """Inverted Otsu binarization of the grayscale image."""
        gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY) if image.ndim == 3 else image
        _, binary = cv2.threshold(
            gray, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU
        )
        return binary

    def estimate(self, image):
        """Estimate the plate rectangle.

        Args:
            image: RGB or grayscale uint8 image

        Returns:
            PlateBounds; box and corners are None when nothing survives erosion
        """
        binary = self.threshold(image)
        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, self.kernel_size)
        eroded = cv2.erode(binary, kernel)

        points = cv2.findNonZero(eroded)
        if points is None or len(points) == 0:
            if self.verbose:
                print("No foreground left after erosion, plate bounds unavailable")
            return PlateBounds(box=None, corners=None, image=eroded)

        box = cv2.minAreaRect(points)
        corners = np.intp(np.round(cv2.boxPoints(box)))

        annotated = eroded.copy()
        for i in range(4):
            start = tuple(int(v) for v in corners[i])
            end = tuple(int(v) for v in corners[(i + 1) % 4])
            cv2.line(annotated, start, end, self.line_value, 1, cv2.LINE_AA)

        if self.verbose:
            (cx, cy), (bw, bh), angle = box
            print(
                f"Plate bounds: center=({cx:.1f}, {cy:.1f}), "
                f"size={bw:.1f}x{bh:.1f}, angle={angle:.1f}"
            )

        return PlateBounds(box=box, corners=corners, image=annotated)
