"""Geometric and closure tests deciding whether a contour looks like text."""

from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

DEFAULT_MIN_ASPECT_RATIO = 0.1
DEFAULT_MAX_ASPECT_RATIO = 10.0
DEFAULT_MIN_BOX_AREA = 15
DEFAULT_MAX_AREA_FRACTION = 0.2
DEFAULT_CLOSURE_TOLERANCE = 1
DEFAULT_FRAME_TOLERANCE = 2


@dataclass(frozen=True)
class Region:
    """A contour paired with its axis-aligned bounding box (x, y, w, h)."""

    index: int
    contour: np.ndarray
    box: Tuple[int, int, int, int]


def bounding_box(contour):
    """Axis-aligned bounding rectangle (x, y, w, h) of a point sequence."""
    x, y, w, h = cv2.boundingRect(np.asarray(contour, dtype=np.int32).reshape(-1, 2))
    return int(x), int(y), int(w), int(h)


class RegionClassifier:
    """Pure keep/reject verdicts for individual contours."""

    def __init__(
        self,
        min_aspect_ratio=DEFAULT_MIN_ASPECT_RATIO,
        max_aspect_ratio=DEFAULT_MAX_ASPECT_RATIO,
        min_box_area=DEFAULT_MIN_BOX_AREA,
        max_area_fraction=DEFAULT_MAX_AREA_FRACTION,
        closure_tolerance=DEFAULT_CLOSURE_TOLERANCE,
        frame_tolerance=DEFAULT_FRAME_TOLERANCE,
    ):
        """Initialize the classifier.

        Args:
            min_aspect_ratio: Smallest accepted width/height ratio
            max_aspect_ratio: Largest accepted width/height ratio
            min_box_area: Smallest accepted bounding box area (inclusive)
            max_area_fraction: Largest accepted box area as a fraction of the image area
            closure_tolerance: Max per-axis distance between first and last point
            frame_tolerance: Slack when matching a box against the source frame
        """
        self.min_aspect_ratio = min_aspect_ratio
        self.max_aspect_ratio = max_aspect_ratio
        self.min_box_area = min_box_area
        self.max_area_fraction = max_area_fraction
        self.closure_tolerance = closure_tolerance
        self.frame_tolerance = frame_tolerance

    def has_text_ratio(self, contour, image_size):
        """Check aspect ratio and box area against the image size.

        Args:
            contour: N x 2 array of (x, y) points
            image_size: (width, height) of the image the contour was traced in

        Returns:
            True if the bounding box could hold a glyph
        """
        _, _, w, h = bounding_box(contour)
        if h == 0:
            return False

        ratio = w / h
        if ratio < self.min_aspect_ratio or ratio > self.max_aspect_ratio:
            return False

        box_area = w * h
        image_area = image_size[0] * image_size[1]
        return self.min_box_area <= box_area <= image_area * self.max_area_fraction

    def is_closed(self, contour):
        """True when the first and last points are within the closure tolerance."""
        points = np.asarray(contour).reshape(-1, 2)
        if len(points) == 0:
            return False
        first, last = points[0], points[-1]
        tol = self.closure_tolerance
        return abs(int(first[0]) - int(last[0])) <= tol and abs(
            int(first[1]) - int(last[1])
        ) <= tol

    def spans_frame(self, contour, frame):
        """True when the box reaches every side of the source frame.

        The seam between the source and its constant border traces as a
        contour pair hugging the frame; neither member is a text region.

        Args:
            contour: N x 2 array of (x, y) points
            frame: (x, y, w, h) of the source inside the padded image
        """
        if frame is None or len(contour) == 0:
            return False
        x, y, w, h = bounding_box(contour)
        fx, fy, fw, fh = frame
        tol = self.frame_tolerance
        return (
            x <= fx + tol
            and y <= fy + tol
            and x + w >= fx + fw - tol
            and y + h >= fy + fh - tol
        )

    def keep(self, contour, image_size):
        """Keep verdict: plausible text shape and a closed boundary."""
        if len(contour) == 0:
            return False
        return self.has_text_ratio(contour, image_size) and self.is_closed(contour)

    @staticmethod
    def make_region(index, contour):
        """Pair a contour with its bounding box."""
        return Region(index=index, contour=contour, box=bounding_box(contour))
