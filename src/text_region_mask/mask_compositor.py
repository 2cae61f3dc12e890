"""Painting of selected regions into the binary output mask."""

import cv2
import numpy as np

DEFAULT_FILL_VALUE = 255


class MaskCompositor:
    """Builds the output mask region by region and hands back a new mask."""

    def __init__(self, fill_value=DEFAULT_FILL_VALUE, verbose=False):
        self.fill_value = fill_value
        self.verbose = verbose

    def blank_mask(self, shape):
        """Mask of the given (height, width) filled with the background color."""
        return np.full(shape[:2], self.fill_value, dtype=np.uint8)

    @staticmethod
    def _paint_into(target, padded_luma, box, thresholds):
        """Classify one box of `target` in place, clipped to its bounds."""
        rows, cols = target.shape[:2]
        x, y, w, h = box
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, cols), min(y + h, rows)
        if x0 >= x1 or y0 >= y1:
            return

        window = padded_luma[y0:y1, x0:x1]
        target[y0:y1, x0:x1] = np.where(
            window > thresholds.foreground, thresholds.bg_color, thresholds.fg_color
        ).astype(np.uint8)

    @classmethod
    def paint_region(cls, mask, padded_luma, box, thresholds):
        """Return a copy of `mask` with one region's box classified.

        Pixels whose luma exceeds the foreground estimate get the background
        color, all others the foreground color. The box is clipped to the mask.

        Args:
            mask: Current mask (not modified)
            padded_luma: Luma of the padded image, same shape as the mask
            box: (x, y, w, h) in padded coordinates
            thresholds: ThresholdPair for the region

        Returns:
            New mask
        """
        result = mask.copy()
        cls._paint_into(result, padded_luma, box, thresholds)
        return result

    def compose(self, padded_luma, painted):
        """Paint every (region, thresholds) pair in order onto a blank mask.

        Later regions overwrite earlier ones where their boxes overlap. A
        region that fails to paint is left out and the others still paint.

        Returns:
            Tuple of (mask, list of indices of regions that failed)
        """
        mask = self.blank_mask(padded_luma.shape)
        failed = []
        for region, thresholds in painted:
            try:
                self._paint_into(mask, padded_luma, region.box, thresholds)
            except (ValueError, cv2.error) as e:
                failed.append(region.index)
                if self.verbose:
                    print(f"[WARN] Could not paint region {region.index}: {e}")
        return mask, failed
