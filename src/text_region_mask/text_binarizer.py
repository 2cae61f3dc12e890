"""Text region binarization: edge map -> contour tree -> regions -> mask."""

import cv2
import numpy as np

from .contour_hierarchy import ContourHierarchy
from .edge_map import (
    DEFAULT_CANNY_HIGH,
    DEFAULT_CANNY_LOW,
    DEFAULT_MARGIN,
    EdgeMapBuilder,
    validate_image,
)
from .mask_compositor import MaskCompositor
from .region_classifier import (
    DEFAULT_MAX_AREA_FRACTION,
    DEFAULT_MIN_BOX_AREA,
    RegionClassifier,
)
from .region_selector import DEFAULT_MAX_KEPT_DESCENDANTS, RegionSelector
from .threshold_estimator import ThresholdEstimator, luma_image


class TextBinarizer:
    """Separates text strokes from their local background in a plate or document crop."""

    def __init__(
        self,
        margin=DEFAULT_MARGIN,
        canny_low=DEFAULT_CANNY_LOW,
        canny_high=DEFAULT_CANNY_HIGH,
        min_box_area=DEFAULT_MIN_BOX_AREA,
        max_area_fraction=DEFAULT_MAX_AREA_FRACTION,
        max_kept_descendants=DEFAULT_MAX_KEPT_DESCENDANTS,
        verbose=False,
    ):
        """Initialize the binarizer.

        Args:
            margin: Constant border added around the source before edge detection
            canny_low: Lower Canny hysteresis threshold
            canny_high: Upper Canny hysteresis threshold
            min_box_area: Smallest bounding box area of a text region
            max_area_fraction: Largest region box area relative to the padded image
            max_kept_descendants: Max kept nested contours for a region to be selected
            verbose: Enable verbose logging
        """
        self.edge_builder = EdgeMapBuilder(
            margin=margin,
            canny_low=canny_low,
            canny_high=canny_high,
            verbose=verbose,
        )
        self.classifier = RegionClassifier(
            min_box_area=min_box_area,
            max_area_fraction=max_area_fraction,
        )
        self.selector = RegionSelector(
            self.classifier,
            max_kept_descendants=max_kept_descendants,
            verbose=verbose,
        )
        self.estimator = ThresholdEstimator(margin=margin, verbose=verbose)
        self.compositor = MaskCompositor(verbose=verbose)
        self.margin = margin
        self.verbose = verbose
        self.last_stats = {}
        self.last_edge_map = None
        self.last_regions = []

    def source_frame(self, image):
        """(x, y, w, h) of the source inside the padded image, or None without padding."""
        if self.margin == 0:
            return None
        h, w = image.shape[:2]
        return self.margin, self.margin, w, h

    def find_regions(self, image):
        """Run edge detection, contour tracing and region selection.

        Args:
            image: RGB or grayscale uint8 source image

        Returns:
            Tuple of (EdgeMap, ContourHierarchy, selected regions, decisions)
        """
        edge_map = self.edge_builder.build(image)
        hierarchy = ContourHierarchy.extract(edge_map.edges)

        if self.verbose:
            print(f"Traced {len(hierarchy)} contours")

        regions, decisions = self.selector.select(
            hierarchy, edge_map.size, frame=self.source_frame(image)
        )
        return edge_map, hierarchy, regions, decisions

    def _estimate_regions(self, image, regions):
        """Pair each region with its thresholds, skipping regions that fail."""
        source_luma = luma_image(image)
        painted = []
        skipped = 0
        for region in regions:
            try:
                thresholds = self.estimator.estimate(source_luma, region)
            except (ValueError, cv2.error) as e:
                skipped += 1
                if self.verbose:
                    print(f"[WARN] Skipping region {region.index}: {e}")
                continue
            painted.append((region, thresholds))
        return painted, skipped

    def _record_stats(self, hierarchy, decisions, painted, skipped, mask):
        # 0 is the dark color whichever polarity a region was painted with
        self.last_stats = {
            "contours": len(hierarchy),
            "candidates": sum(1 for d in decisions if d.kept),
            "selected": sum(1 for d in decisions if d.selected),
            "painted": painted,
            "skipped": skipped,
            "dark_coverage": np.count_nonzero(mask == 0) / mask.size * 100,
        }

    def binarize(self, image, strip_margin=False):
        """Produce the two-level text mask for an image.

        Args:
            image: RGB or grayscale uint8 source image
            strip_margin: Crop the mask back to the source dimensions

        Returns:
            uint8 mask containing only 0 and 255, padded unless strip_margin is set
        """
        validate_image(image)
        edge_map, hierarchy, regions, decisions = self.find_regions(image)

        painted, skipped = self._estimate_regions(image, regions)
        padded_luma = luma_image(edge_map.padded)
        mask, failed = self.compositor.compose(padded_luma, painted)
        painted_count = len(painted) - len(failed)
        skipped += len(failed)

        self.last_edge_map = edge_map
        self.last_regions = regions
        self._record_stats(hierarchy, decisions, painted_count, skipped, mask)

        if self.verbose:
            print(
                f"Selected {self.last_stats['selected']} region(s), "
                f"painted {painted_count}, skipped {skipped}"
            )

        if strip_margin:
            m = self.margin
            return mask[m : mask.shape[0] - m, m : mask.shape[1] - m].copy()
        return mask

    def preview_regions(self, image=None, output_path=None):
        """Edge map with every selected region's bounding box drawn on it.

        Without an image the edge map and regions of the last binarize run
        are reused.

        Args:
            image: RGB or grayscale uint8 source image, or None for the last run
            output_path: Optional path to save the preview

        Returns:
            RGB preview image (padded dimensions)
        """
        if image is None:
            if self.last_edge_map is None:
                raise ValueError("No image given and no previous run to preview")
            edge_map, regions = self.last_edge_map, self.last_regions
        else:
            edge_map, _, regions, _ = self.find_regions(image)
        preview = cv2.cvtColor(edge_map.edges, cv2.COLOR_GRAY2RGB)
        for region in regions:
            x, y, w, h = region.box
            cv2.rectangle(preview, (x, y), (x + w - 1, y + h - 1), (255, 0, 0), 1)

        if output_path:
            cv2.imwrite(str(output_path), cv2.cvtColor(preview, cv2.COLOR_RGB2BGR))
            if self.verbose:
                print(f"Region preview saved to {output_path}")

        return preview
