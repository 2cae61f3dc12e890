"""Text region binarization for OCR preprocessing."""

from .contour_hierarchy import ContourHierarchy, HierarchyNode
from .edge_map import EdgeMap, EdgeMapBuilder
from .mask_compositor import MaskCompositor
from .plate_bounds import PlateBounds, PlateBoundsEstimator
from .region_classifier import Region, RegionClassifier
from .region_selector import RegionDecision, RegionSelector
from .text_binarizer import TextBinarizer
from .threshold_estimator import ThresholdEstimator, ThresholdPair

__version__ = "0.1.0"

__all__ = [
    "ContourHierarchy",
    "EdgeMap",
    "EdgeMapBuilder",
    "HierarchyNode",
    "MaskCompositor",
    "PlateBounds",
    "PlateBoundsEstimator",
    "Region",
    "RegionClassifier",
    "RegionDecision",
    "RegionSelector",
    "TextBinarizer",
    "ThresholdEstimator",
    "ThresholdPair",
]
