"""Selection of text regions from the contour tree.

A contour survives when it is kept by the classifier, holds at most a few
kept descendants, and is not nested inside a kept ancestor that is itself
simple enough to stand as a region.
"""

from dataclasses import dataclass
from typing import Optional

from .region_classifier import RegionClassifier

DEFAULT_MAX_KEPT_DESCENDANTS = 2


@dataclass(frozen=True)
class RegionDecision:
    """Why a contour was selected or rejected."""

    index: int
    kept: bool
    selected: bool
    parent: Optional[int]
    num_children: int
    reason: str


class RegionSelector:
    """Combines classifier verdicts and descendant counts into the final region set."""

    def __init__(
        self,
        classifier=None,
        max_kept_descendants=DEFAULT_MAX_KEPT_DESCENDANTS,
        verbose=False,
    ):
        """Initialize the selector.

        Args:
            classifier: RegionClassifier used for keep verdicts
            max_kept_descendants: Max kept descendants for a region to be selected
            verbose: Print one decision line per contour
        """
        self.classifier = classifier or RegionClassifier()
        self.max_kept_descendants = max_kept_descendants
        self.verbose = verbose

    def keep_flags(self, hierarchy, image_size):
        """Classifier verdict for every contour, computed once per run."""
        return [
            self.classifier.keep(contour, image_size) for contour in hierarchy.contours
        ]

    @staticmethod
    def count_kept_descendants(hierarchy, index, kept):
        """Number of kept contours anywhere below `index`.

        Every child in the sibling list is expanded, so the count does not
        depend on the order siblings are linked in.
        """
        return sum(1 for i in hierarchy.descendants(index) if kept[i])

    @staticmethod
    def nearest_kept_ancestor(hierarchy, index, kept):
        """Closest ancestor whose verdict is keep, or None."""
        for ancestor in hierarchy.ancestors(index):
            if kept[ancestor]:
                return ancestor
        return None

    def seam_flags(self, hierarchy, frame):
        """True for contours tracing the seam around the source frame."""
        return [
            self.classifier.spans_frame(contour, frame) for contour in hierarchy.contours
        ]

    def decide(self, hierarchy, kept, seam=None):
        """Decision for every contour in traversal order.

        Contours flagged in `seam` must already be False in `kept`.
        """
        seam = seam or [False] * len(hierarchy)
        counts = [
            self.count_kept_descendants(hierarchy, i, kept)
            for i in range(len(hierarchy))
        ]
        limit = self.max_kept_descendants

        decisions = []
        for i in range(len(hierarchy)):
            parent = self.nearest_kept_ancestor(hierarchy, i, kept)
            num_children = counts[i]

            if seam[i]:
                selected, reason = False, "padding seam"
            elif not kept[i]:
                selected, reason = False, "shape or closure"
            elif num_children > limit:
                selected, reason = False, "too many kept descendants"
            elif parent is not None and counts[parent] <= limit:
                selected, reason = False, "covered by kept ancestor"
            else:
                selected, reason = True, "selected"

            decisions.append(
                RegionDecision(
                    index=i,
                    kept=kept[i],
                    selected=selected,
                    parent=parent,
                    num_children=num_children,
                    reason=reason,
                )
            )

            if self.verbose:
                if selected:
                    print(f"Region {i}: parent = {parent}; numChildren = {num_children}")
                else:
                    print(f"Region {i}: reject ({reason})")

        return decisions

    def select(self, hierarchy, image_size, frame=None):
        """Regions that survive selection, in ascending contour index order.

        Args:
            hierarchy: ContourHierarchy of the edge image
            image_size: (width, height) of the edge image
            frame: Optional (x, y, w, h) of the source inside the padded image;
                contours hugging it are never kept

        Returns:
            Tuple of (list of Region, list of RegionDecision)
        """
        kept = self.keep_flags(hierarchy, image_size)
        seam = self.seam_flags(hierarchy, frame)
        kept = [k and not s for k, s in zip(kept, seam)]
        decisions = self.decide(hierarchy, kept, seam)
        regions = [
            RegionClassifier.make_region(d.index, hierarchy.contours[d.index])
            for d in decisions
            if d.selected
        ]
        return regions, decisions
