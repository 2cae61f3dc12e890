"""Contour tracing and the parent/child tree over traced contours."""

from dataclasses import dataclass, field
from typing import List, Optional

import cv2
import numpy as np


@dataclass
class HierarchyNode:
    """Tree links for one contour. Absent links are None."""

    index: int
    parent: Optional[int] = None
    first_child: Optional[int] = None
    next_sibling: Optional[int] = None
    prev_sibling: Optional[int] = None
    children: List[int] = field(default_factory=list)


class ContourHierarchy:
    """Arena of traced contours with explicit tree nodes indexed by contour id."""

    def __init__(self, contours, nodes):
        if len(contours) != len(nodes):
            raise ValueError(
                f"{len(contours)} contours but {len(nodes)} hierarchy nodes"
            )
        self.contours = contours
        self.nodes = nodes

    def __len__(self):
        return len(self.contours)

    @classmethod
    def extract(cls, edges):
        """Trace every closed boundary of a binary edge image.

        Uses the full tree retrieval mode and keeps every boundary point.

        Args:
            edges: Binary edge image (uint8)

        Returns:
            ContourHierarchy over all traced contours
        """
        contours, hierarchy = cv2.findContours(
            edges, cv2.RETR_TREE, cv2.CHAIN_APPROX_NONE
        )
        return cls.from_opencv(contours, hierarchy)

    @classmethod
    def from_opencv(cls, contours, hierarchy):
        """Build the tree from OpenCV's [next, prev, first_child, parent] rows.

        Negative entries mean "no link". Child lists follow the sibling chain
        starting at the first child; siblings reachable only backwards from
        the first child are appended after it.
        """
        points = [np.asarray(c, dtype=np.int32).reshape(-1, 2) for c in contours]
        if hierarchy is None or len(points) == 0:
            return cls([], [])

        rows = np.asarray(hierarchy).reshape(-1, 4)

        def link(value):
            return int(value) if value >= 0 else None

        nodes = [
            HierarchyNode(
                index=i,
                next_sibling=link(row[0]),
                prev_sibling=link(row[1]),
                first_child=link(row[2]),
                parent=link(row[3]),
            )
            for i, row in enumerate(rows)
        ]

        for node in nodes:
            node.children = _sibling_chain(nodes, node.first_child)

        return cls(points, nodes)

    def children(self, index):
        """Indices of the direct children of a contour."""
        return list(self.nodes[index].children)

    def ancestors(self, index):
        """Yield ancestor indices from the parent up to the root."""
        seen = {index}
        parent = self.nodes[index].parent
        while parent is not None and parent not in seen:
            seen.add(parent)
            yield parent
            parent = self.nodes[parent].parent

    def descendants(self, index):
        """All descendant indices of a contour, depth first."""
        result = []
        stack = list(reversed(self.nodes[index].children))
        seen = {index}
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            stack.extend(reversed(self.nodes[current].children))
        return result

    def roots(self):
        """Indices of contours without a parent."""
        return [node.index for node in self.nodes if node.parent is None]


def _sibling_chain(nodes, first):
    """Every member of the sibling list containing `first`, each exactly once."""
    if first is None:
        return []

    chain = []
    seen = set()
    current = first
    while current is not None and current not in seen:
        seen.add(current)
        chain.append(current)
        current = nodes[current].next_sibling

    current = nodes[first].prev_sibling
    while current is not None and current not in seen:
        seen.add(current)
        chain.append(current)
        current = nodes[current].prev_sibling

    return chain
