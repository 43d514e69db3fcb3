"""
Bounding Volume Hierarchy (BVH) for accelerating ray-object intersection.

The BVH is a binary tree where each node holds an AABB and two children.
Children are either further BVH nodes or scene primitives, so a tree
satisfies the same Hittable contract as any leaf and can be dropped in
wherever a scene is expected.

Construction is a median split: objects are sorted by the lower corner of
their boxes along the widest axis of the enclosing box and the sorted list
is cut in half. No attempt is made at an optimal (SAH) split.
"""

from __future__ import annotations
import logging
from typing import Iterable, Optional, Sequence

from .ray import Ray
from .shapes import Hittable, HitRecord, AABB

logger = logging.getLogger(__name__)


def _box_of(obj: Hittable, time0: float, time1: float) -> AABB:
    box = obj.bounding_box(time0, time1)
    if box is None:
        raise ValueError(f"Cannot place unbounded object in a BVH: {obj!r}")
    return box


class BVHNode(Hittable):
    """A node in the Bounding Volume Hierarchy tree.

    A node built from a single object keeps it as `left` and leaves `right`
    empty; every other node has two children.
    """

    def __init__(self, objects: Sequence[Hittable], time0: float = 0.0, time1: float = 1.0):
        """Build a BVH over a list of objects.

        Args:
            objects: Non-empty sequence of bounded hittable objects
            time0: Start of the exposure interval (for moving objects)
            time1: End of the exposure interval

        Raises:
            ValueError: If objects is empty or contains an unbounded object
        """
        if len(objects) == 0:
            raise ValueError("Cannot build a BVH from an empty object list")

        boxes = [(obj, _box_of(obj, time0, time1)) for obj in objects]

        self.left: Hittable
        self.right: Optional[Hittable] = None
        self.bbox: AABB

        if len(boxes) == 1:
            self.left = objects[0]
            self.bbox = boxes[0][1]
            return

        enclosing = boxes[0][1]
        for _, box in boxes[1:]:
            enclosing = AABB.surrounding_box(enclosing, box)
        axis = enclosing.longest_axis()

        boxes.sort(key=lambda item: item[1].minimum[axis])

        if len(boxes) == 2:
            self.left = boxes[0][0]
            self.right = boxes[1][0]
            self.bbox = enclosing
            return

        mid = len(boxes) // 2
        ordered = [obj for obj, _ in boxes]
        self.left = BVHNode(ordered[:mid], time0, time1)
        self.right = BVHNode(ordered[mid:], time0, time1)
        self.bbox = enclosing

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray intersection with this subtree."""
        if not self.bbox.hit(ray, t_min, t_max):
            return None

        hit_left = self.left.hit(ray, t_min, t_max)
        if self.right is None:
            return hit_left

        # A left hit bounds how far the right subtree needs to look
        hit_right = self.right.hit(ray, t_min, hit_left.t if hit_left else t_max)

        return hit_right if hit_right is not None else hit_left

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Return the box computed at construction time."""
        return self.bbox

    def depth(self) -> int:
        """Number of node levels in this subtree, counting this node."""
        child_depths = [
            child.depth() for child in (self.left, self.right)
            if isinstance(child, BVHNode)
        ]
        return 1 + max(child_depths, default=0)

    def __len__(self) -> int:
        """Number of primitives reachable from this node."""
        count = 0
        for child in (self.left, self.right):
            if child is None:
                continue
            count += len(child) if isinstance(child, BVHNode) else 1
        return count

    def __repr__(self) -> str:
        return f"BVHNode(objects={len(self)}, bbox={self.bbox})"


def build_bvh(objects: Iterable[Hittable], time0: float = 0.0, time1: float = 1.0) -> BVHNode:
    """Build a BVH from any iterable of hittables (including a HittableList).

    The caller's collection is copied, never reordered.

    Args:
        objects: The scene primitives
        time0: Start of the exposure interval
        time1: End of the exposure interval

    Returns:
        Root node of the hierarchy
    """
    items = list(objects)
    root = BVHNode(items, time0, time1)
    logger.debug("Built BVH over %d objects (depth %d)", len(items), root.depth())
    return root
