"""
Bounding Volume Hierarchy (BVH) for accelerating ray-object intersection.

BVH is a tree structure where each node contains an AABB and either:
- Two child nodes (interior node)
- A list of primitives (leaf node)

Only bounded objects can be organized this way; see Scene.build for the
fallback when a scene contains an unbounded object.
"""

from __future__ import annotations
from typing import List, Optional

from .ray import Ray
from .shapes import Hittable, HitRecord, AABB, HittableList


def _centroid(obj: Hittable, axis: int) -> float:
    bbox = obj.bounding_box()
    if bbox is None:
        return 0.0
    return (bbox.minimum[axis] + bbox.maximum[axis]) / 2


class BVHNode(Hittable):
    """A node in the Bounding Volume Hierarchy tree.

    Interior nodes have two children; leaf nodes wrap a small HittableList.
    """

    def __init__(
        self,
        objects: List[Hittable],
        start: int = 0,
        end: Optional[int] = None,
        max_leaf_size: int = 4
    ):
        """Build a BVH from a slice of objects.

        Args:
            objects: List of hittable objects (reordered in place)
            start: Start index in the objects list
            end: End index (exclusive) in the objects list
            max_leaf_size: Maximum objects in a leaf node before splitting
        """
        if end is None:
            end = len(objects)

        self.left: Optional[Hittable] = None
        self.right: Optional[Hittable] = None
        self.bbox: Optional[AABB] = None

        object_span = end - start

        if object_span <= 0:
            return

        if object_span == 1:
            self.left = objects[start]
            self.bbox = self.left.bounding_box()
            return

        if object_span <= max_leaf_size:
            # Leaf keeps the original order so equal-distance ties stay stable
            self.left = HittableList(objects[start:end])
            self.bbox = self.left.bounding_box()
            return

        # Split along the axis where the boxes spread the most
        box = HittableList(objects[start:end]).bounding_box()
        extent = box.maximum - box.minimum
        axis = max(range(3), key=lambda i: extent[i])

        objects[start:end] = sorted(
            objects[start:end],
            key=lambda obj: _centroid(obj, axis)
        )

        mid = start + object_span // 2
        self.left = BVHNode(objects, start, mid, max_leaf_size)
        self.right = BVHNode(objects, mid, end, max_leaf_size)
        self.bbox = box

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray intersection with BVH node."""
        if self.bbox is None or not self.bbox.hit(ray, t_min, t_max):
            return None

        hit_left = self.left.hit(ray, t_min, t_max) if self.left else None

        # A left hit shrinks the search interval for the right subtree
        limit = hit_left.t if hit_left else t_max
        hit_right = self.right.hit(ray, t_min, limit) if self.right else None

        return hit_right if hit_right else hit_left

    def bounding_box(self) -> Optional[AABB]:
        """Return the bounding box for this node."""
        return self.bbox


class BVH(Hittable):
    """Bounding Volume Hierarchy acceleration structure.

    Provides O(log n) ray intersection instead of O(n) for n objects.
    Every object must report a bounding box.
    """

    def __init__(self, objects: List[Hittable], max_leaf_size: int = 4):
        self.objects = list(objects)

        if any(obj.bounding_box() is None for obj in self.objects):
            raise ValueError("BVH requires every object to have a bounding box")

        if len(self.objects) == 0:
            self.root = None
        else:
            self.root = BVHNode(self.objects, 0, len(self.objects), max_leaf_size)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray intersection using the BVH."""
        if self.root is None:
            return None
        return self.root.hit(ray, t_min, t_max)

    def bounding_box(self) -> Optional[AABB]:
        """Return the bounding box for the entire BVH."""
        if self.root is None:
            return None
        return self.root.bounding_box()

    def __len__(self) -> int:
        return len(self.objects)


def build_bvh(objects: HittableList, max_leaf_size: int = 4) -> BVH:
    """Convenience function to build a BVH from a HittableList."""
    return BVH(list(objects.objects), max_leaf_size)
