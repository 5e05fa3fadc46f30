"""Axis-aligned bounding boxes.

Primitives report a conservative spatial extent as a BBox for the external
acceleration structure. Boxes are values: bbox_expand() returns a new box.
A box seeded with make_bbox() always satisfies lo <= hi componentwise, and
expansion preserves that.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class BBox:
    """An axis-aligned box given by its min and max corners.

    Attributes:
        lo: The minimum corner (vec3).
        hi: The maximum corner (vec3).
    """

    lo: vec3
    hi: vec3


@ti.func
def make_bbox(a: vec3, b: vec3) -> BBox:
    """Create the smallest box containing two corner points.

    The corners may be given in any order.
    """
    return BBox(lo=ti.min(a, b), hi=ti.max(a, b))


@ti.func
def bbox_expand(box: BBox, point: vec3) -> BBox:
    """Grow a box so that it contains a point.

    Args:
        box: The box to grow.
        point: The point to include.

    Returns:
        The expanded box. Equal to the input when the point is already inside.
    """
    return BBox(lo=ti.min(box.lo, point), hi=ti.max(box.hi, point))


@ti.func
def bbox_contains(box: BBox, point: vec3) -> ti.i32:
    """Check whether a point lies inside a box (boundary inclusive)."""
    inside = 1
    for c in ti.static(range(3)):
        if point[c] < box.lo[c] or point[c] > box.hi[c]:
            inside = 0
    return inside


@ti.func
def bbox_diagonal(box: BBox) -> vec3:
    """Return the vector from the min corner to the max corner."""
    return box.hi - box.lo


@ti.func
def bbox_surface_area(box: BBox) -> ti.f32:
    """Compute the surface area of a box."""
    d = box.hi - box.lo
    return 2.0 * (d.x * d.y + d.x * d.z + d.y * d.z)


@dataclass(frozen=True)
class BBoxInfo:
    """A bounding box read back into Python scope.

    Attributes:
        lo: The minimum corner as (x, y, z).
        hi: The maximum corner as (x, y, z).
    """

    lo: tuple[float, float, float]
    hi: tuple[float, float, float]

    def contains(self, point: tuple[float, float, float], tol: float = 0.0) -> bool:
        """Check whether a point lies inside the box, within a tolerance."""
        return all(
            self.lo[i] - tol <= point[i] <= self.hi[i] + tol for i in range(3)
        )
