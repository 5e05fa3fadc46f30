"""Disc primitive: a bounded patch of a plane.

A disc is the set of points of a plane within radius of its origin. Ray-disc
intersection reuses the plane math and then checks the in-plane distance:

    |hit_point - origin|^2 < radius^2

The comparison is strict, so a ray meeting the rim exactly is a miss. Every
disc hit is also a hit on the supporting plane at the same t.

Only the radius is stored; its square is derived when needed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.geometry.disc import make_disc, intersect_disc
    >>> # Unit disc on the floor (inside a Taichi kernel):
    >>> # disc = make_disc(vec3(0, 0, 0), vec3(0, 1, 0), 1.0)
    >>> # isect = intersect_disc(ray, disc)
"""

import taichi as ti
import taichi.math as tm

from raykernel.core.bbox import BBox, bbox_expand, make_bbox
from raykernel.core.intersection import (
    Intersection,
    make_intersection,
    miss_intersection,
)
from raykernel.core.numeric import is_positive
from raykernel.core.ray import Ray, ray_at
from raykernel.core.sampling import coord_system
from raykernel.geometry.plane import plane_distance

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Disc:
    """A flat disc defined by center, normal and radius.

    Attributes:
        origin: The center of the disc (vec3).
        normal: The unit disc normal (vec3).
        tangent: Unit tangent of the disc's surface frame (vec3).
        binormal: Unit binormal of the disc's surface frame (vec3).
        radius: The disc radius (positive float).
    """

    origin: vec3
    normal: vec3
    tangent: vec3
    binormal: vec3
    radius: ti.f32


@ti.func
def make_disc(origin: vec3, normal: vec3, radius: ti.f32) -> Disc:
    """Create a disc and compute its tangent frame.

    Args:
        origin: The center of the disc.
        normal: The disc normal (need not be unit length, must be non-zero).
        radius: The disc radius.

    Returns:
        A new Disc with a unit normal and precomputed tangent frame.
    """
    n = tm.normalize(normal)
    tangent, binormal = coord_system(n)
    return Disc(origin=origin, normal=n, tangent=tangent, binormal=binormal, radius=radius)


@ti.func
def disc_radius_squared(disc: Disc) -> ti.f32:
    """Return the squared radius of a disc."""
    return disc.radius * disc.radius


@ti.func
def _disc_distance(ray: Ray, disc: Disc):
    """Find the ray parameter at which the ray crosses the disc.

    Returns:
        A tuple (valid, t), valid == 1 only if the crossing lies strictly
        inside the rim and in front of the ray origin.
    """
    valid, t = plane_distance(ray, disc.origin, disc.normal)
    inside = 0
    if valid:
        offset = ray_at(ray, t) - disc.origin
        if tm.dot(offset, offset) < disc_radius_squared(disc):
            inside = 1
    return inside, t


@ti.func
def intersect_disc(ray: Ray, disc: Disc) -> Intersection:
    """Test a ray against a disc.

    See <http://en.wikipedia.org/wiki/Line%E2%80%93plane_intersection> for
    the plane step.

    Args:
        ray: The ray to test (direction need not be normalized).
        disc: The disc to test against.

    Returns:
        An Intersection carrying the disc's normal and tangent frame, or a
        miss record.
    """
    inside, t = _disc_distance(ray, disc)
    result = miss_intersection()
    if inside:
        result = make_intersection(
            ray_at(ray, t), disc.normal, disc.tangent, disc.binormal, t
        )
    return result


@ti.func
def intersect_disc_shadow(ray: Ray, disc: Disc, max_distance: ti.f32) -> ti.i32:
    """Test whether a ray hits a disc before max_distance."""
    inside, t = _disc_distance(ray, disc)
    blocked = 0
    if inside and is_positive(max_distance - t):
        blocked = 1
    return blocked


@ti.func
def disc_bounds(disc: Disc) -> BBox:
    """Compute the axis-aligned bounding box of a disc.

    The box is built from the four corners of the square that circumscribes
    the disc in its own tangent frame: origin +/- tangent*r +/- binormal*r.

    Args:
        disc: The disc to bound.

    Returns:
        A BBox containing the whole disc.
    """
    tr = disc.tangent * disc.radius
    br = disc.binormal * disc.radius

    box = make_bbox(disc.origin + tr + br, disc.origin - tr - br)
    box = bbox_expand(box, disc.origin + tr - br)
    box = bbox_expand(box, disc.origin - tr + br)
    return box
