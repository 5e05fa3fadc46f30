"""Infinite plane primitive with ray-plane intersection.

A plane is defined by a point on it (origin) and a unit normal. Its tangent
frame is computed once at construction and reported unchanged with every hit.

Ray-plane intersection solves:
    t = dot(origin - ray.origin, normal) / dot(ray.direction, normal)

A ray parallel to the plane (zero denominator) misses, as does any t that is
not positive beyond epsilon (the plane is behind or at the ray origin).

Planes have infinite extent and therefore no bounding box; the acceleration
structure must handle them separately.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.geometry.plane import make_plane, intersect_plane
    >>> # Floor plane through the origin, facing +y (inside a Taichi kernel):
    >>> # plane = make_plane(vec3(0, 0, 0), vec3(0, 1, 0))
    >>> # isect = intersect_plane(ray, plane)
"""

import taichi as ti
import taichi.math as tm

from raykernel.core.intersection import (
    Intersection,
    make_intersection,
    miss_intersection,
)
from raykernel.core.numeric import is_positive
from raykernel.core.ray import Ray, ray_at
from raykernel.core.sampling import coord_system

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane through a point.

    Attributes:
        origin: A point on the plane (vec3).
        normal: The unit plane normal (vec3).
        tangent: Unit tangent of the plane's surface frame (vec3).
        binormal: Unit binormal of the plane's surface frame (vec3).
    """

    origin: vec3
    normal: vec3
    tangent: vec3
    binormal: vec3


@ti.func
def make_plane(origin: vec3, normal: vec3) -> Plane:
    """Create a plane and compute its tangent frame.

    Args:
        origin: A point on the plane.
        normal: The plane normal (need not be unit length, must be non-zero).

    Returns:
        A new Plane with a unit normal and precomputed tangent frame.
    """
    n = tm.normalize(normal)
    tangent, binormal = coord_system(n)
    return Plane(origin=origin, normal=n, tangent=tangent, binormal=binormal)


@ti.func
def plane_distance(ray: Ray, origin: vec3, normal: vec3):
    """Find where a ray crosses the plane through origin with given normal.

    Shared by planes and discs. See
    <http://en.wikipedia.org/wiki/Line%E2%80%93plane_intersection>.

    Args:
        ray: The ray to test.
        origin: A point on the plane.
        normal: The plane normal.

    Returns:
        A tuple (valid, t) where valid is 1 if the ray crosses the plane at a
        parameter that is positive beyond epsilon, and t is that parameter.
        t is meaningless when valid == 0.
    """
    valid = 0
    t = 0.0
    denom = tm.dot(ray.direction, normal)
    if denom != 0.0:
        t = tm.dot(origin - ray.origin, normal) / denom
        if is_positive(t):
            valid = 1
    return valid, t


@ti.func
def intersect_plane(ray: Ray, plane: Plane) -> Intersection:
    """Test a ray against an infinite plane.

    Args:
        ray: The ray to test (direction need not be normalized).
        plane: The plane to test against.

    Returns:
        An Intersection at ray_at(ray, t) carrying the plane's normal and
        tangent frame, or a miss record.
    """
    valid, t = plane_distance(ray, plane.origin, plane.normal)
    result = miss_intersection()
    if valid:
        result = make_intersection(
            ray_at(ray, t), plane.normal, plane.tangent, plane.binormal, t
        )
    return result


@ti.func
def intersect_plane_shadow(ray: Ray, plane: Plane, max_distance: ti.f32) -> ti.i32:
    """Test whether a ray hits a plane before max_distance.

    Args:
        ray: The shadow ray.
        plane: The plane to test against.
        max_distance: Hits at or beyond this parameter do not count.

    Returns:
        1 if the plane blocks the ray within range, 0 otherwise.
    """
    valid, t = plane_distance(ray, plane.origin, plane.normal)
    blocked = 0
    if valid and is_positive(max_distance - t):
        blocked = 1
    return blocked
