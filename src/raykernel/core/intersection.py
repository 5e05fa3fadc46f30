"""Intersection record shared by every geometric primitive.

Every primitive's intersect function returns an Intersection. A miss is an
Intersection with hit == 0 and distance == 0; its geometric fields are zero
and must not be used. Kernels test is_hit() (or the hit flag) before reading
position, normal or the tangent frame.

In Python scope, query helpers return a HitInfo only on a hit and None
otherwise, so a miss can never be mistaken for geometry.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Intersection:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray hit the primitive, 0 on a miss.
        position: The hit point. Only valid if hit == 1.
        normal: The unit surface normal at the hit point. Only valid if hit == 1.
        tangent: Unit tangent of the local surface frame. Only valid if hit == 1.
        binormal: Unit binormal of the local surface frame. Only valid if hit == 1.
        distance: The ray parameter t at the hit. 0 on a miss.
    """

    hit: ti.i32
    position: vec3
    normal: vec3
    tangent: vec3
    binormal: vec3
    distance: ti.f32


@ti.func
def make_intersection(
    position: vec3,
    normal: vec3,
    tangent: vec3,
    binormal: vec3,
    distance: ti.f32,
) -> Intersection:
    """Create an intersection record for a hit.

    The normal is normalized here. The hit flag follows the distance: a
    non-positive distance yields a record that reports a miss.

    Args:
        position: The hit point.
        normal: The surface normal (need not be unit length).
        tangent: Unit tangent of the surface frame.
        binormal: Unit binormal of the surface frame.
        distance: The ray parameter at the hit.

    Returns:
        An Intersection with hit == 1 iff distance > 0.
    """
    hit = 0
    if distance > 0.0:
        hit = 1
    return Intersection(
        hit=hit,
        position=position,
        normal=tm.normalize(normal),
        tangent=tangent,
        binormal=binormal,
        distance=distance,
    )


@ti.func
def miss_intersection() -> Intersection:
    """Create an Intersection indicating no hit.

    Returns:
        An Intersection with hit == 0, distance == 0 and zero vectors.
    """
    zero = vec3(0.0, 0.0, 0.0)
    return Intersection(
        hit=0,
        position=zero,
        normal=zero,
        tangent=zero,
        binormal=zero,
        distance=0.0,
    )


@ti.func
def is_hit(isect: Intersection) -> ti.i32:
    """Check whether an intersection record describes a valid hit."""
    return isect.hit == 1 and isect.distance > 0.0


@dataclass(frozen=True)
class HitInfo:
    """An intersection read back into Python scope.

    Only ever constructed for hits; misses are reported as None.

    Attributes:
        position: The hit point as (x, y, z).
        normal: The unit surface normal.
        tangent: The unit tangent of the surface frame.
        binormal: The unit binormal of the surface frame.
        distance: The ray parameter at the hit (always > 0).
    """

    position: tuple[float, float, float]
    normal: tuple[float, float, float]
    tangent: tuple[float, float, float]
    binormal: tuple[float, float, float]
    distance: float
