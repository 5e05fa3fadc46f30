"""Tagged primitive variant with kind-dispatched queries.

Taichi has no virtual dispatch, so all primitives share one Geom record
tagged with a GeomKind. Each query switches on the kind and forwards to the
primitive-specific function. Fields unused by a kind are zero (a sphere has
no stored normal or frame; a plane has no radius).

Every Geom references a material by id and, when it acts as an area light,
an area-light descriptor by id. Both tables are owned by the scene.

Capabilities by kind:

    ========  =========  ======  ==========
    kind      intersect  bounds  sampleable
    ========  =========  ======  ==========
    PLANE     yes        no      no
    DISC      yes        yes     no
    SPHERE    yes        yes     yes
    ========  =========  ======  ==========
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from raykernel.core.bbox import make_bbox
from raykernel.core.intersection import Intersection, miss_intersection
from raykernel.core.ray import Ray
from raykernel.geometry.disc import (
    Disc,
    disc_bounds,
    intersect_disc,
    intersect_disc_shadow,
    make_disc,
)
from raykernel.geometry.plane import (
    Plane,
    intersect_plane,
    intersect_plane_shadow,
    make_plane,
)
from raykernel.geometry.sphere import (
    Sphere,
    intersect_sphere,
    intersect_sphere_shadow,
    sample_sphere_point,
    sphere_area,
    sphere_bounds,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# light_id value for primitives that are not area lights
NO_LIGHT = -1


class GeomKind(IntEnum):
    """Enumeration of supported primitive kinds."""

    PLANE = 0
    DISC = 1
    SPHERE = 2


@ti.dataclass
class Geom:
    """A primitive of any kind.

    Attributes:
        kind: The GeomKind of the primitive.
        origin: Plane point, disc center or sphere center.
        normal: Unit normal (planes and discs only).
        tangent: Unit tangent of the surface frame (planes and discs only).
        binormal: Unit binormal of the surface frame (planes and discs only).
        radius: Disc or sphere radius (0 for planes).
        material_id: The material used to shade the primitive.
        light_id: The area-light descriptor, or NO_LIGHT.
    """

    kind: ti.i32
    origin: vec3
    normal: vec3
    tangent: vec3
    binormal: vec3
    radius: ti.f32
    material_id: ti.i32
    light_id: ti.i32


@ti.func
def plane_geom(origin: vec3, normal: vec3, material_id: ti.i32) -> Geom:
    """Create a plane Geom. Planes are never area lights."""
    plane = make_plane(origin, normal)
    return Geom(
        kind=int(GeomKind.PLANE),
        origin=plane.origin,
        normal=plane.normal,
        tangent=plane.tangent,
        binormal=plane.binormal,
        radius=0.0,
        material_id=material_id,
        light_id=NO_LIGHT,
    )


@ti.func
def disc_geom(origin: vec3, normal: vec3, radius: ti.f32, material_id: ti.i32) -> Geom:
    """Create a disc Geom. Discs are never area lights."""
    disc = make_disc(origin, normal, radius)
    return Geom(
        kind=int(GeomKind.DISC),
        origin=disc.origin,
        normal=disc.normal,
        tangent=disc.tangent,
        binormal=disc.binormal,
        radius=disc.radius,
        material_id=material_id,
        light_id=NO_LIGHT,
    )


@ti.func
def sphere_geom(
    origin: vec3, radius: ti.f32, material_id: ti.i32, light_id: ti.i32
) -> Geom:
    """Create a sphere Geom, optionally bound to an area light."""
    zero = vec3(0.0, 0.0, 0.0)
    return Geom(
        kind=int(GeomKind.SPHERE),
        origin=origin,
        normal=zero,
        tangent=zero,
        binormal=zero,
        radius=radius,
        material_id=material_id,
        light_id=light_id,
    )


@ti.func
def as_plane(geom: Geom) -> Plane:
    """View a Geom as a Plane."""
    return Plane(
        origin=geom.origin,
        normal=geom.normal,
        tangent=geom.tangent,
        binormal=geom.binormal,
    )


@ti.func
def as_disc(geom: Geom) -> Disc:
    """View a Geom as a Disc."""
    return Disc(
        origin=geom.origin,
        normal=geom.normal,
        tangent=geom.tangent,
        binormal=geom.binormal,
        radius=geom.radius,
    )


@ti.func
def as_sphere(geom: Geom) -> Sphere:
    """View a Geom as a Sphere."""
    return Sphere(origin=geom.origin, radius=geom.radius)


@ti.func
def intersect_geom(ray: Ray, geom: Geom) -> Intersection:
    """Intersect a ray with a primitive of any kind.

    Args:
        ray: The ray to test.
        geom: The primitive to test against.

    Returns:
        The primitive's Intersection, or a miss record for unknown kinds.
    """
    result = miss_intersection()
    if geom.kind == int(GeomKind.PLANE):
        result = intersect_plane(ray, as_plane(geom))
    elif geom.kind == int(GeomKind.DISC):
        result = intersect_disc(ray, as_disc(geom))
    elif geom.kind == int(GeomKind.SPHERE):
        result = intersect_sphere(ray, as_sphere(geom))
    return result


@ti.func
def intersect_geom_shadow(ray: Ray, geom: Geom, max_distance: ti.f32) -> ti.i32:
    """Test whether a primitive blocks a ray before max_distance."""
    blocked = 0
    if geom.kind == int(GeomKind.PLANE):
        blocked = intersect_plane_shadow(ray, as_plane(geom), max_distance)
    elif geom.kind == int(GeomKind.DISC):
        blocked = intersect_disc_shadow(ray, as_disc(geom), max_distance)
    elif geom.kind == int(GeomKind.SPHERE):
        blocked = intersect_sphere_shadow(ray, as_sphere(geom), max_distance)
    return blocked


@ti.func
def geom_bounds(geom: Geom):
    """Compute the bounding box of a primitive.

    Returns:
        A tuple (bounded, box). bounded is 0 for planes, whose extent is
        infinite; box is then a degenerate box at the plane origin and must
        not be used.
    """
    bounded = 0
    box = make_bbox(geom.origin, geom.origin)
    if geom.kind == int(GeomKind.DISC):
        box = disc_bounds(as_disc(geom))
        bounded = 1
    elif geom.kind == int(GeomKind.SPHERE):
        box = sphere_bounds(as_sphere(geom))
        bounded = 1
    return bounded, box


@ti.func
def geom_is_sampleable(geom: Geom) -> ti.i32:
    """Check whether points can be sampled on the primitive's surface."""
    return geom.kind == int(GeomKind.SPHERE)


@ti.func
def geom_sample_point(geom: Geom):
    """Sample a surface point of an area-light-capable primitive.

    Returns:
        A tuple (position, normal). Both are zero for primitives that are not
        sampleable; check geom_is_sampleable() first.
    """
    position = vec3(0.0, 0.0, 0.0)
    normal = vec3(0.0, 0.0, 0.0)
    if geom.kind == int(GeomKind.SPHERE):
        position, normal = sample_sphere_point(as_sphere(geom))
    return position, normal


@ti.func
def geom_area(geom: Geom) -> ti.f32:
    """Surface area of a sampleable primitive, 0 for other kinds."""
    area = 0.0
    if geom.kind == int(GeomKind.SPHERE):
        area = sphere_area(as_sphere(geom))
    return area
