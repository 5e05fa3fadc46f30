"""Geometry module for shape primitives.

Components:
    plane: Infinite plane with ray-plane intersection
    disc: Bounded disc built on the plane math
    sphere: Sphere with quadratic intersection, shadow test and sampling
    geom: Tagged Geom variant dispatching queries by GeomKind

All intersection routines are Taichi functions (@ti.func). Primitives answer
closest-hit queries with an Intersection record and shadow queries with a
0/1 flag:
    isect = intersect_geom(ray, geom)
    blocked = intersect_geom_shadow(ray, geom, max_distance)
"""

from .disc import (
    Disc,
    disc_bounds,
    disc_radius_squared,
    intersect_disc,
    intersect_disc_shadow,
    make_disc,
)
from .geom import (
    NO_LIGHT,
    Geom,
    GeomKind,
    as_disc,
    as_plane,
    as_sphere,
    disc_geom,
    geom_area,
    geom_bounds,
    geom_is_sampleable,
    geom_sample_point,
    intersect_geom,
    intersect_geom_shadow,
    plane_geom,
    sphere_geom,
)
from .plane import (
    Plane,
    intersect_plane,
    intersect_plane_shadow,
    make_plane,
    plane_distance,
)
from .sphere import (
    Sphere,
    intersect_sphere,
    intersect_sphere_shadow,
    make_sphere,
    sample_sphere_point,
    sphere_area,
    sphere_bounds,
    sphere_roots,
)

__all__ = [
    "Plane",
    "make_plane",
    "plane_distance",
    "intersect_plane",
    "intersect_plane_shadow",
    "Disc",
    "make_disc",
    "disc_radius_squared",
    "intersect_disc",
    "intersect_disc_shadow",
    "disc_bounds",
    "Sphere",
    "make_sphere",
    "sphere_roots",
    "intersect_sphere",
    "intersect_sphere_shadow",
    "sphere_bounds",
    "sample_sphere_point",
    "sphere_area",
    "Geom",
    "GeomKind",
    "NO_LIGHT",
    "plane_geom",
    "disc_geom",
    "sphere_geom",
    "as_plane",
    "as_disc",
    "as_sphere",
    "intersect_geom",
    "intersect_geom_shadow",
    "geom_bounds",
    "geom_is_sampleable",
    "geom_sample_point",
    "geom_area",
]
