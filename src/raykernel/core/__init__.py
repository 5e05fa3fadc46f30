"""Core module.

This module contains the building blocks shared by all primitives:

Components:
    numeric: Epsilon predicates (is_positive, is_nearly_zero)
    ray: Ray and LightRay data structures and vector utilities
    intersection: Intersection record produced by every primitive
    bbox: Axis-aligned bounding boxes
    sampling: Tangent frames and sphere/hemisphere direction sampling

All per-ray operations are Taichi functions (@ti.func).
"""

from .bbox import (
    BBox,
    BBoxInfo,
    bbox_contains,
    bbox_diagonal,
    bbox_expand,
    bbox_surface_area,
    make_bbox,
)
from .intersection import (
    HitInfo,
    Intersection,
    is_hit,
    make_intersection,
    miss_intersection,
)
from .numeric import (
    EPSILON,
    clamp01,
    is_nearly_zero,
    is_nearly_zero_py,
    is_positive,
    is_positive_py,
)
from .ray import (
    LightRay,
    LightRayInfo,
    Ray,
    cross,
    dead_light_ray,
    dot,
    energy,
    is_black,
    is_zero_length,
    length,
    length_squared,
    light_ray_as_ray,
    make_light_ray,
    make_ray,
    make_white_light_ray,
    normalize,
    ray_at,
    unit_ray,
    vec3,
)
from .sampling import (
    coord_system,
    next_normal_float,
    uniform_sample_hemisphere,
    uniform_sample_sphere,
)

__all__ = [
    # Numeric
    "EPSILON",
    "is_nearly_zero",
    "is_positive",
    "is_nearly_zero_py",
    "is_positive_py",
    "clamp01",
    # Ray
    "vec3",
    "Ray",
    "LightRay",
    "LightRayInfo",
    "ray_at",
    "make_ray",
    "unit_ray",
    "make_light_ray",
    "make_white_light_ray",
    "light_ray_as_ray",
    "dead_light_ray",
    "is_black",
    "is_zero_length",
    "energy",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    # Intersection
    "Intersection",
    "HitInfo",
    "make_intersection",
    "miss_intersection",
    "is_hit",
    # Bounding box
    "BBox",
    "BBoxInfo",
    "make_bbox",
    "bbox_expand",
    "bbox_contains",
    "bbox_diagonal",
    "bbox_surface_area",
    # Sampling
    "next_normal_float",
    "coord_system",
    "uniform_sample_sphere",
    "uniform_sample_hemisphere",
]
