"""Python-scope queries against stored primitives and materials.

Kernels use load_geom() / intersect_geom() / propagate() directly. This module
wraps the same functions in small kernels for callers that live in Python
scope (tools, tests, scene debugging). Results are read back into frozen
dataclasses, and a query that can miss returns None instead of a record whose
fields must not be read.

Each call launches one kernel on a single ray, so this is a debugging and
validation interface, not a rendering path.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.scene.primitives import add_disc
    >>> from raykernel.scene.queries import intersect
    >>> disc = add_disc((0, 0, 0), (0, 1, 0), 1.0)
    >>> hit = intersect(disc, origin=(0, 5, 0), direction=(0, -1, 0))
    >>> hit.distance
    5.0
"""

import taichi as ti
import taichi.math as tm

from raykernel.core.bbox import BBoxInfo
from raykernel.core.intersection import HitInfo, is_hit, miss_intersection
from raykernel.core.ray import LightRay, LightRayInfo, Ray
from raykernel.geometry.geom import (
    geom_area,
    geom_bounds,
    geom_is_sampleable,
    geom_sample_point,
    intersect_geom,
    intersect_geom_shadow,
)
from raykernel.scene.manager import num_materials, propagate
from raykernel.scene.primitives import get_geom_count, load_geom

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Single-ray result storage
_out_flag = ti.field(dtype=ti.i32, shape=())
_out_scalar = ti.field(dtype=ti.f32, shape=())
_out_vectors = ti.Vector.field(3, dtype=ti.f32, shape=4)


def _to_vec(v: tuple[float, float, float]):
    return vec3(float(v[0]), float(v[1]), float(v[2]))


def _read_vector(slot: int) -> tuple[float, float, float]:
    x, y, z = _out_vectors.to_numpy()[slot].tolist()
    return (x, y, z)


def _check_geom_id(geom_id: int) -> None:
    if not 0 <= geom_id < get_geom_count():
        raise IndexError(f"Invalid geom_id: {geom_id}")


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _intersect_kernel(geom_id: ti.i32, origin: vec3, direction: vec3):
    isect = intersect_geom(Ray(origin=origin, direction=direction), load_geom(geom_id))
    _out_flag[None] = is_hit(isect)
    _out_scalar[None] = isect.distance
    _out_vectors[0] = isect.position
    _out_vectors[1] = isect.normal
    _out_vectors[2] = isect.tangent
    _out_vectors[3] = isect.binormal


@ti.kernel
def _shadow_kernel(geom_id: ti.i32, origin: vec3, direction: vec3, max_distance: ti.f32):
    ray = Ray(origin=origin, direction=direction)
    _out_flag[None] = intersect_geom_shadow(ray, load_geom(geom_id), max_distance)


@ti.kernel
def _bounds_kernel(geom_id: ti.i32):
    bounded, box = geom_bounds(load_geom(geom_id))
    _out_flag[None] = bounded
    _out_vectors[0] = box.lo
    _out_vectors[1] = box.hi


@ti.kernel
def _sample_kernel(geom_id: ti.i32):
    geom = load_geom(geom_id)
    _out_flag[None] = geom_is_sampleable(geom)
    position, normal = geom_sample_point(geom)
    _out_vectors[0] = position
    _out_vectors[1] = normal


@ti.kernel
def _area_kernel(geom_id: ti.i32):
    geom = load_geom(geom_id)
    _out_flag[None] = geom_is_sampleable(geom)
    _out_scalar[None] = geom_area(geom)


@ti.kernel
def _propagate_kernel(material_id: ti.i32, origin: vec3, direction: vec3, color: vec3):
    incoming = LightRay(origin=origin, direction=direction, color=color)
    outgoing = propagate(material_id, incoming, miss_intersection())
    _out_vectors[0] = outgoing.origin
    _out_vectors[1] = outgoing.direction
    _out_vectors[2] = outgoing.color


# =============================================================================
# Public API
# =============================================================================


def intersect(
    geom_id: int,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> HitInfo | None:
    """Intersect a single ray with a stored primitive.

    Args:
        geom_id: The primitive index.
        origin: The ray origin.
        direction: The ray direction (need not be normalized).

    Returns:
        A HitInfo on a hit, None on a miss.

    Raises:
        IndexError: If geom_id does not refer to a stored primitive.
    """
    _check_geom_id(geom_id)
    _intersect_kernel(geom_id, _to_vec(origin), _to_vec(direction))
    if _out_flag[None] == 0:
        return None
    return HitInfo(
        position=_read_vector(0),
        normal=_read_vector(1),
        tangent=_read_vector(2),
        binormal=_read_vector(3),
        distance=float(_out_scalar[None]),
    )


def intersect_shadow(
    geom_id: int,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_distance: float,
) -> bool:
    """Test whether a stored primitive blocks a ray before max_distance.

    Raises:
        IndexError: If geom_id does not refer to a stored primitive.
    """
    _check_geom_id(geom_id)
    _shadow_kernel(geom_id, _to_vec(origin), _to_vec(direction), max_distance)
    return bool(_out_flag[None])


def bounds(geom_id: int) -> BBoxInfo | None:
    """Get the bounding box of a stored primitive.

    Returns:
        The BBoxInfo, or None for unbounded primitives (planes).

    Raises:
        IndexError: If geom_id does not refer to a stored primitive.
    """
    _check_geom_id(geom_id)
    _bounds_kernel(geom_id)
    if _out_flag[None] == 0:
        return None
    return BBoxInfo(lo=_read_vector(0), hi=_read_vector(1))


def sample_point(
    geom_id: int,
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Sample a point on the surface of an area-light-capable primitive.

    Returns:
        A tuple (position, normal).

    Raises:
        IndexError: If geom_id does not refer to a stored primitive.
        ValueError: If the primitive cannot be sampled.
    """
    _check_geom_id(geom_id)
    _sample_kernel(geom_id)
    if _out_flag[None] == 0:
        raise ValueError(f"Primitive {geom_id} does not support surface sampling")
    return _read_vector(0), _read_vector(1)


def area(geom_id: int) -> float:
    """Get the surface area of an area-light-capable primitive.

    Raises:
        IndexError: If geom_id does not refer to a stored primitive.
        ValueError: If the primitive cannot be sampled.
    """
    _check_geom_id(geom_id)
    _area_kernel(geom_id)
    if _out_flag[None] == 0:
        raise ValueError(f"Primitive {geom_id} does not support surface sampling")
    return float(_out_scalar[None])


def propagate_color(
    material_id: int,
    color: tuple[float, float, float],
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0),
    direction: tuple[float, float, float] = (0.0, 0.0, 1.0),
) -> LightRayInfo:
    """Propagate a light ray through a stored material.

    Args:
        material_id: The unified material ID.
        color: The incoming light ray's color.
        origin: The incoming light ray's origin.
        direction: The incoming light ray's direction.

    Returns:
        The outgoing light ray.

    Raises:
        IndexError: If material_id does not refer to a stored material.
    """
    if not 0 <= material_id < num_materials[None]:
        raise IndexError(f"Invalid material_id: {material_id}")
    _propagate_kernel(material_id, _to_vec(origin), _to_vec(direction), _to_vec(color))
    return LightRayInfo(
        origin=_read_vector(0),
        direction=_read_vector(1),
        color=_read_vector(2),
    )
