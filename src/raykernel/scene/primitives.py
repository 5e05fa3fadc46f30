"""Scene-level primitive storage.

Primitives are stored in Taichi fields (Structure of Arrays) so kernels can
address them by index. The tables are filled from Python scope; each add_*
call stores the raw parameters and then runs a small kernel that normalizes
the normal and builds the tangent frame with coord_system(), so the frame is
computed once, by the same code the kernels use.

Materials and area lights are referenced by id only. The tables that own
them live elsewhere and must outlive every primitive that refers to them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.scene.primitives import add_disc, add_sphere, clear_primitives
    >>> clear_primitives()
    >>> add_sphere((0, 0, -1), 0.5, material_id=0)
    >>> add_disc((0, 1, 0), (0, -1, 0), 0.25, material_id=1)
    >>> # Use load_geom(i) and intersect_geom() within a Taichi kernel
"""

import logging

import numpy as np
import taichi as ti
import taichi.math as tm

from raykernel.core.numeric import is_nearly_zero_py, is_positive_py
from raykernel.core.sampling import coord_system
from raykernel.geometry.geom import NO_LIGHT, Geom, GeomKind

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

logger = logging.getLogger(__name__)

# Maximum number of primitives supported in the scene
MAX_GEOMS = 1024

# Primitive storage: Structure of Arrays layout for GPU efficiency
geom_kinds = ti.field(dtype=ti.i32, shape=MAX_GEOMS)
geom_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_GEOMS)
geom_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_GEOMS)
geom_tangents = ti.Vector.field(3, dtype=ti.f32, shape=MAX_GEOMS)
geom_binormals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_GEOMS)
geom_radii = ti.field(dtype=ti.f32, shape=MAX_GEOMS)
geom_material_ids = ti.field(dtype=ti.i32, shape=MAX_GEOMS)
geom_light_ids = ti.field(dtype=ti.i32, shape=MAX_GEOMS)
num_geoms = ti.field(dtype=ti.i32, shape=())


def clear_primitives() -> None:
    """Clear all primitives from the scene.

    Resets the primitive count to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_geoms[None] = 0


@ti.kernel
def _finalize_frame(idx: ti.i32):
    """Normalize a stored normal and build its tangent frame in place."""
    n = tm.normalize(geom_normals[idx])
    tangent, binormal = coord_system(n)
    geom_normals[idx] = n
    geom_tangents[idx] = tangent
    geom_binormals[idx] = binormal


def _validate_normal(normal: tuple[float, float, float]) -> None:
    if is_nearly_zero_py(float(np.linalg.norm(np.asarray(normal, dtype=np.float32)))):
        raise ValueError(f"Normal {tuple(normal)} has zero length.")


def _validate_radius(radius: float) -> None:
    if not is_positive_py(radius):
        raise ValueError(f"Radius = {radius} must be positive.")


def _store(
    kind: GeomKind,
    origin: tuple[float, float, float],
    normal: tuple[float, float, float],
    radius: float,
    material_id: int,
    light_id: int,
) -> int:
    """Append a primitive to the tables and return its index."""
    idx = num_geoms[None]
    if idx >= MAX_GEOMS:
        raise RuntimeError(f"Maximum number of primitives ({MAX_GEOMS}) exceeded")

    geom_kinds[idx] = int(kind)
    geom_origins[idx] = vec3(origin[0], origin[1], origin[2])
    geom_normals[idx] = vec3(normal[0], normal[1], normal[2])
    geom_tangents[idx] = vec3(0.0, 0.0, 0.0)
    geom_binormals[idx] = vec3(0.0, 0.0, 0.0)
    geom_radii[idx] = radius
    geom_material_ids[idx] = material_id
    geom_light_ids[idx] = light_id
    num_geoms[None] = idx + 1

    logger.debug(f"Added {kind.name.lower()} {idx} (material {material_id})")
    return idx


def add_plane(
    origin: tuple[float, float, float],
    normal: tuple[float, float, float],
    material_id: int = 0,
) -> int:
    """Add an infinite plane to the scene.

    Args:
        origin: A point on the plane.
        normal: The plane normal (normalized on storage).
        material_id: The material ID to associate with this plane.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
        ValueError: If the normal has zero length.
    """
    _validate_normal(normal)
    idx = _store(GeomKind.PLANE, origin, normal, 0.0, material_id, NO_LIGHT)
    _finalize_frame(idx)
    return idx


def add_disc(
    origin: tuple[float, float, float],
    normal: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Add a disc to the scene.

    Args:
        origin: The center of the disc.
        normal: The disc normal (normalized on storage).
        radius: The disc radius (must be positive).
        material_id: The material ID to associate with this disc.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
        ValueError: If the normal has zero length or the radius is not positive.
    """
    _validate_normal(normal)
    _validate_radius(radius)
    idx = _store(GeomKind.DISC, origin, normal, radius, material_id, NO_LIGHT)
    _finalize_frame(idx)
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
    light_id: int = NO_LIGHT,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The material ID to associate with this sphere.
        light_id: The area-light descriptor for emissive spheres, or NO_LIGHT.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
        ValueError: If the radius is not positive.
    """
    _validate_radius(radius)
    return _store(GeomKind.SPHERE, center, (0.0, 0.0, 0.0), radius, material_id, light_id)


def get_geom_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_geoms[None])


def get_geom_kind(idx: int) -> GeomKind:
    """Get the kind of a stored primitive (Python side).

    Raises:
        IndexError: If idx does not refer to a stored primitive.
    """
    if not 0 <= idx < get_geom_count():
        raise IndexError(f"Invalid geom_id: {idx}")
    return GeomKind(int(geom_kinds[idx]))


@ti.func
def load_geom(idx: ti.i32) -> Geom:
    """Read a stored primitive into a Geom record.

    Args:
        idx: The primitive index. Must be below the primitive count.

    Returns:
        The Geom stored at idx.
    """
    return Geom(
        kind=geom_kinds[idx],
        origin=geom_origins[idx],
        normal=geom_normals[idx],
        tangent=geom_tangents[idx],
        binormal=geom_binormals[idx],
        radius=geom_radii[idx],
        material_id=geom_material_ids[idx],
        light_id=geom_light_ids[idx],
    )
