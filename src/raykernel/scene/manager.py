"""Unified scene manager coordinating primitives and materials.

This module provides a high-level scene management API that coordinates
primitive storage (planes, discs, spheres) with material assignment. It
tracks which material type each material ID corresponds to, so propagate()
can dispatch to the right material inside a kernel.

The SceneManager maintains:
- A unified material_id space across all material types
- Mapping from material_id to (material_type, type_local_index)
- High-level methods for adding primitives and emissive spheres

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> lamp = scene.add_emitter_material(color=(4.0, 4.0, 4.0))
    >>> scene.add_sphere(center=(0, 2, 0), radius=0.5, material_id=lamp)
    >>> # Use propagate(material_id, incoming, isect) in a Taichi kernel
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti

from raykernel.core.intersection import Intersection
from raykernel.core.ray import LightRay, dead_light_ray
from raykernel.geometry.geom import NO_LIGHT, GeomKind
from raykernel.materials.emitter import (
    add_emitter_material,
    clear_emitter_materials,
    propagate_emitter_by_id,
)
from raykernel.scene.primitives import (
    MAX_GEOMS,
    add_disc,
    add_plane,
    add_sphere,
    clear_primitives,
    get_geom_count,
)

logger = logging.getLogger(__name__)


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used by propagate() to decide which material function to call.
    """

    EMITTER = 0


# Maximum number of materials across all types
MAX_MATERIALS = 256

# Taichi fields for GPU-side material type lookup
# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


def _register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign a unified material ID to a type-local material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    Returns:
        The index into the type-specific material array, or -1 for invalid
        material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def propagate(material_id: ti.i32, incoming: LightRay, isect: Intersection) -> LightRay:
    """Transform an incoming light ray at a hit point using its material.

    Args:
        material_id: The unified material ID of the hit primitive.
        incoming: The light ray arriving at the surface.
        isect: The intersection record of the hit.

    Returns:
        The outgoing light ray. Invalid material IDs yield a dead light ray,
        which terminates the path.

    There is no rng parameter: materials sample from the per-thread Taichi
    generator (see raykernel.core.sampling), so results are reproducible
    for a fixed ti.init(random_seed=...).
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    result = dead_light_ray()
    if mat_type == int(MaterialType.EMITTER):
        result = propagate_emitter_by_id(type_index, incoming, isect)
    return result


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material.
        type_index: The index within the type-specific material array.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class GeomInfo:
    """Information about a primitive in the scene.

    Attributes:
        geom_index: The index in the primitive storage arrays.
        kind: The primitive kind.
        origin: Plane point, disc center or sphere center.
        normal: The normal as given (None for spheres).
        radius: Disc or sphere radius (None for planes).
        material_id: The material ID assigned to the primitive.
        light_id: The area-light descriptor, or NO_LIGHT.
    """

    geom_index: int
    kind: GeomKind
    origin: tuple[float, float, float]
    normal: tuple[float, float, float] | None
    radius: float | None
    material_id: int
    light_id: int = NO_LIGHT


class SceneManager:
    """Unified scene manager coordinating primitives and materials.

    The SceneManager provides a high-level API for building scenes with
    automatic material tracking. It maintains a unified material_id space
    that maps to type-specific material registries.

    The material and primitive tables are module-level Taichi fields, so only
    one SceneManager can be live at a time. Constructing a new one clears the
    tables, which leaves any earlier instance describing an empty scene.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        geoms: List of GeomInfo for all primitives in the scene.

    Example:
        >>> scene = SceneManager()
        >>> lamp = scene.add_emitter_material(color=(10.0, 10.0, 10.0))
        >>> dim = scene.add_emitter_material(color=(0.2, 0.4, 0.6))
        >>> scene.add_plane((0, 0, 0), (0, 1, 0), dim)
        >>> scene.add_disc((0, 3, 0), (0, -1, 0), 0.5, lamp)
        >>> scene.add_emitter_sphere((1, 1, 0), 0.25, color=(5.0, 5.0, 5.0))
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.geoms: list[GeomInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_primitives()
        clear_emitter_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.geoms.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives and materials)."""
        self._clear_all()
        logger.debug("Scene cleared")

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_emitter_material(self, color: tuple[float, float, float]) -> int:
        """Add an emitter material to the scene.

        Args:
            color: The emitted color as (R, G, B). Components must be
                non-negative and may exceed 1.0.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any color component is negative.
        """
        type_index = add_emitter_material(color)
        material_id = _register_material(MaterialType.EMITTER, type_index)

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=MaterialType.EMITTER,
                type_index=type_index,
                params={"color": tuple(color)},
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_plane(
        self,
        origin: tuple[float, float, float],
        normal: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add an infinite plane to the scene.

        Returns:
            The index of the added primitive.

        Raises:
            RuntimeError: If the maximum number of primitives is exceeded.
            ValueError: If material_id is invalid or the normal has zero length.
        """
        self._check_material_id(material_id)
        geom_index = add_plane(origin, normal, material_id)
        self.geoms.append(
            GeomInfo(
                geom_index=geom_index,
                kind=GeomKind.PLANE,
                origin=tuple(origin),
                normal=tuple(normal),
                radius=None,
                material_id=material_id,
            )
        )
        return geom_index

    def add_disc(
        self,
        origin: tuple[float, float, float],
        normal: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a disc to the scene.

        Returns:
            The index of the added primitive.

        Raises:
            RuntimeError: If the maximum number of primitives is exceeded.
            ValueError: If material_id, normal or radius is invalid.
        """
        self._check_material_id(material_id)
        geom_index = add_disc(origin, normal, radius, material_id)
        self.geoms.append(
            GeomInfo(
                geom_index=geom_index,
                kind=GeomKind.DISC,
                origin=tuple(origin),
                normal=tuple(normal),
                radius=radius,
                material_id=material_id,
            )
        )
        return geom_index

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
        light_id: int = NO_LIGHT,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The unified material ID to assign to the sphere.
            light_id: The area-light descriptor, or NO_LIGHT.

        Returns:
            The index of the added primitive.

        Raises:
            RuntimeError: If the maximum number of primitives is exceeded.
            ValueError: If material_id or radius is invalid, or light_id is
                already used by another primitive.
        """
        self._check_material_id(material_id)
        if light_id != NO_LIGHT and any(g.light_id == light_id for g in self.geoms):
            raise ValueError(f"Duplicate light_id: {light_id}")
        geom_index = add_sphere(center, radius, material_id, light_id)
        self.geoms.append(
            GeomInfo(
                geom_index=geom_index,
                kind=GeomKind.SPHERE,
                origin=tuple(center),
                normal=None,
                radius=radius,
                material_id=material_id,
                light_id=light_id,
            )
        )
        return geom_index

    def add_emitter_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a spherical area light with a new emitter material.

        The sphere gets one more than the highest light id in use (0 for the
        first light), so the integrator can sample it with
        geom_sample_point().

        Returns:
            Tuple of (geom_index, material_id).
        """
        material_id = self.add_emitter_material(color)
        light_id = max((g.light_id for g in self.geoms), default=NO_LIGHT) + 1
        geom_index = self.add_sphere(center, radius, material_id, light_id)
        return geom_index, material_id

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_geom_count(self) -> int:
        """Get the number of primitives in the scene."""
        return get_geom_count()

    def get_light_geoms(self) -> list[GeomInfo]:
        """Get the primitives registered as area lights, ordered by light id."""
        lights = [g for g in self.geoms if g.light_id != NO_LIGHT]
        return sorted(lights, key=lambda g: g.light_id)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_geoms() -> int:
        """Get the maximum number of primitives supported."""
        return MAX_GEOMS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
