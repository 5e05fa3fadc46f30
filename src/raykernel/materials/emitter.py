"""Emitter (light source) material implementation.

An emitter terminates the light path that hits it. propagate_emitter()
returns a light ray with zero origin and direction, which the integrator reads
as "path finished", and a color equal to the incoming throughput multiplied
component-wise by the emitter's own color:

    outgoing.color = incoming.color * emitter.color

The intersection is ignored and no random numbers are consumed. Other
materials would instead choose a new direction and weight the color by their
BRDF; they share the same {incoming, hit} -> outgoing contract.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.materials.emitter import add_emitter_material
    >>> lamp = add_emitter_material((4.0, 4.0, 4.0))
    >>> # Use propagate_emitter_by_id(lamp, incoming, isect) within a kernel
"""

import logging

import taichi as ti
import taichi.math as tm

from raykernel.core.intersection import Intersection
from raykernel.core.ray import LightRay

# Type alias for 3D vectors
vec3 = tm.vec3

logger = logging.getLogger(__name__)


@ti.dataclass
class EmitterMaterial:
    """Emitter material properties.

    Attributes:
        color: The emitted RGB radiance. Values can exceed 1.0 for HDR.
    """

    color: vec3


@ti.func
def propagate_emitter(color: vec3, incoming: LightRay, isect: Intersection) -> LightRay:
    """Propagate a light ray that reached an emitter.

    Materials take no random generator argument. Any material that needs
    random numbers draws them from the per-thread Taichi generator through
    next_normal_float() in raykernel.core.sampling, seeded by
    ti.init(random_seed=...). Emitters draw none.

    Args:
        color: The emitter color.
        incoming: The light ray arriving at the surface.
        isect: The intersection record (unused by emitters).

    Returns:
        A zero-length light ray carrying incoming.color * color.
    """
    zero = vec3(0.0, 0.0, 0.0)
    return LightRay(origin=zero, direction=zero, color=incoming.color * color)


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of emitter materials in the scene
MAX_EMITTER_MATERIALS = 256

# Storage for emitter material properties
emitter_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_EMITTER_MATERIALS)
num_emitter_materials = ti.field(dtype=ti.i32, shape=())


def clear_emitter_materials() -> None:
    """Clear all emitter materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_emitter_materials[None] = 0


def add_emitter_material(color: tuple[float, float, float]) -> int:
    """Add an emitter material to the material registry.

    Args:
        color: The emitted color as (R, G, B) tuple. Components must be
            non-negative and may exceed 1.0.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If the color does not have three components or any
            component is negative or NaN.
    """
    if len(color) != 3:
        raise ValueError(f"Emitter color must have 3 components, got {len(color)}.")
    for i, component in enumerate(color):
        if not component >= 0.0:
            raise ValueError(f"Emitter color component {i} = {component} is negative or NaN.")

    idx = num_emitter_materials[None]
    if idx >= MAX_EMITTER_MATERIALS:
        raise RuntimeError(
            f"Maximum number of emitter materials ({MAX_EMITTER_MATERIALS}) exceeded"
        )

    emitter_colors[idx] = vec3(color[0], color[1], color[2])
    num_emitter_materials[None] = idx + 1
    logger.debug(f"Added emitter material {idx} with color {tuple(color)}")
    return idx


def get_emitter_material_count() -> int:
    """Get the number of emitter materials in the registry."""
    return int(num_emitter_materials[None])


@ti.func
def get_emitter_color(material_idx: ti.i32) -> vec3:
    """Get the color of an emitter material by index."""
    return emitter_colors[material_idx]


@ti.func
def propagate_emitter_by_id(
    material_idx: ti.i32,
    incoming: LightRay,
    isect: Intersection,
) -> LightRay:
    """Propagate a light ray through an emitter looked up by index.

    Args:
        material_idx: The index of the material in the registry.
        incoming: The light ray arriving at the surface.
        isect: The intersection record.

    Returns:
        The terminated outgoing light ray.
    """
    return propagate_emitter(get_emitter_color(material_idx), incoming, isect)
